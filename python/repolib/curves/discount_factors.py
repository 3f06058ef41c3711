# SPDX-License-Identifier: LicenseRef-Rateslib-Dual
#
# Copyright (c) 2026 Siffrorna Technology Limited
#
# Dual-licensed: Free Educational Licence or Paid Commercial Licence (commercial/professional use)
# Source-available, not open source.
#
# See LICENSE and https://rateslib.com/py/en/latest/i_licence.html for details,
# and/or contact info (at) rateslib (dot) com
####################################################################################################

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from datetime import datetime, timedelta
from math import exp, log
from typing import TYPE_CHECKING

import numpy as np

from repolib.default import plot
from repolib.enums.generics import NoInput, _drb
from repolib.enums.parameters import ValueType
from repolib.errors import VE_DISCOUNT_FACTORS_TYPE
from repolib.scheduling import dcf
from repolib.sensitivity import (
    CurrencyParameterSensitivity,
    IssuerCurveZeroRateSensitivity,
    RepoCurveZeroRateSensitivity,
    ZeroRateSensitivity,
)

if TYPE_CHECKING:
    from repolib.curves.curve import InterpolatedNodalCurve
    from repolib.default import PlotOutput
    from repolib.identifiers import LegalEntityGroup, RepoGroup
    from repolib.typing import Arr1dF64  # pragma: no cover


class DiscountFactors(metaclass=ABCMeta):
    """
    Abstract base class for a view of a curve as discount factors from a valuation date.

    Parameters
    ----------
    currency : str
        The currency of the discounting curve.
    valuation_date : datetime
        The date at which the discount factor is one.
    curve : InterpolatedNodalCurve
        The underlying curve whose x-values are year fractions under its day count.
    """

    def __init__(self, currency: str, valuation_date: datetime, curve: InterpolatedNodalCurve):
        self._currency = currency.lower()
        self._valuation_date = valuation_date
        self._curve = curve

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def valuation_date(self) -> datetime:
        return self._valuation_date

    @property
    def curve(self) -> InterpolatedNodalCurve:
        return self._curve

    def relative_year_fraction(self, date: datetime) -> float:
        return dcf(self._valuation_date, date, self._curve.metadata.day_count)

    def discount_factor(self, date: datetime) -> float:
        return self._discount_factor(self.relative_year_fraction(date))

    def zero_rate(self, date: datetime) -> float:
        """The continuously compounded zero rate to ``date``."""
        return self._zero_rate(self.relative_year_fraction(date))

    def zero_rate_point_sensitivity(
        self, date: datetime, sensitivity_currency: str | NoInput = NoInput(0)
    ) -> ZeroRateSensitivity:
        """
        Return the sensitivity of the discount factor at ``date`` to the zero rate at that date,
        which is :math:`-t \\cdot DF(t)`.
        """
        t = self.relative_year_fraction(date)
        return ZeroRateSensitivity(
            curve_currency=self._currency,
            year_fraction=t,
            currency=_drb(self._currency, sensitivity_currency).lower(),
            sensitivity=-t * self._discount_factor(t),
        )

    def parameter_sensitivity(self, point: ZeroRateSensitivity) -> CurrencyParameterSensitivity:
        """Convert a zero rate point sensitivity into a sensitivity to the curve parameters."""
        weights = self._zero_rate_parameter_sensitivity(point.year_fraction)
        return CurrencyParameterSensitivity(
            curve_name=self._curve.name,
            currency=point.currency,
            sensitivity=point.sensitivity * weights,
            parameter_metadata=self._curve.metadata.parameter_metadata or None,
        )

    def with_curve(self, curve: InterpolatedNodalCurve) -> DiscountFactors:
        return type(self)(self._currency, self._valuation_date, curve)

    def plot(self, end: datetime | NoInput = NoInput(0), points: int = 100) -> PlotOutput:
        """
        Plot the zero rates of the curve from the valuation date to ``end``, which defaults to
        roughly the date of the last node.
        """
        if isinstance(end, NoInput):
            end = self._valuation_date + timedelta(days=int(self._curve.x_values[-1] * 365) + 1)
        days = np.linspace(1, (end - self._valuation_date).days, points)
        x = [self._valuation_date + timedelta(days=int(d)) for d in days]
        y = [self.zero_rate(_) * 100 for _ in x]
        return plot([x], [y], labels=[self._curve.name])

    @abstractmethod
    def _discount_factor(self, t: float) -> float:
        pass  # pragma: no cover

    @abstractmethod
    def _zero_rate(self, t: float) -> float:
        pass  # pragma: no cover

    @abstractmethod
    def _zero_rate_parameter_sensitivity(self, t: float) -> Arr1dF64:
        pass  # pragma: no cover

    def __repr__(self) -> str:
        return f"<repolib.{type(self).__name__}:{self._curve.name}:{self._currency}>"


class ZeroRateDiscountFactors(DiscountFactors):
    """
    Discount factors from a curve of continuously compounded zero rates,
    :math:`DF(t) = e^{-z(t) t}`.
    """

    def _discount_factor(self, t: float) -> float:
        return exp(-self._curve.y_value(t) * t)

    def _zero_rate(self, t: float) -> float:
        return self._curve.y_value(t)

    def _zero_rate_parameter_sensitivity(self, t: float) -> Arr1dF64:
        return self._curve.y_value_parameter_sensitivity(t)


class SimpleDiscountFactors(DiscountFactors):
    """
    Discount factors read directly from a curve of discount factor values.
    """

    def _discount_factor(self, t: float) -> float:
        return self._curve.y_value(t)

    def _zero_rate(self, t: float) -> float:
        if t == 0.0:
            t = 1.0 / 365.0
        return -log(self._curve.y_value(t)) / t

    def _zero_rate_parameter_sensitivity(self, t: float) -> Arr1dF64:
        if t == 0.0:
            return np.zeros(self._curve.parameter_count)
        # z = -ln(DF) / t  =>  dz/dDF = -1 / (t DF)
        df = self._curve.y_value(t)
        return -1.0 / (t * df) * self._curve.y_value_parameter_sensitivity(t)


def discount_factors(
    currency: str, valuation_date: datetime, curve: InterpolatedNodalCurve
) -> DiscountFactors:
    """
    Create the :class:`DiscountFactors` view matching the y-value type of ``curve``.
    """
    y_value_type = curve.metadata.y_value_type
    if y_value_type == ValueType.ZeroRate:
        return ZeroRateDiscountFactors(currency, valuation_date, curve)
    elif y_value_type == ValueType.DiscountFactor:
        return SimpleDiscountFactors(currency, valuation_date, curve)
    raise ValueError(VE_DISCOUNT_FACTORS_TYPE.format(curve.name, y_value_type))


class RepoCurveDiscountFactors:
    """
    Discount factors of the repo curve of a :class:`~repolib.identifiers.RepoGroup`.
    """

    def __init__(self, discount_factors: DiscountFactors, repo_group: RepoGroup) -> None:
        self.discount_factors = discount_factors
        self.repo_group = repo_group

    @property
    def currency(self) -> str:
        return self.discount_factors.currency

    @property
    def valuation_date(self) -> datetime:
        return self.discount_factors.valuation_date

    def discount_factor(self, date: datetime) -> float:
        return self.discount_factors.discount_factor(date)

    def zero_rate_point_sensitivity(
        self, date: datetime, sensitivity_currency: str | NoInput = NoInput(0)
    ) -> RepoCurveZeroRateSensitivity:
        p = self.discount_factors.zero_rate_point_sensitivity(date, sensitivity_currency)
        return RepoCurveZeroRateSensitivity(
            p.curve_currency, p.year_fraction, p.currency, p.sensitivity, repo_group=self.repo_group
        )

    def parameter_sensitivity(self, point: ZeroRateSensitivity) -> CurrencyParameterSensitivity:
        return self.discount_factors.parameter_sensitivity(point)


class IssuerCurveDiscountFactors:
    """
    Discount factors of the issuer curve of a :class:`~repolib.identifiers.LegalEntityGroup`.
    """

    def __init__(
        self, discount_factors: DiscountFactors, legal_entity_group: LegalEntityGroup
    ) -> None:
        self.discount_factors = discount_factors
        self.legal_entity_group = legal_entity_group

    @property
    def currency(self) -> str:
        return self.discount_factors.currency

    @property
    def valuation_date(self) -> datetime:
        return self.discount_factors.valuation_date

    def discount_factor(self, date: datetime) -> float:
        return self.discount_factors.discount_factor(date)

    def zero_rate_point_sensitivity(
        self, date: datetime, sensitivity_currency: str | NoInput = NoInput(0)
    ) -> IssuerCurveZeroRateSensitivity:
        p = self.discount_factors.zero_rate_point_sensitivity(date, sensitivity_currency)
        return IssuerCurveZeroRateSensitivity(
            p.curve_currency,
            p.year_fraction,
            p.currency,
            p.sensitivity,
            legal_entity_group=self.legal_entity_group,
        )

    def parameter_sensitivity(self, point: ZeroRateSensitivity) -> CurrencyParameterSensitivity:
        return self.discount_factors.parameter_sensitivity(point)
