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

"""
Calibration measures: the value of a calibration trade to drive to zero, and its sensitivity
to the curve parameters, registered by trade kind.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from repolib.calibration.market_quote import MarketQuoteSensitivityCalculator
from repolib.enums.parameters import MissingJacobian, TradeKind
from repolib.errors import TE_UNSUPPORTED_TRADE, VE_DUPLICATE_TRADE_KIND
from repolib.pricing.bill import DiscountingBillProductPricer
from repolib.pricing.repo import DiscountingRepoProductPricer

if TYPE_CHECKING:
    from repolib.calibration.market_quote import CurveParameterSize
    from repolib.provider import LegalEntityDiscountingProvider
    from repolib.sensitivity import CurrencyParameterSensitivities, PointSensitivities
    from repolib.typing import Any, Arr1dF64, Callable, ResolvedTrade, Sequence  # pragma: no cover


class CalibrationMeasure(metaclass=ABCMeta):
    """
    Abstract base class for the measure calibrating curves to trades of a single kind.
    """

    @property
    @abstractmethod
    def kind(self) -> TradeKind:
        """The kind of resolved trade this measure applies to."""
        pass  # pragma: no cover

    @abstractmethod
    def value(self, trade: Any, provider: LegalEntityDiscountingProvider) -> float:
        pass  # pragma: no cover

    @abstractmethod
    def sensitivity(
        self, trade: Any, provider: LegalEntityDiscountingProvider
    ) -> CurrencyParameterSensitivities:
        pass  # pragma: no cover


class TradeCalibrationMeasure(CalibrationMeasure):
    """
    A calibration measure defined by a value function and a point sensitivity function of a
    resolved trade.

    Parameters
    ----------
    name : str
        The name of the measure.
    kind : TradeKind
        The kind of resolved trade the measure applies to.
    value_fn : Callable
        Returns the value of the trade for a provider.
    sensitivity_fn : Callable
        Returns the point sensitivities of the value for a provider.
    market_quote : MarketQuoteSensitivityCalculator, optional
        If given, the parameter sensitivities are transformed into sensitivities to the market
        quotes of the calibration instruments of the curves.
    """

    def __init__(
        self,
        name: str,
        kind: TradeKind,
        value_fn: Callable[[Any, LegalEntityDiscountingProvider], float],
        sensitivity_fn: Callable[[Any, LegalEntityDiscountingProvider], PointSensitivities],
        market_quote: MarketQuoteSensitivityCalculator | None = None,
    ) -> None:
        self.name = name
        self._kind = kind
        self._value_fn = value_fn
        self._sensitivity_fn = sensitivity_fn
        self._market_quote = market_quote

    @property
    def kind(self) -> TradeKind:
        return self._kind

    def value(self, trade: Any, provider: LegalEntityDiscountingProvider) -> float:
        return self._value_fn(trade, provider)

    def sensitivity(
        self, trade: Any, provider: LegalEntityDiscountingProvider
    ) -> CurrencyParameterSensitivities:
        points = self._sensitivity_fn(trade, provider)
        sens = provider.parameter_sensitivity(points)
        if self._market_quote is not None:
            sens = self._market_quote.sensitivity(sens, provider)
        return sens

    def __repr__(self) -> str:
        return f"<repolib.TradeCalibrationMeasure:{self.name}>"


_REPO = DiscountingRepoProductPricer()
_BILL = DiscountingBillProductPricer()

REPO_PAR_SPREAD = TradeCalibrationMeasure(
    "RepoParSpreadDiscounting",
    TradeKind.Repo,
    lambda t, p: _REPO.par_spread(t.product, p),
    lambda t, p: _REPO.par_spread_sensitivity(t.product, p),
)
BILL_PAR_SPREAD = TradeCalibrationMeasure(
    "BillParSpreadDiscounting",
    TradeKind.Bill,
    lambda t, p: _BILL.par_spread(t.product, p),
    lambda t, p: _BILL.par_spread_sensitivity(t.product, p),
)
REPO_MARKET_QUOTE = TradeCalibrationMeasure(
    "RepoMarketQuote",
    TradeKind.Repo,
    lambda t, p: _REPO.par_rate(t.product, p),
    lambda t, p: _REPO.par_rate_sensitivity(t.product, p),
    MarketQuoteSensitivityCalculator(MissingJacobian.Ignore),
)
BILL_MARKET_QUOTE = TradeCalibrationMeasure(
    "BillMarketQuote",
    TradeKind.Bill,
    lambda t, p: _BILL.par_rate(t.product, p),
    lambda t, p: _BILL.par_rate_sensitivity(t.product, p),
    MarketQuoteSensitivityCalculator(MissingJacobian.Ignore),
)
REPO_PRESENT_VALUE = TradeCalibrationMeasure(
    "RepoPresentValueDiscounting",
    TradeKind.Repo,
    lambda t, p: _REPO.present_value(t.product, p),
    lambda t, p: _REPO.present_value_sensitivity(t.product, p),
    MarketQuoteSensitivityCalculator(MissingJacobian.Raise),
)
BILL_PRESENT_VALUE = TradeCalibrationMeasure(
    "BillPresentValueDiscounting",
    TradeKind.Bill,
    lambda t, p: _BILL.present_value(t.product, p),
    lambda t, p: _BILL.present_value_sensitivity(t.product, p),
    MarketQuoteSensitivityCalculator(MissingJacobian.Raise),
)


class CalibrationMeasures:
    """
    A registry of :class:`CalibrationMeasure` keyed by the kind of trade they apply to.

    Parameters
    ----------
    name : str
        The name of the registry.
    measures : Sequence[CalibrationMeasure]
        The measures, at most one per :class:`~repolib.enums.TradeKind`.

    Notes
    -----
    A resolved trade declares its kind with a ``kind`` class attribute. A trade without a
    registered kind raises a *TypeError*.
    """

    def __init__(self, name: str, measures: Sequence[CalibrationMeasure]) -> None:
        if not name:
            raise ValueError("`name` of calibration measures must not be empty.")
        self.name = name
        self._measures: dict[TradeKind, CalibrationMeasure] = {}
        for measure in measures:
            if measure.kind in self._measures:
                raise ValueError(VE_DUPLICATE_TRADE_KIND.format(name, measure.kind))
            self._measures[measure.kind] = measure

    @property
    def trade_kinds(self) -> set[TradeKind]:
        return set(self._measures.keys())

    def value(self, trade: ResolvedTrade, provider: LegalEntityDiscountingProvider) -> float:
        return self._measure(trade).value(trade, provider)

    def sensitivity(
        self, trade: ResolvedTrade, provider: LegalEntityDiscountingProvider
    ) -> CurrencyParameterSensitivities:
        return self._measure(trade).sensitivity(trade, provider)

    def derivative(
        self,
        trade: ResolvedTrade,
        provider: LegalEntityDiscountingProvider,
        curve_order: Sequence[CurveParameterSize],
    ) -> Arr1dF64:
        """
        Return the sensitivity of the value of the trade to each parameter of the curves in
        ``curve_order``, concatenated in that order.

        Sensitivities in different currencies to the same curve are summed. A curve to which
        the trade is insensitive contributes zeros.
        """
        unit = self.sensitivity(trade, provider).to_unit()
        return np.concatenate(
            [unit.get(c.name, np.zeros(c.parameter_count)) for c in curve_order]
            or [np.zeros(0)]
        )

    def _measure(self, trade: ResolvedTrade) -> CalibrationMeasure:
        kind = getattr(trade, "kind", None)
        try:
            return self._measures[kind]  # type: ignore[index]
        except KeyError:
            raise TypeError(TE_UNSUPPORTED_TRADE.format(type(trade).__name__, self.name))

    def __repr__(self) -> str:
        return f"<repolib.CalibrationMeasures:{self.name}>"


PAR_SPREAD = CalibrationMeasures("ParSpread", [REPO_PAR_SPREAD, BILL_PAR_SPREAD])
MARKET_QUOTE = CalibrationMeasures("MarketQuote", [REPO_MARKET_QUOTE, BILL_MARKET_QUOTE])
PRESENT_VALUE = CalibrationMeasures("PresentValue", [REPO_PRESENT_VALUE, BILL_PRESENT_VALUE])
