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
Point and parameter sensitivities.

Pricers return :class:`PointSensitivities`, sensitivities to the zero rate of a curve at a
single point in time. The discounting provider converts them into
:class:`CurrencyParameterSensitivities`, sensitivities to the parameters of named curves.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

import numpy as np
from pandas import DataFrame, MultiIndex

from repolib import defaults
from repolib.identifiers import LegalEntityGroup, RepoGroup

if TYPE_CHECKING:
    from repolib.curves.metadata import ParameterMetadata
    from repolib.typing import Arr1dF64, Sequence  # pragma: no cover


@dataclass(frozen=True)
class ZeroRateSensitivity:
    """
    Sensitivity to the zero rate of a discount curve at a year fraction.

    ``curve_currency`` is the currency of the discounting curve and ``currency`` the currency
    in which the ``sensitivity`` is expressed.
    """

    curve_currency: str
    year_fraction: float
    currency: str
    sensitivity: float

    def _key(self) -> tuple:
        return (type(self).__name__, self.curve_currency, self.year_fraction, self.currency)

    def with_sensitivity(self, sensitivity: float) -> ZeroRateSensitivity:
        return replace(self, sensitivity=sensitivity)

    def multiplied_by(self, factor: float) -> ZeroRateSensitivity:
        return replace(self, sensitivity=self.sensitivity * factor)


@dataclass(frozen=True)
class RepoCurveZeroRateSensitivity(ZeroRateSensitivity):
    """Point sensitivity to the repo curve of a :class:`~repolib.identifiers.RepoGroup`."""

    repo_group: RepoGroup = field(kw_only=True)

    def _key(self) -> tuple:
        return (*super()._key(), self.repo_group)


@dataclass(frozen=True)
class IssuerCurveZeroRateSensitivity(ZeroRateSensitivity):
    """Point sensitivity to the issuer curve of a :class:`~repolib.identifiers.LegalEntityGroup`."""

    legal_entity_group: LegalEntityGroup = field(kw_only=True)

    def _key(self) -> tuple:
        return (*super()._key(), self.legal_entity_group)


class PointSensitivities:
    """
    An immutable collection of point sensitivities.
    """

    def __init__(self, sensitivities: Sequence[ZeroRateSensitivity] = ()) -> None:
        self._sensitivities = tuple(sensitivities)

    @classmethod
    def empty(cls) -> PointSensitivities:
        return cls(())

    @property
    def sensitivities(self) -> tuple[ZeroRateSensitivity, ...]:
        return self._sensitivities

    def __len__(self) -> int:
        return len(self._sensitivities)

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self._sensitivities)

    def combined_with(self, other: PointSensitivities | ZeroRateSensitivity) -> PointSensitivities:
        if isinstance(other, ZeroRateSensitivity):
            return PointSensitivities((*self._sensitivities, other))
        return PointSensitivities((*self._sensitivities, *other.sensitivities))

    def multiplied_by(self, factor: float) -> PointSensitivities:
        return PointSensitivities([s.multiplied_by(factor) for s in self._sensitivities])

    def normalized(self) -> PointSensitivities:
        """Merge sensitivities to the same curve point by summing them."""
        merged: dict[tuple, ZeroRateSensitivity] = {}
        for s in self._sensitivities:
            key = s._key()
            if key in merged:
                merged[key] = merged[key].with_sensitivity(merged[key].sensitivity + s.sensitivity)
            else:
                merged[key] = s
        return PointSensitivities(list(merged.values()))

    def __repr__(self) -> str:
        return f"<repolib.PointSensitivities ({len(self)} points)>"


@dataclass(frozen=True, eq=False)
class CurrencyParameterSensitivity:
    """
    Sensitivity of a value, expressed in ``currency``, to each parameter of a named curve.
    """

    curve_name: str
    currency: str
    sensitivity: Arr1dF64
    parameter_metadata: tuple[ParameterMetadata, ...] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "sensitivity", np.asarray(self.sensitivity, dtype=float))

    @property
    def parameter_count(self) -> int:
        return len(self.sensitivity)

    def multiplied_by(self, factor: float) -> CurrencyParameterSensitivity:
        return replace(self, sensitivity=self.sensitivity * factor)

    def plus(self, other: Arr1dF64) -> CurrencyParameterSensitivity:
        return replace(self, sensitivity=self.sensitivity + np.asarray(other))

    def total(self) -> float:
        return float(np.sum(self.sensitivity))

    def _labels(self) -> list[str]:
        if self.parameter_metadata is None:
            return [str(i) for i in range(self.parameter_count)]
        return [m.label for m in self.parameter_metadata]


class CurrencyParameterSensitivities:
    """
    An immutable collection of :class:`CurrencyParameterSensitivity`, unique by curve name and
    currency.
    """

    def __init__(self, sensitivities: Sequence[CurrencyParameterSensitivity] = ()) -> None:
        merged: dict[tuple[str, str], CurrencyParameterSensitivity] = {}
        for s in sensitivities:
            key = (s.curve_name, s.currency)
            merged[key] = merged[key].plus(s.sensitivity) if key in merged else s
        self._sensitivities = tuple(merged.values())

    @classmethod
    def empty(cls) -> CurrencyParameterSensitivities:
        return cls(())

    @property
    def sensitivities(self) -> tuple[CurrencyParameterSensitivity, ...]:
        return self._sensitivities

    def __len__(self) -> int:
        return len(self._sensitivities)

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self._sensitivities)

    def combined_with(
        self, other: CurrencyParameterSensitivities | CurrencyParameterSensitivity
    ) -> CurrencyParameterSensitivities:
        """Combine with other sensitivities, summing those with the same curve and currency."""
        if isinstance(other, CurrencyParameterSensitivity):
            return CurrencyParameterSensitivities((*self._sensitivities, other))
        return CurrencyParameterSensitivities((*self._sensitivities, *other.sensitivities))

    def find(self, curve_name: str, currency: str) -> CurrencyParameterSensitivity | None:
        for s in self._sensitivities:
            if s.curve_name == curve_name and s.currency == currency:
                return s
        return None

    def get(self, curve_name: str, currency: str) -> CurrencyParameterSensitivity:
        s = self.find(curve_name, currency)
        if s is None:
            raise ValueError(
                f"No sensitivity to curve '{curve_name}' in currency '{currency}' was found."
            )
        return s

    def multiplied_by(self, factor: float) -> CurrencyParameterSensitivities:
        return CurrencyParameterSensitivities(
            [s.multiplied_by(factor) for s in self._sensitivities]
        )

    def total(self) -> dict[str, float]:
        """Return the sum of all sensitivities per currency."""
        ret: dict[str, float] = {}
        for s in self._sensitivities:
            ret[s.currency] = ret.get(s.currency, 0.0) + s.total()
        return ret

    def to_unit(self) -> dict[str, Arr1dF64]:
        """Strip the currency, summing sensitivities to the same curve."""
        ret: dict[str, Arr1dF64] = {}
        for s in self._sensitivities:
            if s.curve_name in ret:
                ret[s.curve_name] = ret[s.curve_name] + s.sensitivity
            else:
                ret[s.curve_name] = s.sensitivity.copy()
        return ret

    def equal_with_tolerance(self, other: CurrencyParameterSensitivities, tol: float) -> bool:
        """
        Test equality within an absolute tolerance. A sensitivity missing from one side is
        compared against zeros.
        """
        keys = {(s.curve_name, s.currency) for s in self._sensitivities}
        keys |= {(s.curve_name, s.currency) for s in other.sensitivities}
        for name, ccy in keys:
            s1, s2 = self.find(name, ccy), other.find(name, ccy)
            a1 = None if s1 is None else s1.sensitivity
            a2 = None if s2 is None else s2.sensitivity
            a1 = np.zeros_like(a2) if a1 is None else a1
            a2 = np.zeros_like(a1) if a2 is None else a2
            if a1.shape != a2.shape or np.any(np.abs(a1 - a2) > tol):
                return False
        return True

    def to_frame(self) -> DataFrame:
        """
        Return the sensitivities as a *DataFrame* indexed by curve and parameter label with a
        column per currency.
        """
        h = defaults.headers
        if len(self._sensitivities) == 0:
            return DataFrame()
        rows, index = [], []
        for s in self._sensitivities:
            for label, value in zip(s._labels(), s.sensitivity, strict=True):
                index.append((s.curve_name, label))
                rows.append({s.currency: value})
        df = DataFrame(
            rows,
            index=MultiIndex.from_tuples(index, names=[h["curve"], h["label"]]),
        )
        df.columns.name = h["currency"]
        return df.groupby(level=[0, 1], sort=False).sum()

    def __repr__(self) -> str:
        return f"<repolib.CurrencyParameterSensitivities ({len(self)} curves)>"
