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

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from pandas import Series

from repolib.errors import VE_MARKET_DATA_NOT_FOUND, VE_REFERENCE_DATA_NOT_FOUND
from repolib.identifiers import LegalEntityId, QuoteId, SecurityId
from repolib.scheduling import get_calendar

if TYPE_CHECKING:
    from pandas.tseries.offsets import CustomBusinessDay  # pragma: no cover


class MarketData:
    """
    An immutable set of market quotes observed on a valuation date.

    Parameters
    ----------
    valuation_date : datetime
        The date on which the quotes are observed.
    values : dict[QuoteId, float]
        The quote values keyed by identifier.
    """

    def __init__(self, valuation_date: datetime, values: dict[QuoteId, float]) -> None:
        self._valuation_date = valuation_date
        self._values = {k: float(v) for k, v in values.items()}

    @classmethod
    def of(cls, valuation_date: datetime, values: dict[QuoteId, float] | Series) -> MarketData:
        """
        Create market data from a dict or a *Series*.

        A *Series* index may hold :class:`~repolib.identifiers.QuoteId` or strings of the
        form *"scheme~value"*.
        """
        if isinstance(values, Series):
            values = {
                (k if isinstance(k, QuoteId) else QuoteId.parse(k)): v for k, v in values.items()
            }
        return cls(valuation_date, values)

    @classmethod
    def empty(cls, valuation_date: datetime) -> MarketData:
        return cls(valuation_date, {})

    @property
    def valuation_date(self) -> datetime:
        return self._valuation_date

    def contains(self, quote_id: QuoteId) -> bool:
        return quote_id in self._values

    def value(self, quote_id: QuoteId) -> float:
        try:
            return self._values[quote_id]
        except KeyError:
            raise ValueError(VE_MARKET_DATA_NOT_FOUND.format(quote_id, self._valuation_date))

    def with_value(self, quote_id: QuoteId, value: float) -> MarketData:
        """Return a copy with the quote ``quote_id`` added or replaced."""
        return MarketData(self._valuation_date, {**self._values, quote_id: value})

    def ids(self) -> list[QuoteId]:
        return list(self._values.keys())

    def to_series(self) -> Series:
        return Series({str(k): v for k, v in self._values.items()}, dtype=float)

    def __repr__(self) -> str:
        return f"<repolib.MarketData {self._valuation_date:%Y-%m-%d} ({len(self._values)} quotes)>"


@dataclass(frozen=True)
class LegalEntitySecurity:
    """A security issued by a single legal entity."""

    security_id: SecurityId
    legal_entity_id: LegalEntityId


@dataclass(frozen=True)
class SecurityPosition:
    """A quantity of a security, used as the collateral of a repo."""

    security_id: SecurityId
    quantity: float = 1.0


@dataclass(frozen=True)
class ReferenceData:
    """
    Static data needed to resolve trades: securities and, optionally, custom calendars.

    Named calendars from :func:`~repolib.scheduling.get_calendar` are always available.
    """

    securities: dict[SecurityId, LegalEntitySecurity] = field(default_factory=dict)
    calendars: dict[str, CustomBusinessDay] = field(default_factory=dict)

    @classmethod
    def of(cls, securities: list[LegalEntitySecurity]) -> ReferenceData:
        return cls(securities={s.security_id: s for s in securities})

    def security(self, security_id: SecurityId) -> LegalEntitySecurity:
        try:
            return self.securities[security_id]
        except KeyError:
            raise ValueError(VE_REFERENCE_DATA_NOT_FOUND.format(security_id))

    def calendar(self, name: str | CustomBusinessDay) -> CustomBusinessDay:
        if isinstance(name, str) and name.lower() in self.calendars:
            return self.calendars[name.lower()]
        return get_calendar(name)

    def combined_with(self, other: ReferenceData) -> ReferenceData:
        """Merge with another set of reference data; ``other`` wins on conflicts."""
        return ReferenceData(
            securities={**self.securities, **other.securities},
            calendars={**self.calendars, **other.calendars},
        )
