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
from typing import TYPE_CHECKING, ClassVar

from repolib import defaults
from repolib.enums.parameters import BuySell, TradeKind, _get_buy_sell
from repolib.errors import (
    VE_START_BEFORE_END,
    VE_TRADE_DATE_AFTER_START,
    VE_UNIQUE_LEGAL_ENTITY,
    VE_UNKNOWN_CONVENTION,
)
from repolib.scheduling import add_business_days, add_tenor, adjust, dcf

if TYPE_CHECKING:
    from repolib.identifiers import LegalEntityId, SecurityId
    from repolib.market_data import ReferenceData, SecurityPosition
    from repolib.typing import Sequence  # pragma: no cover


@dataclass(frozen=True)
class Repo:
    """
    A repurchase agreement: cash lent against collateral from a start date to an end date.

    Buying a *Repo* pays the principal at the start date and receives the principal plus
    interest at the end date. Selling reverses both cashflows.

    Parameters
    ----------
    buy_sell : BuySell or str
        The direction of the trade.
    collateral : Sequence[SecurityPosition]
        The collateral securities, which must share a single issuing legal entity.
    currency : str
        The currency of the cashflows.
    notional : float
        The unsigned principal.
    start : datetime
        The unadjusted start date.
    end : datetime
        The unadjusted end date.
    rate : float
        The fixed repo rate, in decimal.
    day_count : str, optional
        The accrual convention. Defaults to ``defaults.convention``.
    modifier : str, optional
        The business day adjustment of the start and end dates. Defaults to
        ``defaults.modifier``.
    calendar : str, optional
        The calendar for the business day adjustment. Defaults to ``defaults.calendar``.
    """

    buy_sell: BuySell
    collateral: tuple[SecurityPosition, ...]
    currency: str
    notional: float
    start: datetime
    end: datetime
    rate: float
    day_count: str = field(default_factory=lambda: defaults.convention)
    modifier: str = field(default_factory=lambda: defaults.modifier)
    calendar: str = field(default_factory=lambda: defaults.calendar)

    def __post_init__(self) -> None:
        object.__setattr__(self, "buy_sell", _get_buy_sell(self.buy_sell))
        object.__setattr__(self, "collateral", tuple(self.collateral))
        object.__setattr__(self, "currency", self.currency.lower())
        if self.notional < 0:
            raise ValueError(f"`notional` must not be negative, got {self.notional}.")
        if self.start >= self.end:
            raise ValueError(VE_START_BEFORE_END.format(self.start, self.end))

    def resolve(self, ref_data: ReferenceData) -> ResolvedRepo:
        """
        Resolve the repo against reference data, adjusting its dates and signing its notional.
        """
        security_ids = tuple(p.security_id for p in self.collateral)
        legal_entity_ids = {ref_data.security(s).legal_entity_id for s in security_ids}
        if len(legal_entity_ids) != 1:
            entities = sorted(str(_) for _ in legal_entity_ids)
            raise ValueError(VE_UNIQUE_LEGAL_ENTITY.format(entities))

        calendar = ref_data.calendar(self.calendar)
        start = adjust(self.start, self.modifier, calendar)
        end = adjust(self.end, self.modifier, calendar)
        return ResolvedRepo(
            start=start,
            end=end,
            year_fraction=dcf(start, end, self.day_count),
            security_ids=security_ids,
            legal_entity_id=legal_entity_ids.pop(),
            currency=self.currency,
            notional=self.buy_sell.normalize(self.notional),
            rate=self.rate,
        )


@dataclass(frozen=True)
class ResolvedRepo:
    """
    A repo with adjusted dates, a year fraction and a signed notional, ready for pricing.
    """

    start: datetime
    end: datetime
    year_fraction: float
    security_ids: tuple[SecurityId, ...]
    legal_entity_id: LegalEntityId
    currency: str
    notional: float
    rate: float

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(VE_START_BEFORE_END.format(self.start, self.end))

    @property
    def interest(self) -> float:
        """The signed interest paid with the principal at the end date."""
        return self.notional * self.rate * self.year_fraction


@dataclass(frozen=True)
class RepoTrade:
    """A :class:`Repo` with the date on which it was traded."""

    trade_date: datetime
    product: Repo

    def resolve(self, ref_data: ReferenceData) -> ResolvedRepoTrade:
        return ResolvedRepoTrade(self.trade_date, self.product.resolve(ref_data))


@dataclass(frozen=True)
class ResolvedRepoTrade:
    """A :class:`ResolvedRepo` with the date on which it was traded."""

    kind: ClassVar[TradeKind] = TradeKind.Repo

    trade_date: datetime
    product: ResolvedRepo


@dataclass(frozen=True)
class RepoConvention:
    """
    The market conventions of a repo: its currency, date adjustment, accrual and spot lag.

    Named conventions are listed in ``defaults.spec`` and obtained with :meth:`of`.
    """

    name: str
    currency: str
    modifier: str
    calendar: str
    day_count: str
    spot_lag: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "currency", self.currency.lower())

    @classmethod
    def of(cls, name: str) -> RepoConvention:
        """Return a named convention, e.g. *"GBP-REPO-T1"*."""
        try:
            kwargs = defaults.spec[name.upper()]
        except KeyError:
            raise ValueError(VE_UNKNOWN_CONVENTION.format(name, list(defaults.spec.keys())))
        return cls(name=name.upper(), **kwargs)

    def spot_date(self, trade_date: datetime, ref_data: ReferenceData) -> datetime:
        """The start date of a trade agreed on ``trade_date``."""
        return add_business_days(trade_date, self.spot_lag, ref_data.calendar(self.calendar))

    def create_trade(
        self,
        trade_date: datetime,
        tenor: str,
        collateral: Sequence[SecurityPosition],
        buy_sell: BuySell | str,
        notional: float,
        rate: float,
        ref_data: ReferenceData,
    ) -> RepoTrade:
        """
        Create a trade starting on the spot date and ending one ``tenor`` later.

        The end date is unadjusted; the business day adjustment is applied on resolution.
        """
        start = self.spot_date(trade_date, ref_data)
        end = add_tenor(start, tenor, "NONE")
        return self.to_trade(trade_date, start, end, collateral, buy_sell, notional, rate)

    def to_trade(
        self,
        trade_date: datetime,
        start: datetime,
        end: datetime,
        collateral: Sequence[SecurityPosition],
        buy_sell: BuySell | str,
        notional: float,
        rate: float,
    ) -> RepoTrade:
        if trade_date > start:
            raise ValueError(VE_TRADE_DATE_AFTER_START.format(trade_date, start))
        return RepoTrade(
            trade_date=trade_date,
            product=Repo(
                buy_sell=buy_sell,  # type: ignore[arg-type]
                collateral=tuple(collateral),
                currency=self.currency,
                notional=notional,
                start=start,
                end=end,
                rate=rate,
                day_count=self.day_count,
                modifier=self.modifier,
                calendar=self.calendar,
            ),
        )


@dataclass(frozen=True)
class RepoTemplate:
    """
    A template for a repo of a given tenor, collateral and convention, to be traded at a
    later date and rate.
    """

    tenor: str
    collateral: tuple[SecurityPosition, ...]
    convention: RepoConvention

    def __post_init__(self) -> None:
        object.__setattr__(self, "tenor", self.tenor.upper())
        object.__setattr__(self, "collateral", tuple(self.collateral))
        if isinstance(self.convention, str):
            object.__setattr__(self, "convention", RepoConvention.of(self.convention))

    def create_trade(
        self,
        trade_date: datetime,
        buy_sell: BuySell | str,
        notional: float,
        rate: float,
        ref_data: ReferenceData,
    ) -> RepoTrade:
        return self.convention.create_trade(
            trade_date, self.tenor, self.collateral, buy_sell, notional, rate, ref_data
        )
