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
from repolib.errors import VE_START_BEFORE_END
from repolib.scheduling import add_tenor, adjust, dcf

if TYPE_CHECKING:
    from repolib.identifiers import LegalEntityId, SecurityId
    from repolib.instruments.repo import RepoConvention
    from repolib.market_data import ReferenceData  # pragma: no cover


@dataclass(frozen=True)
class Bill:
    """
    A zero coupon bill issued by a legal entity and quoted as a simple yield.

    Buying a *Bill* pays the price, :math:`N / (1 + y \\cdot d)`, at settlement and receives
    the notional at maturity. Its cashflows are discounted on the issuer curve of the legal
    entity of the security.

    Parameters
    ----------
    buy_sell : BuySell or str
        The direction of the trade.
    security_id : SecurityId
        The bill security.
    currency : str
        The currency of the cashflows.
    notional : float
        The unsigned face value.
    settlement : datetime
        The unadjusted settlement date.
    maturity : datetime
        The unadjusted maturity date.
    rate : float
        The simple yield, in decimal.
    day_count : str, optional
        The convention of the yield. Defaults to ``defaults.convention``.
    modifier : str, optional
        The business day adjustment of the dates. Defaults to ``defaults.modifier``.
    calendar : str, optional
        The calendar for the business day adjustment. Defaults to ``defaults.calendar``.
    """

    buy_sell: BuySell
    security_id: SecurityId
    currency: str
    notional: float
    settlement: datetime
    maturity: datetime
    rate: float
    day_count: str = field(default_factory=lambda: defaults.convention)
    modifier: str = field(default_factory=lambda: defaults.modifier)
    calendar: str = field(default_factory=lambda: defaults.calendar)

    def __post_init__(self) -> None:
        object.__setattr__(self, "buy_sell", _get_buy_sell(self.buy_sell))
        object.__setattr__(self, "currency", self.currency.lower())
        if self.notional < 0:
            raise ValueError(f"`notional` must not be negative, got {self.notional}.")
        if self.settlement >= self.maturity:
            raise ValueError(VE_START_BEFORE_END.format(self.settlement, self.maturity))

    def resolve(self, ref_data: ReferenceData) -> ResolvedBill:
        calendar = ref_data.calendar(self.calendar)
        settlement = adjust(self.settlement, self.modifier, calendar)
        maturity = adjust(self.maturity, self.modifier, calendar)
        return ResolvedBill(
            settlement=settlement,
            maturity=maturity,
            year_fraction=dcf(settlement, maturity, self.day_count),
            security_id=self.security_id,
            legal_entity_id=ref_data.security(self.security_id).legal_entity_id,
            currency=self.currency,
            notional=self.buy_sell.normalize(self.notional),
            rate=self.rate,
        )


@dataclass(frozen=True)
class ResolvedBill:
    """A bill with adjusted dates, a year fraction and a signed notional."""

    settlement: datetime
    maturity: datetime
    year_fraction: float
    security_id: SecurityId
    legal_entity_id: LegalEntityId
    currency: str
    notional: float
    rate: float

    def __post_init__(self) -> None:
        if self.settlement >= self.maturity:
            raise ValueError(VE_START_BEFORE_END.format(self.settlement, self.maturity))

    @property
    def price(self) -> float:
        """The settlement price per unit of notional implied by the yield."""
        return 1.0 / (1.0 + self.rate * self.year_fraction)

    @property
    def settlement_amount(self) -> float:
        """The signed amount paid at settlement."""
        return self.notional * self.price


@dataclass(frozen=True)
class BillTrade:
    """A :class:`Bill` with the date on which it was traded."""

    trade_date: datetime
    product: Bill

    def resolve(self, ref_data: ReferenceData) -> ResolvedBillTrade:
        return ResolvedBillTrade(self.trade_date, self.product.resolve(ref_data))


@dataclass(frozen=True)
class ResolvedBillTrade:
    """A :class:`ResolvedBill` with the date on which it was traded."""

    kind: ClassVar[TradeKind] = TradeKind.Bill

    trade_date: datetime
    product: ResolvedBill


@dataclass(frozen=True)
class BillTemplate:
    """
    A template for a bill of a given tenor, settling on the spot date of a money market
    ``convention``, which provides the currency, dates and yield day count.
    """

    tenor: str
    security_id: SecurityId
    convention: RepoConvention

    def __post_init__(self) -> None:
        object.__setattr__(self, "tenor", self.tenor.upper())

    def create_trade(
        self,
        trade_date: datetime,
        buy_sell: BuySell | str,
        notional: float,
        rate: float,
        ref_data: ReferenceData,
    ) -> BillTrade:
        settlement = self.convention.spot_date(trade_date, ref_data)
        return BillTrade(
            trade_date=trade_date,
            product=Bill(
                buy_sell=buy_sell,  # type: ignore[arg-type]
                security_id=self.security_id,
                currency=self.convention.currency,
                notional=notional,
                settlement=settlement,
                maturity=add_tenor(settlement, self.tenor, "NONE"),
                rate=rate,
                day_count=self.convention.day_count,
                modifier=self.convention.modifier,
                calendar=self.convention.calendar,
            ),
        )
