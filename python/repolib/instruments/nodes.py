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

from dataclasses import dataclass, field, replace
from math import exp
from typing import TYPE_CHECKING

from repolib.curves.definition import CurveNodeDate, CurveNodeDateOrder
from repolib.curves.metadata import ParameterMetadata
from repolib.enums.parameters import BuySell, NodeDateType, ValueType
from repolib.errors import NI_LAST_FIXING_NODE
from repolib.scheduling import tenor_year_fraction

if TYPE_CHECKING:
    from repolib.identifiers import QuoteId
    from repolib.instruments.bill import BillTemplate
    from repolib.instruments.repo import RepoTemplate
    from repolib.market_data import MarketData, ReferenceData
    from repolib.typing import Any, datetime  # pragma: no cover


class _TenorCurveNode:
    """
    Behaviour shared by curve nodes built from a template of a fixed tenor and quoted by a
    single market rate.

    Subclasses hold ``template``, ``rate_id``, ``additional_spread``, ``label``, ``date`` and
    ``date_order`` and provide the name of the end date attribute of their resolved product.
    """

    template: Any
    rate_id: QuoteId
    additional_spread: float
    label: str
    date: Any
    date_order: CurveNodeDateOrder

    _end_attribute: str = "end"

    def requirements(self) -> set[QuoteId]:
        return {self.rate_id}

    def trade(self, quantity: float, market_data: MarketData, ref_data: ReferenceData) -> Any:
        """
        Create the node trade on the valuation date of ``market_data`` at the quoted rate plus
        the additional spread. A positive ``quantity`` buys.
        """
        rate = market_data.value(self.rate_id) + self.additional_spread
        buy_sell = BuySell.Buy if quantity > 0 else BuySell.Sell
        return self.template.create_trade(
            market_data.valuation_date, buy_sell, abs(quantity), rate, ref_data
        )

    def resolved_trade(
        self, quantity: float, market_data: MarketData, ref_data: ReferenceData
    ) -> Any:
        return self.trade(quantity, market_data, ref_data).resolve(ref_data)

    def initial_guess(self, market_data: MarketData, value_type: ValueType) -> float:
        """
        Return the quoted rate for a zero or forward rate curve, or the discount factor implied
        by the quoted rate over the tenor for a discount factor curve.
        """
        rate = market_data.value(self.rate_id)
        if value_type == ValueType.DiscountFactor:
            return exp(-rate * tenor_year_fraction(self.template.tenor))
        return rate

    def node_date(self, valuation_date: datetime, ref_data: ReferenceData) -> datetime:
        """Return the date of the node, used as the x-value of its curve parameter."""
        if self.date.type == NodeDateType.End:
            trade = self.template.create_trade(valuation_date, BuySell.Buy, 1.0, 0.0, ref_data)
            product = trade.product.resolve(ref_data)
            return getattr(product, self._end_attribute)  # type: ignore[no-any-return]
        elif self.date.type == NodeDateType.Fixed:
            return self.date.fixed_date  # type: ignore[no-any-return]
        raise NotImplementedError(NI_LAST_FIXING_NODE.format(type(self).__name__))

    def metadata(self, valuation_date: datetime, ref_data: ReferenceData) -> ParameterMetadata:
        return ParameterMetadata(self.node_date(valuation_date, ref_data), self.label)

    def with_date(self, date: CurveNodeDate) -> Any:
        return replace(self, date=date)  # type: ignore[type-var]


@dataclass(frozen=True)
class RepoCurveNode(_TenorCurveNode):
    """
    A curve node whose instrument is a :class:`~repolib.instruments.Repo` traded from a
    :class:`~repolib.instruments.RepoTemplate`.

    Parameters
    ----------
    template : RepoTemplate
        The template of the node trade.
    rate_id : QuoteId
        The identifier of the market quote of the repo rate.
    additional_spread : float, optional
        A spread added to the quoted rate to obtain the trade rate.
    label : str, optional
        The label of the node. Defaults to the tenor of the template.
    date : CurveNodeDate, optional
        How the node date is determined. Defaults to the end date of the repo.
    date_order : CurveNodeDateOrder, optional
        The minimum gap to neighbouring nodes and the action when it is not met.
    """

    template: RepoTemplate
    rate_id: QuoteId
    additional_spread: float = 0.0
    label: str = ""
    date: CurveNodeDate = CurveNodeDate.END
    date_order: CurveNodeDateOrder = field(default_factory=CurveNodeDateOrder)

    def __post_init__(self) -> None:
        if not self.label:
            object.__setattr__(self, "label", self.template.tenor)


@dataclass(frozen=True)
class BillCurveNode(_TenorCurveNode):
    """
    A curve node whose instrument is a :class:`~repolib.instruments.Bill` traded from a
    :class:`~repolib.instruments.BillTemplate`, used to calibrate issuer curves.

    The parameters are as for :class:`RepoCurveNode`. The node date defaults to the maturity.
    """

    template: BillTemplate
    rate_id: QuoteId
    additional_spread: float = 0.0
    label: str = ""
    date: CurveNodeDate = CurveNodeDate.END
    date_order: CurveNodeDateOrder = field(default_factory=CurveNodeDateOrder)

    _end_attribute = "maturity"

    def __post_init__(self) -> None:
        if not self.label:
            object.__setattr__(self, "label", self.template.tenor)
