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
from typing import TYPE_CHECKING, ClassVar, Protocol

from repolib import defaults
from repolib.curves.curve import InterpolatedNodalCurve
from repolib.curves.metadata import CurveMetadata, ParameterMetadata
from repolib.enums.generics import NoInput, _drb
from repolib.enums.parameters import (
    DateOrderAction,
    NodeDateType,
    ValueType,
    _get_date_order_action,
    _get_value_type,
)
from repolib.errors import VE_CURVE_NODE_COUNT, VE_CURVE_PARAMETER_LENGTH, VE_NODE_DATE_CLASH
from repolib.scheduling import dcf

if TYPE_CHECKING:
    from repolib.market_data import MarketData, ReferenceData
    from repolib.typing import Any, Sequence  # pragma: no cover


@dataclass(frozen=True)
class CurveNodeDate:
    """
    How the date of a curve node is determined.

    Use the class attributes ``END`` and ``LAST_FIXING``, or :meth:`of` for a fixed date.
    """

    type: NodeDateType
    fixed_date: datetime | None = None

    END: ClassVar[CurveNodeDate]
    LAST_FIXING: ClassVar[CurveNodeDate]

    @classmethod
    def of(cls, date: datetime) -> CurveNodeDate:
        return cls(NodeDateType.Fixed, date)


CurveNodeDate.END = CurveNodeDate(NodeDateType.End)
CurveNodeDate.LAST_FIXING = CurveNodeDate(NodeDateType.LastFixing)


@dataclass(frozen=True)
class CurveNodeDateOrder:
    """
    The minimum gap in days between a node and its neighbours, and the action taken when the
    gap is not met.
    """

    min_gap_in_days: int = field(default_factory=lambda: defaults.min_gap_in_days)
    action: DateOrderAction = field(
        default_factory=lambda: _get_date_order_action(defaults.date_order_action)
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "action", _get_date_order_action(self.action))


class CurveNode(Protocol):
    # The capabilities a node must offer to a curve definition
    @property
    def label(self) -> str: ...

    @property
    def date_order(self) -> CurveNodeDateOrder: ...

    def node_date(self, valuation_date: datetime, ref_data: ReferenceData) -> datetime: ...

    def metadata(self, valuation_date: datetime, ref_data: ReferenceData) -> ParameterMetadata: ...

    def initial_guess(self, market_data: MarketData, value_type: ValueType) -> float: ...

    def resolved_trade(
        self, quantity: float, market_data: MarketData, ref_data: ReferenceData
    ) -> Any: ...


class InterpolatedNodalCurveDefinition:
    """
    The definition of a nodal curve calibrated to one instrument per node.

    Parameters
    ----------
    name : str
        The name of the curve.
    nodes : Sequence[CurveNode]
        The nodes in parameter order, e.g. :class:`~repolib.instruments.RepoCurveNode`.
    day_count : str, optional
        The day count converting node dates into x-values. Defaults to
        ``defaults.curve_convention``.
    y_value_type : str or ValueType, optional
        The meaning of the curve parameters. Defaults to ``defaults.value_type``.
    interpolation : str, optional
        The interpolation of the curve. Defaults to ``defaults.interpolation``.
    """

    def __init__(
        self,
        name: str,
        nodes: Sequence[CurveNode],
        day_count: str | NoInput = NoInput(0),
        y_value_type: str | ValueType | NoInput = NoInput(0),
        interpolation: str | NoInput = NoInput(0),
    ) -> None:
        self.name = name
        self.nodes = tuple(nodes)
        self.day_count = _drb(defaults.curve_convention, day_count)
        self.y_value_type = _get_value_type(_drb(defaults.value_type, y_value_type))
        self.interpolation = _drb(defaults.interpolation, interpolation)
        if len(self.nodes) == 0:
            raise ValueError(VE_CURVE_NODE_COUNT.format(name))

    @property
    def parameter_count(self) -> int:
        return len(self.nodes)

    def initial_guess(self, market_data: MarketData) -> list[float]:
        return [node.initial_guess(market_data, self.y_value_type) for node in self.nodes]

    def metadata(self, valuation_date: datetime, ref_data: ReferenceData) -> CurveMetadata:
        return CurveMetadata(
            _curve_name=self.name,
            _x_value_type=ValueType.YearFraction,
            _y_value_type=self.y_value_type,
            _day_count=self.day_count,
            _parameter_metadata=tuple(n.metadata(valuation_date, ref_data) for n in self.nodes),
        )

    def curve(
        self, valuation_date: datetime, metadata: CurveMetadata, parameters: Sequence[float]
    ) -> InterpolatedNodalCurve:
        """
        Materialise the curve from its parameters.

        The x-values are the year fractions from ``valuation_date`` to the date of each node
        held in the ``metadata``.
        """
        if len(parameters) != self.parameter_count:
            raise ValueError(
                VE_CURVE_PARAMETER_LENGTH.format(self.name, self.parameter_count, len(parameters))
            )
        x_values = [
            dcf(valuation_date, m.date, self.day_count) for m in metadata.parameter_metadata
        ]
        return InterpolatedNodalCurve(metadata, x_values, parameters, self.interpolation)

    def filtered(
        self, valuation_date: datetime, ref_data: ReferenceData
    ) -> InterpolatedNodalCurveDefinition:
        """
        Return a definition without the nodes invalid on ``valuation_date``.

        Nodes dated on or before the valuation date are removed, the remaining nodes are
        ordered by date, and each node's :class:`CurveNodeDateOrder` is applied against its
        neighbours.
        """
        pairs = [(node.node_date(valuation_date, ref_data), node) for node in self.nodes]
        pairs = sorted([p for p in pairs if p[0] > valuation_date], key=lambda p: p[0])

        i = 0
        while i < len(pairs):
            restart = False
            date, node = pairs[i]
            order = node.date_order
            for j in (i - 1, i + 1):
                if j < 0 or j >= len(pairs):
                    continue
                other_date, other_node = pairs[j]
                if abs((date - other_date).days) >= order.min_gap_in_days:
                    continue
                if order.action == DateOrderAction.DropThis:
                    pairs.pop(i)
                elif order.action == DateOrderAction.DropOther:
                    pairs.pop(j)
                else:
                    raise ValueError(
                        VE_NODE_DATE_CLASH.format(
                            self.name, node.label, other_node.label, order.min_gap_in_days
                        )
                    )
                restart = True
                break
            i = 0 if restart else i + 1

        return InterpolatedNodalCurveDefinition(
            self.name,
            [node for _, node in pairs],
            self.day_count,
            self.y_value_type,
            self.interpolation,
        )

    def __repr__(self) -> str:
        return f"<repolib.InterpolatedNodalCurveDefinition:{self.name} ({len(self.nodes)} nodes)>"
