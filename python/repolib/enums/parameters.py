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

from enum import Enum


class BuySell(float, Enum):
    """
    Enumerable type for the direction of a trade.

    Buying a *Repo* pays the principal at the start date and receives principal plus interest
    at the end date. The value is the sign applied to an unsigned notional.
    """

    Buy = 1.0
    Sell = -1.0

    def normalize(self, amount: float) -> float:
        """Return the ``amount`` signed according to this direction."""
        return abs(amount) * self.value


class TradeKind(Enum):
    """
    Enumerable type tagging each resolved trade with the calibration measures that apply to it.
    """

    Repo = 0
    Bill = 1

    def __str__(self) -> str:
        return self.name


class ValueType(Enum):
    """
    Enumerable type for the meaning of the y-values of a nodal *Curve*.
    """

    ZeroRate = 0
    DiscountFactor = 1
    ForwardRate = 2
    YearFraction = 3

    def __str__(self) -> str:
        return self.name


class NodeDateType(Enum):
    """
    Enumerable type for how the date of a curve node is determined.

    ``End`` uses the end date of the node instrument, ``Fixed`` a date given explicitly.
    ``LastFixing`` is recognised but not supported by repo or bill nodes.
    """

    End = 0
    Fixed = 1
    LastFixing = 2


class DateOrderAction(Enum):
    """
    Enumerable type for the action taken when two curve nodes are closer than allowed.
    """

    Exception = 0
    DropThis = 1
    DropOther = 2


class MissingJacobian(Enum):
    """
    Enumerable type for the policy applied when a market quote sensitivity is requested for
    a *Curve* that carries no calibration Jacobian.
    """

    Raise = 0
    Warn = 1
    Ignore = 2


_BUY_SELL_MAP = {
    "buy": BuySell.Buy,
    "sell": BuySell.Sell,
    "b": BuySell.Buy,
    "s": BuySell.Sell,
}


def _get_buy_sell(buy_sell: str | BuySell) -> BuySell:
    if isinstance(buy_sell, BuySell):
        return buy_sell
    else:
        try:
            return _BUY_SELL_MAP[buy_sell.lower()]
        except KeyError:
            raise ValueError(
                f"`buy_sell` as string: '{buy_sell}' is not a valid option. "
                "Use one of {'buy', 'sell'}."
            )


_VALUE_TYPE_MAP = {
    "zero_rate": ValueType.ZeroRate,
    "zerorate": ValueType.ZeroRate,
    "discount_factor": ValueType.DiscountFactor,
    "discountfactor": ValueType.DiscountFactor,
    "forward_rate": ValueType.ForwardRate,
    "forwardrate": ValueType.ForwardRate,
}


def _get_value_type(value_type: str | ValueType) -> ValueType:
    if isinstance(value_type, ValueType):
        return value_type
    else:
        try:
            return _VALUE_TYPE_MAP[value_type.lower()]
        except KeyError:
            raise ValueError(
                f"`value_type` as string: '{value_type}' is not a valid option. "
                "Use one of {'zero_rate', 'discount_factor', 'forward_rate'}."
            )


_DATE_ORDER_ACTION_MAP = {
    "exception": DateOrderAction.Exception,
    "drop_this": DateOrderAction.DropThis,
    "drop_other": DateOrderAction.DropOther,
}


def _get_date_order_action(action: str | DateOrderAction) -> DateOrderAction:
    if isinstance(action, DateOrderAction):
        return action
    else:
        try:
            return _DATE_ORDER_ACTION_MAP[action.lower()]
        except KeyError:
            raise ValueError(
                f"`action` as string: '{action}' is not a valid option. "
                "Use one of {'exception', 'drop_this', 'drop_other'}."
            )


_MISSING_JACOBIAN_MAP = {
    "raise": MissingJacobian.Raise,
    "warn": MissingJacobian.Warn,
    "ignore": MissingJacobian.Ignore,
}


def _get_missing_jacobian(policy: str | MissingJacobian) -> MissingJacobian:
    if isinstance(policy, MissingJacobian):
        return policy
    else:
        try:
            return _MISSING_JACOBIAN_MAP[policy.lower()]
        except KeyError:
            raise ValueError(
                f"`missing_jacobian` as string: '{policy}' is not a valid option. "
                "Use one of {'raise', 'warn', 'ignore'}."
            )
