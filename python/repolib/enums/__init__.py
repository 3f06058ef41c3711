from repolib.enums.generics import Err, NoInput, Ok, Result
from repolib.enums.parameters import (
    BuySell,
    DateOrderAction,
    MissingJacobian,
    NodeDateType,
    TradeKind,
    ValueType,
)

__all__ = [
    "BuySell",
    "DateOrderAction",
    "MissingJacobian",
    "NodeDateType",
    "TradeKind",
    "ValueType",
    "NoInput",
    "Result",
    "Ok",
    "Err",
]
