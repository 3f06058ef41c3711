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

from math import floor
from typing import TYPE_CHECKING, Protocol

import numpy as np

if TYPE_CHECKING:
    from repolib.typing import Any, Arr1dF64  # pragma: no cover


class InterpolationFunction(Protocol):
    # Callable type returning the node weights, w, such that y(x) = w . y_nodes
    def __call__(self, x: float, x_nodes: Arr1dF64) -> Arr1dF64: ...


def _linear(x: float, x_nodes: Arr1dF64) -> Arr1dF64:
    """Linear interpolation between nodes and flat extrapolation outside the nodes."""
    n = len(x_nodes)
    weights = np.zeros(n)
    if n == 1 or x <= x_nodes[0]:
        weights[0] = 1.0
        return weights
    if x >= x_nodes[-1]:
        weights[-1] = 1.0
        return weights
    i = index_left(x_nodes, n, x)
    x_1, x_2 = x_nodes[i], x_nodes[i + 1]
    w = (x - x_1) / (x_2 - x_1)
    weights[i], weights[i + 1] = 1.0 - w, w
    return weights


def _flat_forward(x: float, x_nodes: Arr1dF64) -> Arr1dF64:
    """Piecewise constant at the left node value, flat outside the nodes."""
    n = len(x_nodes)
    weights = np.zeros(n)
    if n == 1 or x <= x_nodes[0]:
        weights[0] = 1.0
        return weights
    if x >= x_nodes[-1]:
        weights[-1] = 1.0
        return weights
    i = index_left(x_nodes, n, x)
    weights[i + 1 if x >= x_nodes[i + 1] else i] = 1.0
    return weights


INTERPOLATION: dict[str, InterpolationFunction] = {
    "linear": _linear,
    "flat_forward": _flat_forward,
}


def _get_interpolation(interpolation: str) -> InterpolationFunction:
    try:
        return INTERPOLATION[interpolation.lower()]
    except KeyError:
        raise ValueError(
            f"`interpolation`: '{interpolation}' is not valid. "
            f"Use one of {list(INTERPOLATION.keys())}."
        )


def index_left(
    list_input: Any,
    list_length: int,
    value: Any,
    left_count: int = 0,
) -> int:
    """
    Return the interval index of a value from an ordered input list on the left side.

    Parameters
    ----------
    list_input : list or ndarray
        Ordered list (lowest to highest) containing datatypes the same as value.
    list_length : int
        The length of ``list_input``.
    value : Any
        The value for which to determine the list index of.
    left_count : int
        The counter to pass recursively to determine the output. Users should not
        directly specify, it is used in internal calculation only.

    Returns
    -------
    int : The left index of the interval within which value is found (or extrapolated
          from)

    Notes
    -----
    Uses a binary search method which operates with time :math:`O(log_2 n)`.

    Out of domain values return the left-side index of the closest matching interval,
    so for nodes ``[0, 1, 2]`` the value 100 is attributed to the interval (1, 2] and -100
    to the interval (0, 1]. A value equal to a node is attributed to the interval it closes.
    """
    if list_length == 1:
        raise ValueError("`index_left` designed for intervals. Cannot index list of length 1.")

    if list_length == 2:
        return left_count

    split: int = floor((list_length - 1) / 2)
    if list_length == 3 and value == list_input[split]:
        return left_count

    if value <= list_input[split]:
        return index_left(list_input[: split + 1], split + 1, value, left_count)
    else:
        return index_left(list_input[split:], list_length - split, value, left_count + split)
