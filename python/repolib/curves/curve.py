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

from typing import TYPE_CHECKING

import numpy as np

from repolib import defaults
from repolib.curves.interpolation import _get_interpolation
from repolib.default import plot
from repolib.enums.generics import NoInput, _drb
from repolib.errors import VE_CURVE_NODE_COUNT, VE_CURVE_PARAMETER_LENGTH

if TYPE_CHECKING:
    from repolib.curves.metadata import CurveMetadata
    from repolib.default import PlotOutput
    from repolib.typing import Arr1dF64, Sequence  # pragma: no cover


class InterpolatedNodalCurve:
    """
    An immutable curve defined by node x-values, expressed as year fractions, and node
    y-values, which are the curve parameters.

    Parameters
    ----------
    metadata : CurveMetadata
        The metadata naming the curve and describing its values and parameters.
    x_values : Sequence[float]
        The increasing year fractions of the nodes from the valuation date.
    y_values : Sequence[float]
        The node values, e.g. zero rates. These are the curve parameters.
    interpolation : str, optional
        The name of the interpolation, see :data:`~repolib.curves.interpolation.INTERPOLATION`.
        Extrapolation outside the nodes is flat.
    """

    def __init__(
        self,
        metadata: CurveMetadata,
        x_values: Sequence[float],
        y_values: Sequence[float],
        interpolation: str | NoInput = NoInput(0),
    ) -> None:
        self._metadata = metadata
        self._x = np.asarray(x_values, dtype=float)
        self._y = np.asarray(y_values, dtype=float)
        self._interpolation = _drb(defaults.interpolation, interpolation).lower()
        self._interpolator = _get_interpolation(self._interpolation)
        if len(self._x) == 0:
            raise ValueError(VE_CURVE_NODE_COUNT.format(metadata.curve_name))
        if len(self._x) != len(self._y):
            raise ValueError(
                VE_CURVE_PARAMETER_LENGTH.format(metadata.curve_name, len(self._x), len(self._y))
            )
        if np.any(np.diff(self._x) <= 0):
            raise ValueError(f"Curve '{metadata.curve_name}' x-values must be strictly increasing.")

    @property
    def name(self) -> str:
        return self._metadata.curve_name

    @property
    def metadata(self) -> CurveMetadata:
        return self._metadata

    @property
    def x_values(self) -> Arr1dF64:
        return self._x.copy()

    @property
    def y_values(self) -> Arr1dF64:
        return self._y.copy()

    @property
    def parameter_count(self) -> int:
        return len(self._y)

    @property
    def interpolation(self) -> str:
        return self._interpolation

    def y_value(self, x: float) -> float:
        """Return the interpolated y-value at year fraction ``x``."""
        return float(self._interpolator(x, self._x) @ self._y)

    def y_value_parameter_sensitivity(self, x: float) -> Arr1dF64:
        """Return the sensitivity of :meth:`y_value` at ``x`` to each parameter."""
        return self._interpolator(x, self._x)

    def with_parameters(self, parameters: Sequence[float]) -> InterpolatedNodalCurve:
        if len(parameters) != self.parameter_count:
            raise ValueError(
                VE_CURVE_PARAMETER_LENGTH.format(self.name, self.parameter_count, len(parameters))
            )
        return InterpolatedNodalCurve(self._metadata, self._x, parameters, self._interpolation)

    def with_metadata(self, metadata: CurveMetadata) -> InterpolatedNodalCurve:
        return InterpolatedNodalCurve(metadata, self._x, self._y, self._interpolation)

    def plot(self, points: int = 100) -> PlotOutput:
        """
        Plot the interpolated y-values against year fraction, from zero to the last node.
        """
        x = list(np.linspace(0.0, self._x[-1], points))
        return plot([x], [[self.y_value(_) for _ in x]], labels=[self.name])

    def __repr__(self) -> str:
        return f"<repolib.InterpolatedNodalCurve:{self.name} at {hex(id(self))}>"
