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

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from repolib.calibration.generator import ProviderGenerator
    from repolib.calibration.market_quote import CurveParameterSize
    from repolib.calibration.measures import CalibrationMeasures
    from repolib.typing import Arr1dF64, Arr2dF64, ResolvedTrade  # pragma: no cover


@dataclass(frozen=True)
class CalibrationValue:
    """
    The residual of each calibration trade as a function of the parameter vector.

    Calling with a parameter vector generates a provider and returns the measure value of
    each trade, in order.
    """

    trades: tuple[ResolvedTrade, ...]
    measures: CalibrationMeasures
    generator: ProviderGenerator

    def __post_init__(self) -> None:
        object.__setattr__(self, "trades", tuple(self.trades))

    def __call__(self, x: Arr1dF64) -> Arr1dF64:
        provider = self.generator.generate(x)
        return np.array([self.measures.value(t, provider) for t in self.trades], dtype=float)


@dataclass(frozen=True)
class CalibrationDerivative:
    """
    The Jacobian of :class:`CalibrationValue` as a function of the parameter vector, with a
    row per trade and a column per parameter of the curves in ``curve_order``.
    """

    trades: tuple[ResolvedTrade, ...]
    measures: CalibrationMeasures
    generator: ProviderGenerator
    curve_order: tuple[CurveParameterSize, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "trades", tuple(self.trades))
        object.__setattr__(self, "curve_order", tuple(self.curve_order))

    def __call__(self, x: Arr1dF64) -> Arr2dF64:
        provider = self.generator.generate(x)
        width = sum(c.parameter_count for c in self.curve_order)
        if len(self.trades) == 0:
            return np.zeros((0, width))
        return np.vstack(
            [self.measures.derivative(t, provider, self.curve_order) for t in self.trades]
        )
