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

"""
Calibration Jacobians and the transform of parameter sensitivities into sensitivities to the
market quotes of calibration instruments.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from pandas import DataFrame, MultiIndex

from repolib import defaults
from repolib.curves.metadata import CurveInfoType
from repolib.enums.generics import NoInput, _drb
from repolib.enums.parameters import MissingJacobian, _get_missing_jacobian
from repolib.errors import VE_MISSING_JACOBIAN, W_MISSING_JACOBIAN
from repolib.sensitivity import CurrencyParameterSensitivities, CurrencyParameterSensitivity

if TYPE_CHECKING:
    from repolib.provider import LegalEntityDiscountingProvider
    from repolib.typing import Arr1dF64, Arr2dF64, Sequence  # pragma: no cover

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurveParameterSize:
    """The name of a curve and its number of parameters, in parameter vector order."""

    name: str
    parameter_count: int


class JacobianCalibrationMatrix:
    """
    The sensitivity of the parameters of a curve to the market quotes of the instruments used
    to calibrate it and the curves it depends upon.

    Parameters
    ----------
    curve_order : Sequence[CurveParameterSize]
        The curves whose calibration instruments form the columns of the matrix, in order.
    matrix : 2d array
        Rows for each parameter of the curve and columns for each instrument of
        ``curve_order``.
    """

    def __init__(self, curve_order: Sequence[CurveParameterSize], matrix: Arr2dF64) -> None:
        self._curve_order = tuple(curve_order)
        self._matrix = np.asarray(matrix, dtype=float)
        if self._matrix.ndim != 2 or self._matrix.shape[1] != self.total_parameter_count:
            raise ValueError(
                f"Jacobian matrix of shape {self._matrix.shape} requires "
                f"{self.total_parameter_count} columns for the curve order."
            )

    @property
    def curve_order(self) -> tuple[CurveParameterSize, ...]:
        return self._curve_order

    @property
    def matrix(self) -> Arr2dF64:
        return self._matrix.copy()

    @property
    def total_parameter_count(self) -> int:
        return sum(c.parameter_count for c in self._curve_order)

    def contains_curve(self, name: str) -> bool:
        return any(c.name == name for c in self._curve_order)

    def split(self, array: Arr1dF64) -> dict[str, Arr1dF64]:
        """
        Split an array with an entry per column of the matrix into arrays per order curve.
        """
        if len(array) != self.total_parameter_count:
            raise ValueError(
                f"Array of length {len(array)} cannot be split over "
                f"{self.total_parameter_count} parameters."
            )
        ret, offset = {}, 0
        for c in self._curve_order:
            ret[c.name] = np.asarray(array[offset : offset + c.parameter_count], dtype=float)
            offset += c.parameter_count
        return ret

    def to_frame(self) -> DataFrame:
        """Return the matrix with columns indexed by order curve and instrument number."""
        columns = MultiIndex.from_tuples(
            [(c.name, i) for c in self._curve_order for i in range(c.parameter_count)],
            names=[defaults.headers["curve"], defaults.headers["label"]],
        )
        return DataFrame(self._matrix, columns=columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JacobianCalibrationMatrix):
            return False
        return self._curve_order == other._curve_order and np.array_equal(
            self._matrix, other._matrix
        )

    def __repr__(self) -> str:
        return f"<repolib.JacobianCalibrationMatrix {self._matrix.shape}>"


class MarketQuoteSensitivityCalculator:
    """
    Transforms sensitivities to curve parameters into sensitivities to the market quotes of
    the calibration instruments, using the Jacobian attached to each curve at calibration.

    Parameters
    ----------
    missing_jacobian : str or MissingJacobian, optional
        The action when a curve carries no Jacobian: *"raise"*, *"warn"* or *"ignore"*. A
        warned or ignored sensitivity is returned unchanged. Defaults to
        ``defaults.missing_jacobian``.
    """

    def __init__(self, missing_jacobian: str | MissingJacobian | NoInput = NoInput(0)) -> None:
        self.missing_jacobian = _get_missing_jacobian(
            _drb(defaults.missing_jacobian, missing_jacobian)
        )

    def sensitivity(
        self,
        parameter_sensitivities: CurrencyParameterSensitivities,
        provider: LegalEntityDiscountingProvider,
    ) -> CurrencyParameterSensitivities:
        result = CurrencyParameterSensitivities.empty()
        for sens in parameter_sensitivities:
            curve = provider.find_curve(sens.curve_name)
            jacobian = None if curve is None else curve.metadata.find_info(CurveInfoType.Jacobian)
            if jacobian is None:
                result = result.combined_with(self._missing(sens))
                continue
            mq = jacobian.split(sens.sensitivity @ jacobian.matrix)
            for name, values in mq.items():
                order_curve = provider.find_curve(name)
                result = result.combined_with(
                    CurrencyParameterSensitivity(
                        curve_name=name,
                        currency=sens.currency,
                        sensitivity=values,
                        parameter_metadata=(
                            None if order_curve is None
                            else order_curve.metadata.parameter_metadata or None
                        ),
                    )
                )
        return result

    def _missing(self, sens: CurrencyParameterSensitivity) -> CurrencyParameterSensitivity:
        if self.missing_jacobian == MissingJacobian.Raise:
            raise ValueError(VE_MISSING_JACOBIAN.format(sens.curve_name))
        elif self.missing_jacobian == MissingJacobian.Warn:
            warnings.warn(W_MISSING_JACOBIAN.format(sens.curve_name), UserWarning, stacklevel=4)
        else:
            logger.debug("No Jacobian for curve '%s'; sensitivity passed through.", sens.curve_name)
        return sens
