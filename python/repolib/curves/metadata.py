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
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from repolib.enums.parameters import ValueType
from repolib.errors import VE_CURVE_INFO_NOT_FOUND

if TYPE_CHECKING:
    from repolib.typing import Any  # pragma: no cover


class CurveInfoType(Enum):
    """
    Enumerable type for the optional information attached to :class:`CurveMetadata`.

    - ``Jacobian``: a :class:`~repolib.calibration.JacobianCalibrationMatrix`.
    - ``PVSensitivityToMarketQuote``: an array of the present value sensitivity of each node
      instrument to its own market quote.
    """

    Jacobian = 0
    PVSensitivityToMarketQuote = 1


@dataclass(frozen=True)
class ParameterMetadata:
    """
    Describes a single curve parameter by the date of its node and a label, e.g. *"3M"*.
    """

    date: datetime
    label: str

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class CurveMetadata:
    """
    An immutable container of meta data associated with a
    :class:`~repolib.curves.InterpolatedNodalCurve`.

    Additional information, such as a calibration Jacobian, is attached with
    :meth:`with_info`, which returns a new object.
    """

    _curve_name: str
    _x_value_type: ValueType
    _y_value_type: ValueType
    _day_count: str
    _parameter_metadata: tuple[ParameterMetadata, ...] = ()
    _info: dict[CurveInfoType, Any] = field(default_factory=dict, compare=False)

    @property
    def curve_name(self) -> str:
        """The name of the *Curve*, used to key sensitivities and Jacobians."""
        return self._curve_name

    @property
    def x_value_type(self) -> ValueType:
        """The meaning of the x-values, which are year fractions for nodal curves."""
        return self._x_value_type

    @property
    def y_value_type(self) -> ValueType:
        """The meaning of the y-values, e.g. zero rates or discount factors."""
        return self._y_value_type

    @property
    def day_count(self) -> str:
        """Day count convention converting dates to x-values."""
        return self._day_count

    @property
    def parameter_metadata(self) -> tuple[ParameterMetadata, ...]:
        """Metadata of each parameter, in parameter order."""
        return self._parameter_metadata

    @property
    def info(self) -> dict[CurveInfoType, Any]:
        return dict(self._info)

    def find_info(self, info_type: CurveInfoType) -> Any | None:
        return self._info.get(info_type, None)

    def get_info(self, info_type: CurveInfoType) -> Any:
        try:
            return self._info[info_type]
        except KeyError:
            raise ValueError(VE_CURVE_INFO_NOT_FOUND.format(self._curve_name, info_type.name))

    def with_info(self, info_type: CurveInfoType, value: Any) -> CurveMetadata:
        return replace(self, _info={**self._info, info_type: value})

    def with_parameter_metadata(self, parameter_metadata: list[ParameterMetadata]) -> CurveMetadata:
        return replace(self, _parameter_metadata=tuple(parameter_metadata))
