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

from repolib.curves.curve import InterpolatedNodalCurve
from repolib.curves.definition import (
    CurveNode,
    CurveNodeDate,
    CurveNodeDateOrder,
    InterpolatedNodalCurveDefinition,
)
from repolib.curves.discount_factors import (
    DiscountFactors,
    IssuerCurveDiscountFactors,
    RepoCurveDiscountFactors,
    SimpleDiscountFactors,
    ZeroRateDiscountFactors,
    discount_factors,
)
from repolib.curves.interpolation import INTERPOLATION, index_left
from repolib.curves.metadata import CurveInfoType, CurveMetadata, ParameterMetadata

__all__ = [
    "CurveInfoType",
    "CurveMetadata",
    "CurveNode",
    "CurveNodeDate",
    "CurveNodeDateOrder",
    "DiscountFactors",
    "INTERPOLATION",
    "InterpolatedNodalCurve",
    "InterpolatedNodalCurveDefinition",
    "IssuerCurveDiscountFactors",
    "ParameterMetadata",
    "RepoCurveDiscountFactors",
    "SimpleDiscountFactors",
    "ZeroRateDiscountFactors",
    "discount_factors",
    "index_left",
]
