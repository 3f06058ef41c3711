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

from repolib.calibration.calibrator import CurveCalibrator
from repolib.calibration.functions import CalibrationDerivative, CalibrationValue
from repolib.calibration.generator import ImmutableProviderGenerator, ProviderGenerator
from repolib.calibration.group import CurveGroupDefinition, IssuerCurveEntry, RepoCurveEntry
from repolib.calibration.market_quote import (
    CurveParameterSize,
    JacobianCalibrationMatrix,
    MarketQuoteSensitivityCalculator,
)
from repolib.calibration.measures import (
    BILL_MARKET_QUOTE,
    BILL_PAR_SPREAD,
    BILL_PRESENT_VALUE,
    MARKET_QUOTE,
    PAR_SPREAD,
    PRESENT_VALUE,
    REPO_MARKET_QUOTE,
    REPO_PAR_SPREAD,
    REPO_PRESENT_VALUE,
    CalibrationMeasure,
    CalibrationMeasures,
    TradeCalibrationMeasure,
)
from repolib.calibration.newton import newton_ndim

__all__ = [
    "BILL_MARKET_QUOTE",
    "BILL_PAR_SPREAD",
    "BILL_PRESENT_VALUE",
    "MARKET_QUOTE",
    "PAR_SPREAD",
    "PRESENT_VALUE",
    "REPO_MARKET_QUOTE",
    "REPO_PAR_SPREAD",
    "REPO_PRESENT_VALUE",
    "CalibrationDerivative",
    "CalibrationMeasure",
    "CalibrationMeasures",
    "CalibrationValue",
    "CurveCalibrator",
    "CurveGroupDefinition",
    "CurveParameterSize",
    "ImmutableProviderGenerator",
    "IssuerCurveEntry",
    "JacobianCalibrationMatrix",
    "MarketQuoteSensitivityCalculator",
    "ProviderGenerator",
    "RepoCurveEntry",
    "TradeCalibrationMeasure",
    "newton_ndim",
]
