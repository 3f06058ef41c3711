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

# Market and reference data

VE_MARKET_DATA_NOT_FOUND = "Market data not found for '{0}' on valuation date {1:%Y-%m-%d}."

VE_REFERENCE_DATA_NOT_FOUND = "Reference data not found for '{0}'."

VE_INVALID_STANDARD_ID = "`StandardId` must be parsed from a string 'scheme~value', got '{0}'."

# Discounting provider

VE_NO_REPO_GROUP = "Unable to find a repo group for '{0}' in the discounting provider."

VE_NO_ISSUER_GROUP = "Unable to find an issuer group for '{0}' in the discounting provider."

VE_NO_REPO_CURVE = "Unable to find a repo curve for group '{0}' and currency '{1}'."

VE_NO_ISSUER_CURVE = "Unable to find an issuer curve for group '{0}' and currency '{1}'."

VE_UNKNOWN_SENSITIVITY = "Point sensitivity of type '{0}' cannot be mapped to a curve."

# Instruments

VE_UNIQUE_LEGAL_ENTITY = (
    "Collateral must be based on the unique legal entity, got: {0}."
)

VE_START_BEFORE_END = "`start` must be before `end`, got start: {0:%Y-%m-%d}, end: {1:%Y-%m-%d}."

VE_TRADE_DATE_AFTER_START = (
    "`trade_date` must be on or before `start`, got trade_date: {0:%Y-%m-%d}, "
    "start: {1:%Y-%m-%d}."
)

VE_UNKNOWN_CONVENTION = "Repo convention '{0}' is not known. Available: {1}."

NI_LAST_FIXING_NODE = "Node date of type 'LastFixing' is not supported by a '{0}'."

# Curves

VE_CURVE_PARAMETER_LENGTH = (
    "Curve '{0}' expects {1} parameters but {2} were given."
)

VE_CURVE_NODE_COUNT = "Curve '{0}' requires at least one node."

VE_CURVE_INFO_NOT_FOUND = "Curve '{0}' metadata carries no information of type '{1}'."

VE_NODE_DATE_CLASH = (
    "Curve '{0}' nodes '{1}' and '{2}' have dates closer than the minimum gap of {3} days."
)

VE_DISCOUNT_FACTORS_TYPE = (
    "Curve '{0}' with y-value type '{1}' cannot produce discount factors."
)

# Calibration

TE_UNSUPPORTED_TRADE = "Trade type '{0}' is not supported for calibration by measures '{1}'."

VE_DUPLICATE_TRADE_KIND = "Calibration measures '{0}' specify trade kind '{1}' more than once."

VE_MISSING_CURVE_DEFINITION = (
    "Curve group '{0}' has an entry for curve '{1}' which has no curve definition."
)

VE_PARAMETER_LENGTH = (
    "Parameter vector has length {0} but the curve definitions require {1} parameters."
)

VE_NON_SQUARE = (
    "Curve group '{0}' has {1} calibration instruments for {2} curve parameters. "
    "The system must be square to calibrate."
)

VE_CALIBRATION_FAILED = "Curve group '{0}' calibration failed: {1}"

VE_MISSING_JACOBIAN = (
    "Market quote sensitivity requires Jacobian calibration information for curve '{0}'."
)

W_MISSING_JACOBIAN = (
    "Curve '{0}' has no Jacobian calibration information. Its parameter sensitivity is "
    "returned without a market quote transform."
)

VE_MAX_ITER = "`max_iter`: {0} exceeded in 'newton_ndim' algorithm."
