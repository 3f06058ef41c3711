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

__docformat__ = "restructuredtext"

# Let users know if they're missing any of our hard dependencies
_hard_dependencies = ("pandas", "matplotlib", "numpy")

for _dependency in _hard_dependencies:
    try:
        __import__(_dependency)
    except ImportError as _e:  # pragma: no cover
        raise ImportError(f"`repolib` requires installation of {_dependency}: {_e}")

from repolib.default import Defaults

defaults = Defaults()

from contextlib import ContextDecorator


class default_context(ContextDecorator):
    """
    Context manager to temporarily set options in the `with` statement context.

    You need to invoke as ``default_context(pat, val, [(pat, val), ...])``.

    Examples
    --------
    >>> with default_context("convention", "act365f", "spot_lag", 2):
    ...     pass
    """

    def __init__(self, *args) -> None:  # type: ignore[no-untyped-def]
        if len(args) % 2 != 0 or len(args) < 2:
            raise ValueError("Need to invoke as default_context(pat, val, [(pat, val), ...]).")

        self.ops = list(zip(args[::2], args[1::2], strict=False))

    def __enter__(self) -> None:
        self.undo = [(pat, getattr(defaults, pat, None)) for pat, _ in self.ops]

        for pat, val in self.ops:
            setattr(defaults, pat, val)

    def __exit__(self, *args) -> None:  # type: ignore[no-untyped-def]
        if self.undo:
            for pat, val in self.undo:
                setattr(defaults, pat, val)


from repolib.enums import (
    BuySell,
    DateOrderAction,
    Err,
    MissingJacobian,
    NodeDateType,
    NoInput,
    Ok,
    TradeKind,
    ValueType,
)

from repolib.scheduling import (
    add_business_days,
    add_tenor,
    adjust,
    create_calendar,
    dcf,
    get_calendar,
)

from repolib.identifiers import (
    LegalEntityGroup,
    LegalEntityId,
    QuoteId,
    RepoGroup,
    SecurityId,
    StandardId,
)

from repolib.market_data import LegalEntitySecurity, MarketData, ReferenceData, SecurityPosition

from repolib.curves import (
    CurveInfoType,
    CurveMetadata,
    CurveNodeDate,
    CurveNodeDateOrder,
    InterpolatedNodalCurve,
    InterpolatedNodalCurveDefinition,
    ParameterMetadata,
    SimpleDiscountFactors,
    ZeroRateDiscountFactors,
)

from repolib.sensitivity import (
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
    IssuerCurveZeroRateSensitivity,
    PointSensitivities,
    RepoCurveZeroRateSensitivity,
    ZeroRateSensitivity,
)

from repolib.provider import LegalEntityDiscountingProvider

from repolib.instruments import (
    Bill,
    BillCurveNode,
    BillTemplate,
    BillTrade,
    Repo,
    RepoConvention,
    RepoCurveNode,
    RepoTemplate,
    RepoTrade,
    ResolvedBill,
    ResolvedBillTrade,
    ResolvedRepo,
    ResolvedRepoTrade,
)

from repolib.pricing import (
    DiscountingBillProductPricer,
    DiscountingBillTradePricer,
    DiscountingRepoProductPricer,
    DiscountingRepoTradePricer,
    Measure,
    RepoTradeCalculations,
    calculate,
)

from repolib.calibration import (
    MARKET_QUOTE,
    PAR_SPREAD,
    PRESENT_VALUE,
    CalibrationMeasures,
    CurveCalibrator,
    CurveGroupDefinition,
    CurveParameterSize,
    IssuerCurveEntry,
    JacobianCalibrationMatrix,
    MarketQuoteSensitivityCalculator,
    RepoCurveEntry,
    newton_ndim,
)

__all__ = [
    "defaults",
    "default_context",
    # enums
    "BuySell",
    "DateOrderAction",
    "Err",
    "MissingJacobian",
    "NodeDateType",
    "NoInput",
    "Ok",
    "TradeKind",
    "ValueType",
    # scheduling
    "add_business_days",
    "add_tenor",
    "adjust",
    "create_calendar",
    "dcf",
    "get_calendar",
    # identifiers and data
    "LegalEntityGroup",
    "LegalEntityId",
    "QuoteId",
    "RepoGroup",
    "SecurityId",
    "StandardId",
    "LegalEntitySecurity",
    "MarketData",
    "ReferenceData",
    "SecurityPosition",
    # curves
    "CurveInfoType",
    "CurveMetadata",
    "CurveNodeDate",
    "CurveNodeDateOrder",
    "InterpolatedNodalCurve",
    "InterpolatedNodalCurveDefinition",
    "ParameterMetadata",
    "SimpleDiscountFactors",
    "ZeroRateDiscountFactors",
    # sensitivities
    "CurrencyParameterSensitivities",
    "CurrencyParameterSensitivity",
    "IssuerCurveZeroRateSensitivity",
    "PointSensitivities",
    "RepoCurveZeroRateSensitivity",
    "ZeroRateSensitivity",
    "LegalEntityDiscountingProvider",
    # instruments
    "Bill",
    "BillCurveNode",
    "BillTemplate",
    "BillTrade",
    "Repo",
    "RepoConvention",
    "RepoCurveNode",
    "RepoTemplate",
    "RepoTrade",
    "ResolvedBill",
    "ResolvedBillTrade",
    "ResolvedRepo",
    "ResolvedRepoTrade",
    # pricing
    "DiscountingBillProductPricer",
    "DiscountingBillTradePricer",
    "DiscountingRepoProductPricer",
    "DiscountingRepoTradePricer",
    "Measure",
    "RepoTradeCalculations",
    "calculate",
    # calibration
    "MARKET_QUOTE",
    "PAR_SPREAD",
    "PRESENT_VALUE",
    "CalibrationMeasures",
    "CurveCalibrator",
    "CurveGroupDefinition",
    "CurveParameterSize",
    "IssuerCurveEntry",
    "JacobianCalibrationMatrix",
    "MarketQuoteSensitivityCalculator",
    "RepoCurveEntry",
    "newton_ndim",
]

__version__ = "0.1.0"
