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
Calculations of measures of a repo trade against a single discounting provider.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from repolib.enums.generics import Err, NoInput, Ok, _validate_obj_not_no_input
from repolib.instruments import RepoTrade
from repolib.pricing.repo import DiscountingRepoTradePricer

if TYPE_CHECKING:
    from repolib.enums.generics import Result
    from repolib.instruments import ResolvedRepoTrade
    from repolib.market_data import ReferenceData
    from repolib.provider import LegalEntityDiscountingProvider
    from repolib.sensitivity import CurrencyParameterSensitivities
    from repolib.typing import Any, Sequence  # pragma: no cover

logger = logging.getLogger(__name__)

ONE_BASIS_POINT = 1.0e-4


class Measure(Enum):
    """
    Enumerable type for the measures calculable by :func:`calculate`.
    """

    PresentValue = "present_value"
    PV01CalibratedSum = "pv01_calibrated_sum"
    PV01CalibratedBucketed = "pv01_calibrated_bucketed"
    ParRate = "par_rate"
    ParSpread = "par_spread"
    CurrencyExposure = "currency_exposure"
    CurrentCash = "current_cash"
    ResolvedTarget = "resolved_target"


def _get_measure(measure: str | Measure) -> Measure:
    if isinstance(measure, Measure):
        return measure
    try:
        return Measure(measure.lower())
    except ValueError:
        raise ValueError(
            f"`measure` as string: '{measure}' is not a valid option. Please consult docs."
        )


class RepoTradeCalculations:
    """
    Calculates the measures of a :class:`~repolib.instruments.ResolvedRepoTrade` using a
    :class:`~repolib.pricing.DiscountingRepoTradePricer`.
    """

    def __init__(self, trade_pricer: DiscountingRepoTradePricer | None = None) -> None:
        self.trade_pricer = trade_pricer or DiscountingRepoTradePricer()

    def present_value(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> dict[str, float]:
        return self.trade_pricer.present_value(trade, provider)

    def pv01_calibrated_sum(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> dict[str, float]:
        """
        Return the present value change for a one basis point shift of every calibrated curve
        parameter, per currency.
        """
        sens = self.pv01_calibrated_bucketed(trade, provider)
        return sens.total()

    def pv01_calibrated_bucketed(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> CurrencyParameterSensitivities:
        """
        Return the present value change for a one basis point shift of each calibrated curve
        parameter.
        """
        points = self.trade_pricer.present_value_sensitivity(trade, provider)
        return provider.parameter_sensitivity(points).multiplied_by(ONE_BASIS_POINT)

    def par_rate(self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider) -> float:
        return self.trade_pricer.par_rate(trade, provider)

    def par_spread(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> float:
        return self.trade_pricer.par_spread(trade, provider)

    def currency_exposure(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> dict[str, float]:
        return self.trade_pricer.currency_exposure(trade, provider)

    def current_cash(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> dict[str, float]:
        return self.trade_pricer.current_cash(trade, provider)


_CALCULATIONS = RepoTradeCalculations()


def calculate(
    trade: RepoTrade | ResolvedRepoTrade,
    measures: Sequence[Measure | str],
    provider: LegalEntityDiscountingProvider,
    ref_data: ReferenceData | NoInput = NoInput(0),
) -> dict[Measure, Result[Any]]:
    """
    Calculate several measures of a repo trade.

    Parameters
    ----------
    trade : RepoTrade or ResolvedRepoTrade
        The trade. An unresolved trade is resolved against ``ref_data``.
    measures : Sequence[Measure or str]
        The measures to calculate, e.g. ``["present_value", "par_rate"]``.
    provider : LegalEntityDiscountingProvider
        The curves used for pricing.
    ref_data : ReferenceData, optional
        Required to resolve a :class:`~repolib.instruments.RepoTrade`.

    Returns
    -------
    dict[Measure, Ok or Err]

    Notes
    -----
    Each measure is calculated independently. A failure is captured as an
    :class:`~repolib.Err` for that measure only and does not prevent the others.
    """
    measures_ = [_get_measure(m) for m in measures]
    if isinstance(trade, RepoTrade):
        try:
            resolved = trade.resolve(_validate_obj_not_no_input(ref_data, "ref_data"))
        except ValueError as e:
            return {m: Err(e) for m in measures_}
    else:
        resolved = trade

    results: dict[Measure, Result[Any]] = {}
    for measure in measures_:
        if measure == Measure.ResolvedTarget:
            results[measure] = Ok(resolved)
            continue
        try:
            results[measure] = Ok(getattr(_CALCULATIONS, measure.value)(resolved, provider))
        except (ValueError, TypeError) as e:
            logger.debug("Measure '%s' failed: %s", measure.name, e)
            results[measure] = Err(e)
    return results
