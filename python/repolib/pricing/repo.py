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

from repolib.sensitivity import PointSensitivities

if TYPE_CHECKING:
    from repolib.curves import RepoCurveDiscountFactors
    from repolib.instruments import ResolvedRepo, ResolvedRepoTrade
    from repolib.provider import LegalEntityDiscountingProvider
    from repolib.typing import datetime  # pragma: no cover


class DiscountingRepoProductPricer:
    """
    Pricer for a :class:`~repolib.instruments.ResolvedRepo` discounted on the repo curve of
    the legal entity of its collateral.

    The present value is

    .. math::

       P = (N + I) v(m) - N_0 v(s)

    where :math:`N` is the signed notional, :math:`I = N r d` the interest, :math:`v` the
    discount factor and :math:`N_0` the initial amount, which is :math:`N` when the valuation
    date is not after the start date, :math:`s`, and zero otherwise. The present value after
    the end date, :math:`m`, is zero.
    """

    def present_value(
        self, product: ResolvedRepo, provider: LegalEntityDiscountingProvider
    ) -> float:
        if provider.valuation_date > product.end:
            return 0.0
        df = self._discount_factors(product, provider)
        df_start = df.discount_factor(product.start)
        df_end = df.discount_factor(product.end)
        initial = self._initial_amount(product, provider)
        return (product.notional + product.interest) * df_end - initial * df_start

    def present_value_sensitivity(
        self, product: ResolvedRepo, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        """Return the sensitivity of :meth:`present_value` to the repo curve zero rates."""
        if provider.valuation_date > product.end:
            return PointSensitivities.empty()
        df = self._discount_factors(product, provider)
        # backward sweep
        df_end_bar = product.notional + product.interest
        df_start_bar = -self._initial_amount(product, provider)
        sens_start = df.zero_rate_point_sensitivity(product.start).multiplied_by(df_start_bar)
        sens_end = df.zero_rate_point_sensitivity(product.end).multiplied_by(df_end_bar)
        return PointSensitivities([sens_start, sens_end]).normalized()

    def par_rate(self, product: ResolvedRepo, provider: LegalEntityDiscountingProvider) -> float:
        """The rate for which the present value is zero."""
        df = self._discount_factors(product, provider)
        df_start = df.discount_factor(product.start)
        df_end = df.discount_factor(product.end)
        return (df_start / df_end - 1.0) / product.year_fraction

    def par_rate_sensitivity(
        self, product: ResolvedRepo, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        return self.par_spread_sensitivity(product, provider)

    def par_spread(self, product: ResolvedRepo, provider: LegalEntityDiscountingProvider) -> float:
        """The spread to add to the rate of the repo for its present value to be zero."""
        return self.par_rate(product, provider) - product.rate

    def par_spread_sensitivity(
        self, product: ResolvedRepo, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        df = self._discount_factors(product, provider)
        yf_inv = 1.0 / product.year_fraction
        df_start = df.discount_factor(product.start)
        df_end_inv = 1.0 / df.discount_factor(product.end)
        sens_start = df.zero_rate_point_sensitivity(product.start).multiplied_by(
            df_end_inv * yf_inv
        )
        sens_end = df.zero_rate_point_sensitivity(product.end).multiplied_by(
            -df_start * df_end_inv * df_end_inv * yf_inv
        )
        return PointSensitivities([sens_start, sens_end]).normalized()

    @staticmethod
    def _discount_factors(
        product: ResolvedRepo, provider: LegalEntityDiscountingProvider
    ) -> RepoCurveDiscountFactors:
        return provider.repo_curve_discount_factors(product.legal_entity_id, product.currency)

    @staticmethod
    def _initial_amount(product: ResolvedRepo, provider: LegalEntityDiscountingProvider) -> float:
        return 0.0 if provider.valuation_date > product.start else product.notional


class DiscountingRepoTradePricer:
    """
    Pricer for a :class:`~repolib.instruments.ResolvedRepoTrade`, delegating to a
    :class:`DiscountingRepoProductPricer`.
    """

    def __init__(self, product_pricer: DiscountingRepoProductPricer | None = None) -> None:
        self.product_pricer = product_pricer or DiscountingRepoProductPricer()

    def present_value(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> dict[str, float]:
        """Return the present value keyed by the currency of the repo."""
        pv = self.product_pricer.present_value(trade.product, provider)
        return {trade.product.currency: pv}

    def present_value_sensitivity(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        return self.product_pricer.present_value_sensitivity(trade.product, provider)

    def par_rate(self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider) -> float:
        return self.product_pricer.par_rate(trade.product, provider)

    def par_rate_sensitivity(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        return self.product_pricer.par_rate_sensitivity(trade.product, provider)

    def par_spread(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> float:
        return self.product_pricer.par_spread(trade.product, provider)

    def par_spread_sensitivity(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        return self.product_pricer.par_spread_sensitivity(trade.product, provider)

    def currency_exposure(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> dict[str, float]:
        """The repo has cashflows in a single currency so its exposure is its present value."""
        return self.present_value(trade, provider)

    def current_cash(
        self, trade: ResolvedRepoTrade, provider: LegalEntityDiscountingProvider
    ) -> dict[str, float]:
        """
        Return the cash paid or received on the valuation date: the negated notional on the
        start date and the notional plus interest on the end date.
        """
        product = trade.product
        return {product.currency: _current_cash(product, provider.valuation_date)}


def _current_cash(product: ResolvedRepo, valuation_date: datetime) -> float:
    if valuation_date == product.start:
        return -product.notional
    elif valuation_date == product.end:
        return product.notional + product.interest
    return 0.0
