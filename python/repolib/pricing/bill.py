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
    from repolib.curves import IssuerCurveDiscountFactors
    from repolib.instruments import ResolvedBill, ResolvedBillTrade
    from repolib.provider import LegalEntityDiscountingProvider  # pragma: no cover


class DiscountingBillProductPricer:
    """
    Pricer for a :class:`~repolib.instruments.ResolvedBill` discounted on the issuer curve of
    its legal entity.

    The present value is :math:`N v(m) - N p v(s)` with :math:`p = 1 / (1 + y d)` the price
    implied by the yield. The settlement amount is excluded once the valuation date is after
    settlement and the present value after maturity is zero.
    """

    def present_value(
        self, product: ResolvedBill, provider: LegalEntityDiscountingProvider
    ) -> float:
        if provider.valuation_date > product.maturity:
            return 0.0
        df = self._discount_factors(product, provider)
        pv = product.notional * df.discount_factor(product.maturity)
        if provider.valuation_date <= product.settlement:
            pv -= product.settlement_amount * df.discount_factor(product.settlement)
        return pv

    def present_value_sensitivity(
        self, product: ResolvedBill, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        if provider.valuation_date > product.maturity:
            return PointSensitivities.empty()
        df = self._discount_factors(product, provider)
        sens = PointSensitivities(
            [df.zero_rate_point_sensitivity(product.maturity).multiplied_by(product.notional)]
        )
        if provider.valuation_date <= product.settlement:
            sens = sens.combined_with(
                df.zero_rate_point_sensitivity(product.settlement).multiplied_by(
                    -product.settlement_amount
                )
            )
        return sens.normalized()

    def par_rate(self, product: ResolvedBill, provider: LegalEntityDiscountingProvider) -> float:
        """The yield at which the bill settles at its discounted value."""
        df = self._discount_factors(product, provider)
        df_settle = df.discount_factor(product.settlement)
        df_maturity = df.discount_factor(product.maturity)
        return (df_settle / df_maturity - 1.0) / product.year_fraction

    def par_rate_sensitivity(
        self, product: ResolvedBill, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        return self.par_spread_sensitivity(product, provider)

    def par_spread(self, product: ResolvedBill, provider: LegalEntityDiscountingProvider) -> float:
        return self.par_rate(product, provider) - product.rate

    def par_spread_sensitivity(
        self, product: ResolvedBill, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        df = self._discount_factors(product, provider)
        yf_inv = 1.0 / product.year_fraction
        df_settle = df.discount_factor(product.settlement)
        df_maturity_inv = 1.0 / df.discount_factor(product.maturity)
        sens_settle = df.zero_rate_point_sensitivity(product.settlement).multiplied_by(
            df_maturity_inv * yf_inv
        )
        sens_maturity = df.zero_rate_point_sensitivity(product.maturity).multiplied_by(
            -df_settle * df_maturity_inv * df_maturity_inv * yf_inv
        )
        return PointSensitivities([sens_settle, sens_maturity]).normalized()

    @staticmethod
    def _discount_factors(
        product: ResolvedBill, provider: LegalEntityDiscountingProvider
    ) -> IssuerCurveDiscountFactors:
        return provider.issuer_curve_discount_factors(product.legal_entity_id, product.currency)


class DiscountingBillTradePricer:
    """
    Pricer for a :class:`~repolib.instruments.ResolvedBillTrade`, delegating to a
    :class:`DiscountingBillProductPricer`.
    """

    def __init__(self, product_pricer: DiscountingBillProductPricer | None = None) -> None:
        self.product_pricer = product_pricer or DiscountingBillProductPricer()

    def present_value(
        self, trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider
    ) -> dict[str, float]:
        pv = self.product_pricer.present_value(trade.product, provider)
        return {trade.product.currency: pv}

    def present_value_sensitivity(
        self, trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        return self.product_pricer.present_value_sensitivity(trade.product, provider)

    def par_rate(self, trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider) -> float:
        return self.product_pricer.par_rate(trade.product, provider)

    def par_rate_sensitivity(
        self, trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        return self.product_pricer.par_rate_sensitivity(trade.product, provider)

    def par_spread(
        self, trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider
    ) -> float:
        return self.product_pricer.par_spread(trade.product, provider)

    def par_spread_sensitivity(
        self, trade: ResolvedBillTrade, provider: LegalEntityDiscountingProvider
    ) -> PointSensitivities:
        return self.product_pricer.par_spread_sensitivity(trade.product, provider)
