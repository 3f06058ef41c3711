import logging
from datetime import datetime as dt

import numpy as np
import pytest
from numpy.testing import assert_allclose
from repolib import default_context
from repolib.calibration import (
    MARKET_QUOTE,
    PAR_SPREAD,
    PRESENT_VALUE,
    REPO_MARKET_QUOTE,
    REPO_PAR_SPREAD,
    CalibrationDerivative,
    CalibrationMeasures,
    CalibrationValue,
    CurveCalibrator,
    CurveGroupDefinition,
    CurveParameterSize,
    ImmutableProviderGenerator,
    IssuerCurveEntry,
    JacobianCalibrationMatrix,
    MarketQuoteSensitivityCalculator,
    RepoCurveEntry,
)
from repolib.curves import CurveInfoType, InterpolatedNodalCurveDefinition
from repolib.enums.parameters import TradeKind
from repolib.identifiers import LegalEntityGroup, LegalEntityId, QuoteId, RepoGroup, SecurityId
from repolib.instruments import (
    BillCurveNode,
    BillTemplate,
    RepoConvention,
    RepoCurveNode,
    RepoTemplate,
)
from repolib.market_data import LegalEntitySecurity, MarketData, ReferenceData, SecurityPosition
from repolib.pricing import DiscountingBillProductPricer, DiscountingRepoProductPricer
from repolib.provider import LegalEntityDiscountingProvider

VAL = dt(2017, 12, 11)
UK_GOVT = LegalEntityId("OG", "UK_GOVT")
US_GOVT = LegalEntityId("OG", "US_GOVT")
UK_GILT = SecurityId("OG", "UK_GILT_10Y")
UK_BILL = SecurityId("OG", "UK_BILL")
US_BOND = SecurityId("OG", "US_BOND_10Y")
UK_REPO = RepoGroup("UK_REPO")
US_REPO = RepoGroup("US_REPO")
UK_ISSUER = LegalEntityGroup("UK_ISSUER")

UK_TENORS = ["1W", "1M", "3M"]
UK_QUOTES = [0.00565, 0.0059, 0.00605]
US_TENORS = ["1W", "2W", "1M", "3M"]
US_QUOTES = [0.0142, 0.0131, 0.0125, 0.0124]
BILL_TENORS = ["3M", "6M"]
BILL_QUOTES = [0.0045, 0.005]

REF_DATA = ReferenceData.of(
    [
        LegalEntitySecurity(UK_GILT, UK_GOVT),
        LegalEntitySecurity(UK_BILL, UK_GOVT),
        LegalEntitySecurity(US_BOND, US_GOVT),
    ]
)

REPO_PRICER = DiscountingRepoProductPricer()
BILL_PRICER = DiscountingBillProductPricer()
EPS = 1e-7


def _quote(prefix, tenor):
    return QuoteId("OG", f"{prefix}_{tenor}")


MARKET_DATA = MarketData(
    VAL,
    {
        **{_quote("UK_REPO", t): q for t, q in zip(UK_TENORS, UK_QUOTES, strict=True)},
        **{_quote("US_REPO", t): q for t, q in zip(US_TENORS, US_QUOTES, strict=True)},
        **{_quote("UK_BILL", t): q for t, q in zip(BILL_TENORS, BILL_QUOTES, strict=True)},
    },
)


def _uk_curve():
    collateral = [SecurityPosition(UK_GILT)]
    nodes = [
        RepoCurveNode(RepoTemplate(t, collateral, "GBP-REPO-T1"), _quote("UK_REPO", t))
        for t in UK_TENORS
    ]
    return InterpolatedNodalCurveDefinition("UK-REPO", nodes)


def _us_curve():
    collateral = [SecurityPosition(US_BOND)]
    nodes = [
        RepoCurveNode(RepoTemplate(t, collateral, "USD-REPO-T1"), _quote("US_REPO", t))
        for t in US_TENORS
    ]
    return InterpolatedNodalCurveDefinition("US-REPO", nodes)


def _bill_curve():
    convention = RepoConvention.of("GBP-REPO-T1")
    nodes = [
        BillCurveNode(BillTemplate(t, UK_BILL, convention), _quote("UK_BILL", t))
        for t in BILL_TENORS
    ]
    return InterpolatedNodalCurveDefinition("UK-ISSUER", nodes)


UK_ENTRY = RepoCurveEntry("UK-REPO", {(UK_REPO, "GBP")})
US_ENTRY = RepoCurveEntry("US-REPO", {(US_REPO, "usd")})
BILL_ENTRY = IssuerCurveEntry("UK-ISSUER", {(UK_ISSUER, "gbp")})


def _uk_group(**kwargs):
    return CurveGroupDefinition(
        "UK",
        [_uk_curve()],
        repo_curve_entries=[UK_ENTRY],
        repo_curve_groups={UK_GOVT: UK_REPO},
        **kwargs,
    )


def _us_group(**kwargs):
    return CurveGroupDefinition(
        "US",
        [_us_curve()],
        repo_curve_entries=[US_ENTRY],
        repo_curve_groups={US_GOVT: US_REPO},
        **kwargs,
    )


def _combined_group(**kwargs):
    return CurveGroupDefinition(
        "UK-US",
        [_uk_curve(), _us_curve()],
        repo_curve_entries=[UK_ENTRY, US_ENTRY],
        repo_curve_groups={UK_GOVT: UK_REPO, US_GOVT: US_REPO},
        **kwargs,
    )


def _bill_group(**kwargs):
    return CurveGroupDefinition(
        "UK-BILL",
        [_uk_curve(), _bill_curve()],
        repo_curve_entries=[UK_ENTRY],
        issuer_curve_entries=[BILL_ENTRY],
        repo_curve_groups={UK_GOVT: UK_REPO},
        issuer_curve_groups={UK_GOVT: UK_ISSUER},
        **kwargs,
    )


def _bumped(market_data, quote_id, shift):
    return market_data.with_value(quote_id, market_data.value(quote_id) + shift)


@pytest.fixture(scope="module")
def uk_provider():
    group = _uk_group(compute_pv_sensitivity_to_market_quote=True)
    return CurveCalibrator().calibrate(group, MARKET_DATA, REF_DATA)


@pytest.fixture(scope="module")
def two_group_provider():
    return CurveCalibrator().calibrate([_uk_group(), _us_group()], MARKET_DATA, REF_DATA)


class TestCalibrationMeasures:
    def test_registry(self) -> None:
        assert PAR_SPREAD.trade_kinds == {TradeKind.Repo, TradeKind.Bill}
        assert MARKET_QUOTE.name == "MarketQuote"
        assert PRESENT_VALUE.name == "PresentValue"

    def test_duplicate_kind_raises(self) -> None:
        with pytest.raises(ValueError, match="specify trade kind 'Repo' more than once"):
            CalibrationMeasures("Mixed", [REPO_PAR_SPREAD, REPO_MARKET_QUOTE])

    def test_empty_name_raises(self) -> None:
        with pytest.raises(ValueError, match="`name` of calibration measures must not be empty"):
            CalibrationMeasures("", [REPO_PAR_SPREAD])

    def test_unsupported_trade_raises(self, uk_provider) -> None:
        with pytest.raises(TypeError, match="Trade type 'object' is not supported"):
            PAR_SPREAD.value(object(), uk_provider)

    @pytest.mark.parametrize("index", [0, -1])
    def test_resolved_product_raises(self, uk_provider, index) -> None:
        product = _bill_group().resolved_trades(MARKET_DATA, REF_DATA)[index].product
        name = type(product).__name__
        with pytest.raises(TypeError, match=f"'{name}' is not supported"):
            PAR_SPREAD.value(product, uk_provider)
        with pytest.raises(TypeError, match=f"'{name}' is not supported"):
            PAR_SPREAD.sensitivity(product, uk_provider)

    def test_unregistered_kind_raises(self, uk_provider) -> None:
        trade = _bill_group().resolved_trades(MARKET_DATA, REF_DATA)[-1]
        measures = CalibrationMeasures("RepoOnly", [REPO_PAR_SPREAD])
        with pytest.raises(TypeError, match="'ResolvedBillTrade' is not supported .* 'RepoOnly'"):
            measures.value(trade, uk_provider)

    def test_values(self, uk_provider) -> None:
        trade = _uk_group().resolved_trades(MARKET_DATA, REF_DATA)[1]
        product = trade.product
        assert PAR_SPREAD.value(trade, uk_provider) == REPO_PRICER.par_spread(product, uk_provider)
        assert MARKET_QUOTE.value(trade, uk_provider) == REPO_PRICER.par_rate(product, uk_provider)
        assert PRESENT_VALUE.value(trade, uk_provider) == REPO_PRICER.present_value(
            product, uk_provider
        )

    def test_derivative_pads_other_curves(self, uk_provider) -> None:
        trade = _uk_group().resolved_trades(MARKET_DATA, REF_DATA)[1]
        order = [CurveParameterSize("OTHER", 2), CurveParameterSize("UK-REPO", 3)]
        result = PAR_SPREAD.derivative(trade, uk_provider, order)
        sens = PAR_SPREAD.sensitivity(trade, uk_provider).get("UK-REPO", "gbp").sensitivity
        assert result.shape == (5,)
        assert_allclose(result[:2], [0.0, 0.0])
        assert_allclose(result[2:], sens)

    def test_derivative_empty_order(self, uk_provider) -> None:
        trade = _uk_group().resolved_trades(MARKET_DATA, REF_DATA)[0]
        assert PAR_SPREAD.derivative(trade, uk_provider, []).shape == (0,)

    def test_market_quote_sensitivity_is_identity_for_nodes(self, uk_provider) -> None:
        # the par rate of each node is its quote, so its quote sensitivity is a unit vector
        trades = _uk_group().resolved_trades(MARKET_DATA, REF_DATA)
        order = [CurveParameterSize("UK-REPO", 3)]
        result = np.vstack([MARKET_QUOTE.derivative(t, uk_provider, order) for t in trades])
        assert_allclose(result, np.eye(3), atol=1e-10)


class TestCurveGroupDefinition:
    def test_missing_definition_raises(self) -> None:
        with pytest.raises(ValueError, match="entry for curve 'US-REPO' which has no curve"):
            CurveGroupDefinition("UK", [_uk_curve()], repo_curve_entries=[UK_ENTRY, US_ENTRY])

    def test_issuer_missing_definition_raises(self) -> None:
        with pytest.raises(ValueError, match="entry for curve 'UK-ISSUER'"):
            CurveGroupDefinition("UK", [_uk_curve()], issuer_curve_entries=[BILL_ENTRY])

    def test_definition_without_entry_is_valid(self) -> None:
        group = CurveGroupDefinition("UK", [_uk_curve()])
        assert group.find_repo_curve_entry("UK-REPO") is None

    def test_pv_sensitivity_implies_jacobian(self) -> None:
        group = _uk_group(compute_jacobian=False, compute_pv_sensitivity_to_market_quote=True)
        assert group.compute_jacobian

    def test_entries_lower_case_currency(self) -> None:
        assert UK_ENTRY.entries == frozenset({(UK_REPO, "gbp")})

    def test_lookups(self) -> None:
        group = _bill_group()
        assert group.find_curve_definition("UK-ISSUER").parameter_count == 2
        assert group.find_curve_definition("XX") is None
        assert group.find_repo_curve_entry("UK-REPO") == UK_ENTRY
        assert group.find_issuer_curve_entry("UK-ISSUER") == BILL_ENTRY
        assert group.find_issuer_curve_entry("UK-REPO") is None

    def test_curve_order(self) -> None:
        group = _combined_group()
        assert group.total_parameter_count == 7
        assert group.curve_order() == [
            CurveParameterSize("UK-REPO", 3),
            CurveParameterSize("US-REPO", 4),
        ]

    def test_initial_guesses(self) -> None:
        assert _combined_group().initial_guesses(MARKET_DATA) == UK_QUOTES + US_QUOTES

    def test_resolved_trades(self) -> None:
        trades = _bill_group().resolved_trades(MARKET_DATA, REF_DATA)
        assert [t.kind for t in trades] == [TradeKind.Repo] * 3 + [TradeKind.Bill] * 2
        assert [t.product.rate for t in trades] == UK_QUOTES + BILL_QUOTES
        assert all(t.product.notional == 1.0 for t in trades)

    def test_resolved_trades_notional_default(self) -> None:
        with default_context("notional", 1e6):
            trades = _uk_group().resolved_trades(MARKET_DATA, REF_DATA)
        assert trades[0].product.notional == 1e6

    def test_metadata(self) -> None:
        result = _uk_group().metadata(VAL, REF_DATA)
        assert [m.label for m in result[0].parameter_metadata] == UK_TENORS

    def test_filtered_keeps_settings(self) -> None:
        group = _uk_group(compute_jacobian=False)
        result = group.filtered(VAL, REF_DATA)
        assert not result.compute_jacobian
        assert result.repo_curve_groups == group.repo_curve_groups
        assert result.repo_curve_entries == group.repo_curve_entries


class TestImmutableProviderGenerator:
    def setup_method(self) -> None:
        self.known = LegalEntityDiscountingProvider.empty(VAL)
        self.generator = ImmutableProviderGenerator.of(self.known, _uk_group(), REF_DATA)

    def test_generate(self) -> None:
        provider = self.generator.generate([0.01, 0.02, 0.03])
        assert provider.valuation_date == VAL
        df = provider.repo_curve_discount_factors(UK_GOVT, "gbp")
        assert df.repo_group == UK_REPO
        assert_allclose(df.discount_factors.curve.y_values, [0.01, 0.02, 0.03])
        assert df.discount_factors.curve.metadata.find_info(CurveInfoType.Jacobian) is None

    def test_generate_raises(self) -> None:
        with pytest.raises(ValueError, match="has length 2 but the curve definitions require 3"):
            self.generator.generate([0.01, 0.02])

    def test_generate_attaches_info(self) -> None:
        jac = JacobianCalibrationMatrix([CurveParameterSize("UK-REPO", 3)], np.eye(3))
        provider = self.generator.generate(
            [0.01, 0.02, 0.03], {"UK-REPO": jac}, {"UK-REPO": np.ones(3)}
        )
        meta = provider.find_curve("UK-REPO").metadata
        assert meta.get_info(CurveInfoType.Jacobian) == jac
        assert_allclose(meta.get_info(CurveInfoType.PVSensitivityToMarketQuote), np.ones(3))

    def test_shared_curve(self) -> None:
        special = RepoGroup("UK_SPECIAL")
        group = CurveGroupDefinition(
            "UK",
            [_uk_curve()],
            repo_curve_entries=[RepoCurveEntry("UK-REPO", {(UK_REPO, "gbp"), (special, "gbp")})],
            repo_curve_security_groups={UK_GILT: special},
        )
        provider = ImmutableProviderGenerator.of(self.known, group, REF_DATA).generate(
            [0.01, 0.02, 0.03]
        )
        assert len(provider.repo_curves) == 2
        assert provider.discount_factors(UK_GILT, "gbp").curve.name == "UK-REPO"
        assert len(provider.curves()) == 1
        df_entity = provider.repo_curve_discount_factors(UK_GOVT, "gbp", UK_GILT)
        df_group = provider.repo_curves[(UK_REPO, "gbp")]
        for date in [dt(2017, 12, 12), dt(2018, 1, 15), dt(2018, 3, 12), dt(2019, 1, 1)]:
            assert df_entity.discount_factor(date) == df_group.discount_factor(date)

    def test_overlays_known(self, uk_provider) -> None:
        generator = ImmutableProviderGenerator.of(uk_provider, _us_group(), REF_DATA)
        provider = generator.generate([0.01, 0.01, 0.01, 0.01])
        assert set(provider.curves().keys()) == {"UK-REPO", "US-REPO"}
        assert provider.repo_curve_groups == {UK_GOVT: UK_REPO, US_GOVT: US_REPO}
        # the known provider is unchanged
        assert set(uk_provider.curves().keys()) == {"UK-REPO"}

    def test_group_mapping_wins(self, uk_provider) -> None:
        other = RepoGroup("OTHER")
        group = CurveGroupDefinition(
            "OTHER",
            [_uk_curve()],
            repo_curve_entries=[RepoCurveEntry("UK-REPO", {(other, "gbp")})],
            repo_curve_groups={UK_GOVT: other},
        )
        provider = ImmutableProviderGenerator.of(uk_provider, group, REF_DATA).generate(
            [0.01, 0.02, 0.03]
        )
        assert provider.repo_curve_discount_factors(UK_GOVT, "gbp").repo_group == other

    def test_recalibrated_curve_drops_known_entries(self, uk_provider) -> None:
        other = RepoGroup("OTHER")
        group = CurveGroupDefinition(
            "OTHER",
            [_uk_curve()],
            repo_curve_entries=[RepoCurveEntry("UK-REPO", {(other, "gbp")})],
        )
        provider = ImmutableProviderGenerator.of(uk_provider, group, REF_DATA).generate(
            [0.01, 0.02, 0.03]
        )
        assert list(provider.repo_curves.keys()) == [(other, "gbp")]
        curve = provider.find_curve("UK-REPO")
        assert_allclose(curve.y_values, [0.01, 0.02, 0.03])
        assert curve.metadata.find_info(CurveInfoType.Jacobian) is None
        with pytest.raises(ValueError, match="UK_REPO"):
            provider.repo_curve_discount_factors(UK_GOVT, "gbp")

    def test_parameter_offsets(self) -> None:
        generator = ImmutableProviderGenerator.of(
            LegalEntityDiscountingProvider.empty(VAL), _combined_group(), REF_DATA
        )
        x = np.array([0.01, 0.02, 0.03, 0.04, 0.05, 0.06, 0.07])
        provider = generator.generate(x)
        assert_allclose(provider.find_curve("UK-REPO").y_values, x[:3])
        assert_allclose(provider.find_curve("US-REPO").y_values, x[3:])
        uk = provider.repo_curve_discount_factors(UK_GOVT, "gbp").discount_factors
        us = provider.repo_curve_discount_factors(US_GOVT, "usd").discount_factors
        assert uk.curve.name == "UK-REPO"
        assert us.curve.name == "US-REPO"


class TestCalibrationFunctions:
    def setup_method(self) -> None:
        group = _uk_group()
        self.trades = tuple(group.resolved_trades(MARKET_DATA, REF_DATA))
        self.generator = ImmutableProviderGenerator.of(
            LegalEntityDiscountingProvider.empty(VAL), group, REF_DATA
        )
        self.order = tuple(group.curve_order())
        self.x = np.array(UK_QUOTES)

    def test_value(self) -> None:
        value_fn = CalibrationValue(self.trades, PAR_SPREAD, self.generator)
        provider = self.generator.generate(self.x)
        expected = [REPO_PRICER.par_spread(t.product, provider) for t in self.trades]
        assert_allclose(value_fn(self.x), expected)

    def test_derivative_matches_finite_difference(self) -> None:
        value_fn = CalibrationValue(self.trades, PAR_SPREAD, self.generator)
        derivative_fn = CalibrationDerivative(self.trades, PAR_SPREAD, self.generator, self.order)
        result = derivative_fn(self.x)
        assert result.shape == (3, 3)
        for j in range(3):
            up, dn = self.x.copy(), self.x.copy()
            up[j] += EPS
            dn[j] -= EPS
            assert_allclose(result[:, j], (value_fn(up) - value_fn(dn)) / (2 * EPS), atol=1e-6)

    def test_derivative_no_trades(self) -> None:
        derivative_fn = CalibrationDerivative((), PAR_SPREAD, self.generator, self.order)
        assert derivative_fn(self.x).shape == (0, 3)


class TestCurveCalibrator:
    def test_node_trades_reprice(self, uk_provider) -> None:
        trades = _uk_group().resolved_trades(MARKET_DATA, REF_DATA)
        for trade, quote in zip(trades, UK_QUOTES, strict=True):
            assert abs(REPO_PRICER.par_rate(trade.product, uk_provider) - quote) < 1e-12
            assert abs(REPO_PRICER.present_value(trade.product, uk_provider)) < 1e-12

    def test_node_trades_reprice_large_notional(self, uk_provider) -> None:
        with default_context("notional", 1e8):
            trades = _uk_group().resolved_trades(MARKET_DATA, REF_DATA)
        for trade in trades:
            assert abs(REPO_PRICER.present_value(trade.product, uk_provider)) < 1e-4

    def test_curve(self, uk_provider) -> None:
        curve = uk_provider.find_curve("UK-REPO")
        assert curve.parameter_count == 3
        assert [m.label for m in curve.metadata.parameter_metadata] == UK_TENORS
        # zero rates are close to the quoted simple rates
        assert_allclose(curve.y_values, UK_QUOTES, atol=5e-5)

    def test_jacobian(self, uk_provider) -> None:
        jac = uk_provider.find_curve("UK-REPO").metadata.get_info(CurveInfoType.Jacobian)
        assert jac.curve_order == (CurveParameterSize("UK-REPO", 3),)
        assert jac.matrix.shape == (3, 3)

    def test_jacobian_matches_finite_difference(self, uk_provider) -> None:
        jac = uk_provider.find_curve("UK-REPO").metadata.get_info(CurveInfoType.Jacobian)
        calibrator = CurveCalibrator()
        for i, tenor in enumerate(UK_TENORS):
            quote_id = _quote("UK_REPO", tenor)
            params = []
            for shift in (EPS, -EPS):
                md = _bumped(MARKET_DATA, quote_id, shift)
                provider = calibrator.calibrate(_uk_group(), md, REF_DATA)
                params.append(provider.find_curve("UK-REPO").y_values)
            assert_allclose(jac.matrix[:, i], (params[0] - params[1]) / (2 * EPS), atol=1e-6)

    def test_pv_sensitivity_to_market_quote(self, uk_provider) -> None:
        curve = uk_provider.find_curve("UK-REPO")
        result = curve.metadata.get_info(CurveInfoType.PVSensitivityToMarketQuote)
        trades = _uk_group().resolved_trades(MARKET_DATA, REF_DATA)
        order = [CurveParameterSize("UK-REPO", 3)]
        expected = [
            PRESENT_VALUE.derivative(t, uk_provider, order)[i] for i, t in enumerate(trades)
        ]
        assert_allclose(result, expected)

    def test_pv_sensitivity_to_market_quote_finite_difference(self, uk_provider) -> None:
        curve = uk_provider.find_curve("UK-REPO")
        result = curve.metadata.get_info(CurveInfoType.PVSensitivityToMarketQuote)
        trades = _uk_group().resolved_trades(MARKET_DATA, REF_DATA)
        calibrator = CurveCalibrator()
        for i, tenor in enumerate(UK_TENORS):
            quote_id = _quote("UK_REPO", tenor)
            pvs = []
            for shift in (EPS, -EPS):
                md = _bumped(MARKET_DATA, quote_id, shift)
                provider = calibrator.calibrate(_uk_group(), md, REF_DATA)
                pvs.append(REPO_PRICER.present_value(trades[i].product, provider))
            assert abs(result[i] - (pvs[0] - pvs[1]) / (2 * EPS)) < 1e-7

    def test_no_pv_sensitivity_by_default(self, two_group_provider) -> None:
        meta = two_group_provider.find_curve("UK-REPO").metadata
        assert meta.find_info(CurveInfoType.PVSensitivityToMarketQuote) is None

    def test_no_jacobian(self) -> None:
        group = _uk_group(compute_jacobian=False)
        provider = CurveCalibrator().calibrate(group, MARKET_DATA, REF_DATA)
        assert provider.find_curve("UK-REPO").metadata.find_info(CurveInfoType.Jacobian) is None

    def test_market_quote_sensitivity_of_trade(self, uk_provider) -> None:
        # a 2M repo is not a node so its quote risk falls on several nodes
        convention = RepoConvention.of("GBP-REPO-T1")
        trade = convention.create_trade(
            VAL, "2M", [SecurityPosition(UK_GILT)], "buy", 1e6, 0.006, REF_DATA
        ).resolve(REF_DATA)
        points = REPO_PRICER.present_value_sensitivity(trade.product, uk_provider)
        param_sens = uk_provider.parameter_sensitivity(points)
        mq = MarketQuoteSensitivityCalculator().sensitivity(param_sens, uk_provider)
        result = mq.get("UK-REPO", "gbp").sensitivity

        calibrator = CurveCalibrator()
        expected = []
        for tenor in UK_TENORS:
            pvs = []
            for shift in (EPS, -EPS):
                md = _bumped(MARKET_DATA, _quote("UK_REPO", tenor), shift)
                provider = calibrator.calibrate(_uk_group(), md, REF_DATA)
                pvs.append(REPO_PRICER.present_value(trade.product, provider))
            expected.append((pvs[0] - pvs[1]) / (2 * EPS))
        assert_allclose(result, expected, atol=1e-2)

    def test_two_groups(self, two_group_provider) -> None:
        assert set(two_group_provider.curves().keys()) == {"UK-REPO", "US-REPO"}
        trades = _us_group().resolved_trades(MARKET_DATA, REF_DATA)
        for trade, quote in zip(trades, US_QUOTES, strict=True):
            assert abs(REPO_PRICER.par_rate(trade.product, two_group_provider) - quote) < 1e-12

    def test_two_groups_jacobian_order(self, two_group_provider) -> None:
        uk_jac = two_group_provider.find_curve("UK-REPO").metadata.get_info(CurveInfoType.Jacobian)
        us_jac = two_group_provider.find_curve("US-REPO").metadata.get_info(CurveInfoType.Jacobian)
        assert uk_jac.matrix.shape == (3, 3)
        assert us_jac.matrix.shape == (4, 7)
        assert [c.name for c in us_jac.curve_order] == ["UK-REPO", "US-REPO"]
        # the US instruments do not depend on the UK curve
        assert_allclose(us_jac.matrix[:, :3], np.zeros((4, 3)), atol=1e-14)

    def test_two_groups_match_single_group(self, two_group_provider) -> None:
        combined = CurveCalibrator().calibrate(_combined_group(), MARKET_DATA, REF_DATA)
        for name in ["UK-REPO", "US-REPO"]:
            assert_allclose(
                two_group_provider.find_curve(name).y_values,
                combined.find_curve(name).y_values,
                atol=1e-12,
            )
        us_jac = two_group_provider.find_curve("US-REPO").metadata.get_info(CurveInfoType.Jacobian)
        combined_jac = combined.find_curve("US-REPO").metadata.get_info(CurveInfoType.Jacobian)
        assert_allclose(us_jac.matrix, combined_jac.matrix, atol=1e-10)
        uk_jac = two_group_provider.find_curve("UK-REPO").metadata.get_info(CurveInfoType.Jacobian)
        combined_uk = combined.find_curve("UK-REPO").metadata.get_info(CurveInfoType.Jacobian)
        assert_allclose(combined_uk.matrix[:, :3], uk_jac.matrix, atol=1e-10)
        assert_allclose(combined_uk.matrix[:, 3:], np.zeros((3, 4)), atol=1e-14)

    def test_known_provider(self, uk_provider) -> None:
        provider = CurveCalibrator().calibrate(_us_group(), MARKET_DATA, REF_DATA, uk_provider)
        assert_allclose(
            provider.find_curve("UK-REPO").y_values, uk_provider.find_curve("UK-REPO").y_values
        )
        us_jac = provider.find_curve("US-REPO").metadata.get_info(CurveInfoType.Jacobian)
        assert us_jac.matrix.shape == (4, 4)
        assert provider.repo_curve_discount_factors(UK_GOVT, "gbp").repo_group == UK_REPO

    def test_calibrate_group(self, uk_provider) -> None:
        provider = CurveCalibrator().calibrate_group(_uk_group(), MARKET_DATA, REF_DATA)
        assert_allclose(
            provider.find_curve("UK-REPO").y_values,
            uk_provider.find_curve("UK-REPO").y_values,
            atol=1e-14,
        )

    def test_repo_and_bill_group(self) -> None:
        provider = CurveCalibrator().calibrate(_bill_group(), MARKET_DATA, REF_DATA)
        trades = _bill_group().resolved_trades(MARKET_DATA, REF_DATA)
        for trade in trades[3:]:
            par = BILL_PRICER.par_rate(trade.product, provider)
            assert abs(par - trade.product.rate) < 1e-12
        assert provider.issuer_curve_discount_factors(UK_GOVT, "gbp").legal_entity_group == (
            UK_ISSUER
        )
        jac = provider.find_curve("UK-ISSUER").metadata.get_info(CurveInfoType.Jacobian)
        # repo and bill nodes use separate curves
        assert_allclose(jac.matrix[:, :3], np.zeros((2, 3)), atol=1e-14)

    def test_previous_group_without_jacobian_raises(self) -> None:
        groups = [_uk_group(compute_jacobian=False), _us_group()]
        with pytest.raises(ValueError, match="information for curve 'UK-REPO'"):
            CurveCalibrator().calibrate(groups, MARKET_DATA, REF_DATA)

    def test_non_square_raises(self) -> None:
        class _ExtraParameter(InterpolatedNodalCurveDefinition):
            @property
            def parameter_count(self) -> int:
                return len(self.nodes) + 1

            def filtered(self, valuation_date, ref_data):
                return self

        definition = _uk_curve()
        group = CurveGroupDefinition("UK", [_ExtraParameter("UK-REPO", definition.nodes)])
        with pytest.raises(ValueError, match="3 calibration instruments for 4 curve parameters"):
            CurveCalibrator().calibrate(group, MARKET_DATA, REF_DATA)

    def test_missing_quote_raises(self) -> None:
        md = MarketData(VAL, {_quote("UK_REPO", "1W"): 0.005})
        with pytest.raises(ValueError, match="Market data not found for 'OG~UK_REPO_1M'"):
            CurveCalibrator().calibrate(_uk_group(), md, REF_DATA)

    def test_solver_failure_raises(self) -> None:
        with pytest.raises(ValueError, match="Curve group 'UK' calibration failed") as exc:
            CurveCalibrator(max_iter=1).calibrate(_uk_group(), MARKET_DATA, REF_DATA)
        assert isinstance(exc.value.__cause__, ValueError)

    def test_root_finder_failure_status_raises(self) -> None:
        def root_finder(value_fn, derivative_fn, g0, **kwargs):
            return {"status": "FAILURE", "state": -1, "g": g0, "iterations": 0, "time": 0.0}

        calibrator = CurveCalibrator(root_finder=root_finder)
        with pytest.raises(ValueError, match="calibration failed"):
            calibrator.calibrate(_uk_group(), MARKET_DATA, REF_DATA)

    def test_root_finder_receives_settings(self) -> None:
        received = {}

        def root_finder(value_fn, derivative_fn, g0, **kwargs):
            received.update(kwargs)
            return {"status": "SUCCESS", "state": 2, "g": g0, "iterations": 0, "time": 0.0}

        CurveCalibrator(root_finder=root_finder, max_iter=7, func_tol=1e-9).calibrate(
            _uk_group(), MARKET_DATA, REF_DATA
        )
        assert received["max_iter"] == 7
        assert received["func_tol"] == 1e-9

    def test_logging(self, caplog) -> None:
        caplog.set_level(logging.INFO, logger="repolib.calibration.calibrator")
        CurveCalibrator().calibrate(_uk_group(), MARKET_DATA, REF_DATA)
        assert "Calibrating curve group 'UK': 1 curves, 3 instruments." in caplog.text

    def test_empty_group(self) -> None:
        expired = _uk_curve()
        nodes = [n.with_date(n.date.of(VAL)) for n in expired.nodes]
        group = CurveGroupDefinition("EXPIRED", [InterpolatedNodalCurveDefinition("X", nodes)])
        with pytest.raises(ValueError, match="requires at least one node"):
            CurveCalibrator().calibrate(group, MARKET_DATA, REF_DATA)
