from datetime import datetime as dt

import pytest
from repolib.curves import CurveMetadata, InterpolatedNodalCurve, ZeroRateDiscountFactors
from repolib.enums import Err, Ok
from repolib.enums.parameters import ValueType
from repolib.identifiers import LegalEntityId, RepoGroup, SecurityId
from repolib.instruments import RepoConvention
from repolib.market_data import LegalEntitySecurity, ReferenceData, SecurityPosition
from repolib.pricing import DiscountingRepoTradePricer, Measure, RepoTradeCalculations, calculate
from repolib.pricing.calculations import _get_measure
from repolib.provider import LegalEntityDiscountingProvider
from repolib.sensitivity import CurrencyParameterSensitivities

VAL = dt(2017, 12, 11)
UK_GOVT = LegalEntityId("OG", "UK_GOVT")
UK_GILT = SecurityId("OG", "UK_GILT")


@pytest.fixture
def ref_data():
    return ReferenceData.of([LegalEntitySecurity(UK_GILT, UK_GOVT)])


@pytest.fixture
def provider():
    meta = CurveMetadata("uk_repo", ValueType.YearFraction, ValueType.ZeroRate, "Act365F")
    curve = InterpolatedNodalCurve(meta, [0.02, 0.1, 0.25], [0.005, 0.006, 0.007])
    return LegalEntityDiscountingProvider(
        VAL,
        repo_curves={(RepoGroup("UK"), "gbp"): ZeroRateDiscountFactors("gbp", VAL, curve)},
        repo_curve_groups={UK_GOVT: RepoGroup("UK")},
    )


@pytest.fixture
def trade(ref_data):
    return RepoConvention.of("GBP-REPO-T1").create_trade(
        VAL, "1M", [SecurityPosition(UK_GILT)], "buy", 1e7, 0.0055, ref_data
    )


class TestRepoTradeCalculations:
    def test_measures_match_pricer(self, trade, ref_data, provider) -> None:
        resolved = trade.resolve(ref_data)
        pricer = DiscountingRepoTradePricer()
        calcs = RepoTradeCalculations(pricer)
        assert calcs.present_value(resolved, provider) == pricer.present_value(resolved, provider)
        assert calcs.par_rate(resolved, provider) == pricer.par_rate(resolved, provider)
        assert calcs.par_spread(resolved, provider) == pricer.par_spread(resolved, provider)
        assert calcs.currency_exposure(resolved, provider) == pricer.present_value(
            resolved, provider
        )
        assert calcs.current_cash(resolved, provider) == {"gbp": 0.0}

    def test_pv01(self, trade, ref_data, provider) -> None:
        resolved = trade.resolve(ref_data)
        calcs = RepoTradeCalculations()
        bucketed = calcs.pv01_calibrated_bucketed(resolved, provider)
        assert isinstance(bucketed, CurrencyParameterSensitivities)

        points = DiscountingRepoTradePricer().present_value_sensitivity(resolved, provider)
        full = provider.parameter_sensitivity(points)
        assert bucketed.equal_with_tolerance(full.multiplied_by(1e-4), 1e-12)

        total = calcs.pv01_calibrated_sum(resolved, provider)
        assert list(total.keys()) == ["gbp"]
        assert abs(total["gbp"] - bucketed.get("uk_repo", "gbp").total()) < 1e-12


class TestCalculate:
    def test_resolves_trade(self, trade, ref_data, provider) -> None:
        result = calculate(trade, ["present_value", Measure.ResolvedTarget], provider, ref_data)
        assert isinstance(result[Measure.PresentValue], Ok)
        resolved = result[Measure.ResolvedTarget].unwrap()
        assert resolved.product.start == dt(2017, 12, 12)
        expected = RepoTradeCalculations().present_value(resolved, provider)
        assert result[Measure.PresentValue].unwrap() == expected

    def test_resolved_trade(self, trade, ref_data, provider) -> None:
        resolved = trade.resolve(ref_data)
        result = calculate(resolved, [Measure.ParRate], provider)
        assert result[Measure.ParRate].unwrap() == RepoTradeCalculations().par_rate(
            resolved, provider
        )

    def test_all_measures(self, trade, ref_data, provider) -> None:
        result = calculate(trade, list(Measure), provider, ref_data)
        assert list(result.keys()) == list(Measure)
        assert all(r.is_ok for r in result.values())

    def test_missing_ref_data(self, trade, provider) -> None:
        result = calculate(trade, ["par_rate", "par_spread"], provider)
        assert all(isinstance(r, Err) for r in result.values())
        with pytest.raises(ValueError, match="`ref_data` must be supplied"):
            result[Measure.ParRate].unwrap()

    def test_unresolvable_trade(self, trade, provider) -> None:
        result = calculate(trade, ["present_value"], provider, ReferenceData())
        assert result[Measure.PresentValue].is_err
        assert "Reference data not found" in str(result[Measure.PresentValue].exception)

    def test_failure_is_per_measure(self, trade, ref_data) -> None:
        provider = LegalEntityDiscountingProvider.empty(VAL)
        result = calculate(trade, ["present_value", "resolved_target"], provider, ref_data)
        assert result[Measure.PresentValue].is_err
        assert result[Measure.ResolvedTarget].is_ok

    def test_unknown_measure_raises(self) -> None:
        with pytest.raises(ValueError, match="`measure` as string: 'pv' is not a valid option"):
            _get_measure("pv")

    def test_measure_parse_case_insensitive(self) -> None:
        assert _get_measure("PAR_RATE") == Measure.ParRate
