from datetime import datetime as dt

import pytest
from pandas import Series
from repolib.identifiers import (
    LegalEntityGroup,
    LegalEntityId,
    QuoteId,
    RepoGroup,
    SecurityId,
    StandardId,
)
from repolib.market_data import LegalEntitySecurity, MarketData, ReferenceData
from repolib.scheduling import CALENDARS


class TestStandardId:
    def test_parse(self) -> None:
        result = StandardId.parse("OG~UK_GOVT")
        assert result.scheme == "OG"
        assert result.value == "UK_GOVT"
        assert str(result) == "OG~UK_GOVT"

    def test_parse_subclass(self) -> None:
        result = QuoteId.parse("OG~UK_REPO_1W")
        assert isinstance(result, QuoteId)
        assert result == QuoteId.of("OG", "UK_REPO_1W")

    @pytest.mark.parametrize("text", ["OG", "~value", "scheme~"])
    def test_parse_raises(self, text) -> None:
        with pytest.raises(ValueError, match="`StandardId` must be parsed"):
            StandardId.parse(text)

    def test_types_are_distinct(self) -> None:
        assert LegalEntityId("OG", "A") != SecurityId("OG", "A")
        d = {LegalEntityId("OG", "A"): 1, SecurityId("OG", "A"): 2}
        assert len(d) == 2

    def test_groups(self) -> None:
        assert RepoGroup("UK") == RepoGroup("UK")
        assert RepoGroup("UK") != LegalEntityGroup("UK")
        assert str(RepoGroup("UK")) == "UK"


class TestMarketData:
    def test_value(self) -> None:
        qid = QuoteId("OG", "Q1")
        md = MarketData(dt(2017, 12, 11), {qid: 0.01})
        assert md.value(qid) == 0.01
        assert md.contains(qid)
        assert md.valuation_date == dt(2017, 12, 11)

    def test_value_raises(self) -> None:
        md = MarketData.empty(dt(2017, 12, 11))
        with pytest.raises(ValueError, match="Market data not found for 'OG~Q1'"):
            md.value(QuoteId("OG", "Q1"))

    def test_of_series(self) -> None:
        md = MarketData.of(dt(2017, 12, 11), Series({"OG~Q1": 0.01, "OG~Q2": 0.02}))
        assert md.value(QuoteId("OG", "Q2")) == 0.02
        assert md.ids() == [QuoteId("OG", "Q1"), QuoteId("OG", "Q2")]

    def test_with_value_leaves_original(self) -> None:
        qid = QuoteId("OG", "Q1")
        md = MarketData(dt(2017, 12, 11), {qid: 0.01})
        bumped = md.with_value(qid, 0.02)
        assert bumped.value(qid) == 0.02
        assert md.value(qid) == 0.01

    def test_to_series(self) -> None:
        md = MarketData(dt(2017, 12, 11), {QuoteId("OG", "Q1"): 0.01})
        result = md.to_series()
        assert result["OG~Q1"] == 0.01


class TestReferenceData:
    def setup_method(self) -> None:
        self.sec_id = SecurityId("OG", "UK_GOVT_10Y")
        self.le_id = LegalEntityId("OG", "UK_GOVT")
        self.ref_data = ReferenceData.of([LegalEntitySecurity(self.sec_id, self.le_id)])

    def test_security(self) -> None:
        assert self.ref_data.security(self.sec_id).legal_entity_id == self.le_id

    def test_security_raises(self) -> None:
        with pytest.raises(ValueError, match="Reference data not found for 'OG~X'"):
            self.ref_data.security(SecurityId("OG", "X"))

    def test_calendar_falls_back_to_named(self) -> None:
        assert self.ref_data.calendar("ldn") is CALENDARS["ldn"]

    def test_calendar_custom(self) -> None:
        ref = ReferenceData(calendars={"mycal": CALENDARS["nyc"]})
        assert ref.calendar("MYCAL") is CALENDARS["nyc"]

    def test_combined_with(self) -> None:
        other_id = SecurityId("OG", "US_GOVT_10Y")
        other = ReferenceData.of([LegalEntitySecurity(other_id, LegalEntityId("OG", "US"))])
        result = self.ref_data.combined_with(other)
        assert result.security(other_id).legal_entity_id == LegalEntityId("OG", "US")
        assert result.security(self.sec_id).legal_entity_id == self.le_id
