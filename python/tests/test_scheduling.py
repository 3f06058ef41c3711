from datetime import datetime as dt

import pytest
from repolib import default_context
from repolib.scheduling import (
    CALENDARS,
    add_business_days,
    add_tenor,
    adjust,
    dcf,
    get_calendar,
    is_business_day,
    tenor_year_fraction,
)
from repolib.scheduling.calendars import _add_months, _parse_tenor


class TestCalendars:
    @pytest.mark.parametrize(
        ("date", "cal", "expected"),
        [
            (dt(2022, 1, 8), "bus", False),  # sat
            (dt(2022, 1, 8), "all", True),
            (dt(2022, 1, 10), "bus", True),
            (dt(2017, 12, 25), "ldn", False),  # christmas
            (dt(2017, 12, 26), "ldn", False),  # boxing day
            (dt(2017, 12, 26), "nyc", True),
            (dt(2017, 7, 4), "nyc", False),
            (dt(2018, 5, 1), "tgt", False),
        ],
    )
    def test_is_business_day(self, date, cal, expected) -> None:
        assert is_business_day(date, cal) is expected

    def test_get_calendar_default(self) -> None:
        assert get_calendar() is CALENDARS["all"]
        with default_context("calendar", "ldn"):
            assert get_calendar() is CALENDARS["ldn"]

    def test_get_calendar_case_insensitive(self) -> None:
        assert get_calendar("LDN") is CALENDARS["ldn"]

    def test_get_calendar_user_object(self) -> None:
        cal = CALENDARS["nyc"]
        assert get_calendar(cal) is cal

    def test_get_calendar_raises(self) -> None:
        with pytest.raises(ValueError, match="is not a named calendar"):
            get_calendar("xyz")


class TestAdjust:
    @pytest.mark.parametrize(
        ("date", "modifier", "expected"),
        [
            (dt(2022, 1, 1), "F", dt(2022, 1, 3)),
            (dt(2022, 1, 1), "P", dt(2021, 12, 31)),
            (dt(2022, 4, 30), "F", dt(2022, 5, 2)),
            (dt(2022, 4, 30), "MF", dt(2022, 4, 29)),
            (dt(2022, 5, 1), "MP", dt(2022, 5, 2)),
            (dt(2022, 1, 1), "NONE", dt(2022, 1, 1)),
            (dt(2022, 1, 4), "F", dt(2022, 1, 4)),
        ],
    )
    def test_adjust(self, date, modifier, expected) -> None:
        assert adjust(date, modifier, "bus") == expected

    def test_adjust_holiday(self) -> None:
        assert adjust(dt(2017, 12, 25), "F", "ldn") == dt(2017, 12, 27)

    def test_adjust_raises(self) -> None:
        with pytest.raises(ValueError, match="`modifier` must be in"):
            adjust(dt(2022, 1, 1), "X", "bus")


class TestTenor:
    @pytest.mark.parametrize(
        ("start", "tenor", "expected"),
        [
            (dt(2022, 1, 31), "1M", dt(2022, 2, 28)),
            (dt(2020, 2, 29), "1Y", dt(2021, 2, 28)),
            (dt(2022, 1, 15), "2W", dt(2022, 1, 29)),
            (dt(2022, 1, 15), "10D", dt(2022, 1, 25)),
            (dt(2022, 11, 30), "3M", dt(2023, 2, 28)),
            (dt(2022, 1, 15), "-1M", dt(2021, 12, 15)),
        ],
    )
    def test_add_tenor_unadjusted(self, start, tenor, expected) -> None:
        assert add_tenor(start, tenor) == expected

    def test_add_tenor_business_days(self) -> None:
        # fri + 3 business days is the following wed
        assert add_tenor(dt(2022, 1, 7), "3B", calendar="bus") == dt(2022, 1, 12)

    def test_add_tenor_modified(self) -> None:
        assert add_tenor(dt(2022, 3, 31), "1M", "MF", "bus") == dt(2022, 4, 29)

    def test_add_months(self) -> None:
        assert _add_months(dt(2022, 1, 10), 14) == dt(2023, 3, 10)

    @pytest.mark.parametrize("tenor", ["M", "3X", "AM"])
    def test_parse_tenor_raises(self, tenor) -> None:
        with pytest.raises(ValueError, match="`tenor`"):
            _parse_tenor(tenor)

    def test_add_business_days_zero_rolls_forward(self) -> None:
        assert add_business_days(dt(2022, 1, 8), 0, "bus") == dt(2022, 1, 10)

    @pytest.mark.parametrize(
        ("tenor", "expected"),
        [("3M", 0.25), ("2Y", 2.0), ("1W", 7 / 365), ("10D", 10 / 365)],
    )
    def test_tenor_year_fraction(self, tenor, expected) -> None:
        assert abs(tenor_year_fraction(tenor) - expected) < 1e-14


class TestDcf:
    @pytest.mark.parametrize(
        ("start", "end", "convention", "expected"),
        [
            (dt(2000, 1, 1), dt(2000, 4, 3), "Act360", 93 / 360),
            (dt(2000, 1, 1), dt(2000, 4, 3), "act365f", 93 / 365),
            (dt(2022, 1, 31), dt(2022, 2, 28), "30E360", 1 / 12 - 2 / 360),
            (dt(2022, 1, 31), dt(2022, 3, 31), "30360", 2 / 12),
            (dt(2022, 1, 1), dt(2023, 1, 1), "ActActISDA", 1.0),
            (dt(2022, 1, 1), dt(2022, 1, 9), "1", 1.0),
        ],
    )
    def test_dcf(self, start, end, convention, expected) -> None:
        assert abs(dcf(start, end, convention) - expected) < 1e-14

    def test_dcf_raises(self) -> None:
        with pytest.raises(ValueError, match="`convention`"):
            dcf(dt(2022, 1, 1), dt(2022, 2, 1), "bad")
