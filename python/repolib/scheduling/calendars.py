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

import calendar as calendar_mod
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from dateutil.relativedelta import MO, TH
from pandas.tseries.holiday import (
    AbstractHolidayCalendar,
    Holiday,
    nearest_workday,
    next_monday,
    next_monday_or_tuesday,
    sunday_to_monday,
)
from pandas.tseries.offsets import CustomBusinessDay, DateOffset, Day, Easter

from repolib import defaults
from repolib.enums.generics import NoInput, _drb

if TYPE_CHECKING:
    from repolib.typing import CalInput  # pragma: no cover

# Generic holidays
GoodFriday = Holiday("Good Friday", month=1, day=1, offset=[Easter(), Day(-2)])
EasterMonday = Holiday("Easter Monday", month=1, day=1, offset=[Easter(), Day(1)])
NewYearsDay = Holiday("New Year's Day", month=1, day=1)
NewYearsDayHoliday = Holiday("New Year's Day Holiday", month=1, day=1, observance=next_monday)
NewYearsDaySundayHoliday = Holiday(
    "New Year's Day Holiday", month=1, day=1, observance=sunday_to_monday
)
LabourDay = Holiday("Labour Day", month=5, day=1)
ChristmasDay = Holiday("Christmas Day", month=12, day=25)
ChristmasDayHoliday = Holiday("Christmas Day Holiday", month=12, day=25, observance=next_monday)
ChristmasDayNearestHoliday = Holiday(
    "Christmas Day Nearest Holiday", month=12, day=25, observance=nearest_workday
)
BoxingDay = Holiday("Boxing Day", month=12, day=26)
BoxingDayHoliday = Holiday(
    "Boxing Day Holiday", month=12, day=26, observance=next_monday_or_tuesday
)

# UK based
UKEarlyMayBankHoliday = Holiday(
    "UK Early May Bank Holiday",
    month=5,
    day=1,
    offset=DateOffset(weekday=MO(1)),  # type: ignore[arg-type]
)
UKSpringBankHoliday = Holiday(
    "UK Spring Bank Holiday",
    month=5,
    day=31,
    offset=DateOffset(weekday=MO(-1)),  # type: ignore[arg-type]
)
UKSummerBankHoliday = Holiday(
    "UK Summer Bank Holiday",
    month=8,
    day=31,
    offset=DateOffset(weekday=MO(-1)),  # type: ignore[arg-type]
)

# US based
USMartinLutherKingJr = Holiday(
    "Dr. Martin Luther King Jr.",
    start_date=datetime(1986, 1, 1),
    month=1,
    day=1,
    offset=DateOffset(weekday=MO(3)),  # type: ignore[arg-type]
)
USPresidentsDay = Holiday(
    "US Presidents Day", month=2, day=1, offset=DateOffset(weekday=MO(3))  # type: ignore[arg-type]
)
USMemorialDay = Holiday(
    "US Memorial Day", month=5, day=31, offset=DateOffset(weekday=MO(-1))  # type: ignore[arg-type]
)
USJuneteenth = Holiday(
    "Juneteenth Independence Day",
    start_date=datetime(2022, 1, 1),
    month=6,
    day=19,
    observance=nearest_workday,
)
USIndependenceDay = Holiday("US Independence Day", month=7, day=4, observance=nearest_workday)
USLabourDay = Holiday(
    "US Labour Day", month=9, day=1, offset=DateOffset(weekday=MO(1))  # type: ignore[arg-type]
)
USColumbusDay = Holiday(
    "US Columbus Day", month=10, day=1, offset=DateOffset(weekday=MO(2))  # type: ignore[arg-type]
)
USVeteransDay = Holiday("US Veterans Day", month=11, day=11, observance=sunday_to_monday)
USThanksgivingDay = Holiday(
    "US Thanksgiving", month=11, day=1, offset=DateOffset(weekday=TH(4))  # type: ignore[arg-type]
)

CALENDAR_RULES: dict[str, list[Holiday]] = {
    "all": [],
    "bus": [],
    "tgt": [NewYearsDay, GoodFriday, EasterMonday, LabourDay, ChristmasDay, BoxingDay],
    "ldn": [
        NewYearsDayHoliday,
        GoodFriday,
        EasterMonday,
        UKEarlyMayBankHoliday,
        UKSpringBankHoliday,
        UKSummerBankHoliday,
        ChristmasDayHoliday,
        BoxingDayHoliday,
    ],
    "nyc": [
        NewYearsDaySundayHoliday,
        USMartinLutherKingJr,
        USPresidentsDay,
        USMemorialDay,
        USJuneteenth,
        USIndependenceDay,
        USLabourDay,
        USColumbusDay,
        USVeteransDay,
        USThanksgivingDay,
        ChristmasDayNearestHoliday,
    ],
}


def create_calendar(rules: list[Holiday], weekmask: str | None = None) -> CustomBusinessDay:
    """
    Create a calendar with specific business and holiday days defined.

    Parameters
    ----------
    rules : list[Holiday]
        A list of specific holiday dates defined by the
        ``pandas.tseries.holiday.Holiday`` class.
    weekmask : str, optional
        Set of days as business days. Defaults to *"Mon Tue Wed Thu Fri"*.

    Returns
    -------
    CustomBusinessDay
    """
    weekmask = "Mon Tue Wed Thu Fri" if weekmask is None else weekmask
    return CustomBusinessDay(  # type: ignore[call-arg]
        calendar=AbstractHolidayCalendar(rules=rules),
        weekmask=weekmask,
    )


CALENDARS: dict[str, CustomBusinessDay] = {
    "all": create_calendar(rules=CALENDAR_RULES["all"], weekmask="Mon Tue Wed Thu Fri Sat Sun"),
    "bus": create_calendar(rules=CALENDAR_RULES["bus"]),
    "tgt": create_calendar(rules=CALENDAR_RULES["tgt"]),
    "ldn": create_calendar(rules=CALENDAR_RULES["ldn"]),
    "nyc": create_calendar(rules=CALENDAR_RULES["nyc"]),
}


def get_calendar(calendar: CalInput = NoInput(0)) -> CustomBusinessDay:
    """
    Returns a calendar object either from an available set or a user defined input.

    Parameters
    ----------
    calendar : str, CustomBusinessDay or NoInput
        If *NoInput* the calendar named in ``defaults.calendar`` is returned.
        If *str*, then the calendar is returned from pre-calculated values. Combined
        calendars are not supported.
        If a specific user defined calendar this is returned without modification.

    Returns
    -------
    CustomBusinessDay

    Notes
    -----
    The following named calendars are available:

    - *"all"*: every day is a business day.
    - *"bus"*: business days, excluding only weekends.
    - *"tgt"*: Target for Europe.
    - *"ldn"*: London.
    - *"nyc"*: New York City.
    """
    calendar = _drb(defaults.calendar, calendar)
    if isinstance(calendar, str):
        try:
            return CALENDARS[calendar.lower()]
        except KeyError:
            raise ValueError(
                f"`calendar`: '{calendar}' is not a named calendar. "
                f"Use one of {list(CALENDARS.keys())}."
            )
    return calendar


def is_business_day(date: datetime, calendar: CalInput = NoInput(0)) -> bool:
    """Test whether a given date is a business day in the given calendar."""
    return bool(get_calendar(calendar).is_on_offset(date))


def adjust(
    date: datetime,
    modifier: str | NoInput = NoInput(0),
    calendar: CalInput = NoInput(0),
) -> datetime:
    """
    Modify a date under specific rule.

    Parameters
    ----------
    date : datetime
        The date to be adjusted.
    modifier : str, optional
        The modification rule, in {"NONE", "F", "MF", "P", "MP"}. If *'NONE'* returns date.
    calendar : str or CustomBusinessDay, optional
        The holiday calendar object to use.

    Returns
    -------
    datetime
    """
    modifier = _drb(defaults.modifier, modifier).upper()
    if modifier == "NONE":
        return date

    if modifier not in ["F", "MF", "P", "MP"]:
        raise ValueError("`modifier` must be in {'NONE', 'F', 'MF', 'P', 'MP'}")

    (adj_op, mod_op) = (
        ("rollforward", "rollback") if "F" in modifier else ("rollback", "rollforward")
    )
    calendar_ = get_calendar(calendar)
    adjusted_date = getattr(calendar_, adj_op)(date)
    if adjusted_date.month != date.month and "M" in modifier:
        adjusted_date = getattr(calendar_, mod_op)(date)
    return adjusted_date.to_pydatetime()


def add_business_days(start: datetime, days: int, calendar: CalInput = NoInput(0)) -> datetime:
    """
    Add a number of business days to a date.

    A zero day offset returns the date rolled forward to a business day.
    """
    calendar_ = get_calendar(calendar)
    if days == 0:
        return calendar_.rollforward(start).to_pydatetime()
    return (start + days * calendar_).to_pydatetime()


def _parse_tenor(tenor: str) -> tuple[int, str]:
    tenor = tenor.upper().strip()
    if len(tenor) < 2 or tenor[-1] not in "BDWMY":
        raise ValueError("`tenor` must identify frequency in {'B', 'D', 'W', 'M', 'Y'} e.g. '1Y'")
    try:
        return int(tenor[:-1]), tenor[-1]
    except ValueError:
        raise ValueError(f"`tenor`: '{tenor}' must start with an integer, e.g. '3M'.")


def add_tenor(
    start: datetime,
    tenor: str,
    modifier: str | NoInput = "NONE",
    calendar: CalInput = NoInput(0),
) -> datetime:
    """
    Add a tenor to a given date under specific modification rules and holiday calendar.

    Parameters
    ----------
    start : datetime
        The initial date to which to add the tenor.
    tenor : str
        The tenor to add, identified by calendar days, `"D"`, weeks, `"W"`, months, `"M"`,
        years, `"Y"` or business days, `"B"`, for example `"10Y"` or `"5B"`.
    modifier : str, optional in {"NONE", "MF", "F", "MP", "P"}
        The modification rule to apply if the tenor is calendar days, weeks, months or years.
    calendar : CustomBusinessDay or str, optional
        The calendar for use with business day adjustment and modification.

    Returns
    -------
    datetime

    Notes
    -----
    Adding months to a day which does not exist in the target month, e.g. 31st Jan + 1M,
    returns the last day of the target month before any modification.
    """
    n, unit = _parse_tenor(tenor)
    if unit == "B":
        return add_business_days(start, n, calendar)
    elif unit == "D":
        end = start + timedelta(days=n)
    elif unit == "W":
        end = start + timedelta(days=7 * n)
    elif unit == "M":
        end = _add_months(start, n)
    else:  # unit == "Y"
        end = _add_months(start, 12 * n)
    return adjust(end, modifier, calendar)


def _add_months(start: datetime, months: int) -> datetime:
    """add a given number of months to an input date, capping the day at month end"""
    year_roll, month_index = divmod(start.month - 1 + months, 12)
    year, month = start.year + year_roll, month_index + 1
    _, days_in_month = calendar_mod.monthrange(year, month)
    return start.replace(year=year, month=month, day=min(start.day, days_in_month))


def tenor_year_fraction(tenor: str) -> float:
    """
    Return an approximate year fraction of a tenor.

    Tenors in months or years give months / 12, tenors in days or weeks give days / 365.
    Business day tenors are treated as calendar days.
    """
    n, unit = _parse_tenor(tenor)
    if unit == "Y":
        return float(n)
    elif unit == "M":
        return n / 12.0
    elif unit == "W":
        return 7 * n / 365.0
    else:
        return n / 365.0
