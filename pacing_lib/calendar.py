from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

import pandas as pd

from .models import HolidaySet, WorkdayWindow
from .ratios import safe_ratio

COMPANY_BASELINE_START_DATE = date(2026, 1, 5)


def us_holidays_2025_2026() -> HolidaySet:
    holiday_str = [
        "2025-01-01",
        "2025-01-20",
        "2025-02-17",
        "2025-05-26",
        "2025-07-04",
        "2025-09-01",
        "2025-11-27",
        "2025-12-25",
        "2026-01-01",
        "2026-01-19",
        "2026-02-16",
        "2026-05-25",
        "2026-07-03",
        "2026-09-07",
        "2026-11-26",
        "2026-12-25",
    ]
    return HolidaySet.from_iterable(holiday_str)


def as_date(value: date | datetime | str | pd.Timestamp) -> date:
    """Normalize to a calendar date, dropping any time of day."""

    return pd.Timestamp(value).date()


def build_calendar(
    start_date: date | str, end_date: date | str, holidays: HolidaySet | Iterable[str]
) -> pd.DataFrame:
    """One row per day in [start, end] with weekend/holiday flags.

    ``biz_day_index`` is the zero-based count of workdays up to and including
    each row; it sits at -1 until the first workday.
    """

    if not isinstance(holidays, HolidaySet):
        holidays = HolidaySet.from_iterable(holidays)
    dates = pd.date_range(start=as_date(start_date), end=as_date(end_date), freq="D")
    cal = pd.DataFrame({"date": dates})
    cal["dow"] = cal["date"].dt.dayofweek.astype(int)
    cal["is_weekend"] = cal["dow"] >= 5
    cal["is_holiday"] = cal["date"].dt.strftime("%Y-%m-%d").isin(holidays.dates)
    cal["is_business_day"] = ~(cal["is_weekend"] | cal["is_holiday"])
    cal["biz_day_index"] = cal["is_business_day"].astype(int).cumsum() - 1
    cal["date"] = cal["date"].dt.date
    return cal


def count_business_days(
    start_date: date | str, end_date: date | str, holidays: HolidaySet | Iterable[str]
) -> int:
    """Inclusive count of weekdays in [start, end] that are not holidays.

    An inverted range is empty, not an error.
    """

    start, end = as_date(start_date), as_date(end_date)
    if start > end:
        return 0
    cal = build_calendar(start, end, holidays)
    return int(cal["is_business_day"].sum())


def effective_start_date(
    agent_start_date: date | str, baseline_date: date | str = COMPANY_BASELINE_START_DATE
) -> date:
    return max(as_date(agent_start_date), as_date(baseline_date))


def _window_start(agent_start_date: date | str, year: int, baseline_date: date | str) -> date:
    return max(effective_start_date(agent_start_date, baseline_date), date(year, 1, 1))


def workdays_elapsed_ytd(
    agent_start_date: date | str,
    year: int,
    holidays: HolidaySet,
    today: date | str,
    baseline_date: date | str = COMPANY_BASELINE_START_DATE,
) -> int:
    today = as_date(today)
    if year > today.year:
        return 0
    end = date(year, 12, 31) if year < today.year else today
    return count_business_days(_window_start(agent_start_date, year, baseline_date), end, holidays)


def total_workdays_in_year(
    agent_start_date: date | str,
    year: int,
    holidays: HolidaySet,
    baseline_date: date | str = COMPANY_BASELINE_START_DATE,
) -> int:
    start = _window_start(agent_start_date, year, baseline_date)
    return count_business_days(start, date(year, 12, 31), holidays)


def workday_year_progress(
    agent_start_date: date | str,
    year: int,
    holidays: HolidaySet,
    today: date | str,
    baseline_date: date | str = COMPANY_BASELINE_START_DATE,
) -> float:
    elapsed = workdays_elapsed_ytd(agent_start_date, year, holidays, today, baseline_date)
    total = total_workdays_in_year(agent_start_date, year, holidays, baseline_date)
    return safe_ratio(elapsed, total)


def workday_window(
    agent_start_date: date | str,
    year: int,
    holidays: HolidaySet,
    today: date | str,
    baseline_date: date | str = COMPANY_BASELINE_START_DATE,
) -> WorkdayWindow:
    """Elapsed and total workdays for ``year`` read off a single calendar frame."""

    today = as_date(today)
    start = _window_start(agent_start_date, year, baseline_date)
    year_end = date(year, 12, 31)
    if start > year_end:
        return WorkdayWindow(elapsed=0, total=0)

    cal = build_calendar(start, year_end, holidays)
    total = int(cal["biz_day_index"].iloc[-1]) + 1
    if year > today.year or today < start:
        return WorkdayWindow(elapsed=0, total=total)
    as_of = min(today, year_end)
    elapsed = int(cal.loc[cal["date"] <= as_of, "biz_day_index"].iloc[-1]) + 1
    return WorkdayWindow(elapsed=elapsed, total=total)


def remaining_time(window: WorkdayWindow, year: int, today: date | str) -> tuple[int, float, int]:
    """Workdays, weeks and whole months left in ``year`` as seen from ``today``.

    The current month counts as remaining.
    """

    today = as_date(today)
    workdays = window.remaining
    if year < today.year:
        months = 0
    elif year > today.year:
        months = 12
    else:
        months = 13 - today.month
    return workdays, workdays / 5, months
