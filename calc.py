"""
Calendar utilities and hour accrual logic for internship tracking.
Pure functions: no I/O, no state kept between calls.
"""

import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

import holidays

from models import (
    BASE_DAY_HOURS,
    MODE_AUTOMATIC,
    STATUS_OFF,
    DayMap,
    Stats,
    WorkDay,
    get_date_key,
)

logger = logging.getLogger(__name__)

# Hard ceiling on iterated days (~8 years)
SAFETY_LIMIT = 3000
# Manual mode stops on a day without an override once the goal is met and this many days have passed
MANUAL_CUTOFF_DAYS = 365


class Holiday(NamedTuple):
    name: str
    kind: str  # 'regular' or 'special'


# Philippine 2026 holidays
PH_HOLIDAYS_2026: List[Tuple[str, str, str]] = [
    # Regular holidays
    ('2026-01-01', "New Year's Day", 'regular'),
    ('2026-04-02', 'Maundy Thursday', 'regular'),
    ('2026-04-03', 'Good Friday', 'regular'),
    ('2026-04-09', 'Day of Valor (Araw ng Kagitingan)', 'regular'),
    ('2026-05-01', 'Labor Day', 'regular'),
    ('2026-06-12', 'Independence Day', 'regular'),
    ('2026-08-31', 'National Heroes Day', 'regular'),
    ('2026-11-30', 'Bonifacio Day', 'regular'),
    ('2026-12-25', 'Christmas Day', 'regular'),
    ('2026-12-30', 'Rizal Day', 'regular'),
    # Special non-working holidays
    ('2026-02-17', 'Chinese New Year', 'special'),
    ('2026-04-04', 'Black Saturday', 'special'),
    ('2026-08-21', 'Ninoy Aquino Day', 'special'),
    ('2026-11-01', "All Saints' Day", 'special'),
    ('2026-11-02', "All Souls' Day", 'special'),
    ('2026-12-08', 'Feast of the Immaculate Conception of Mary', 'special'),
    ('2026-12-24', 'Christmas Eve', 'special'),
    ('2026-12-31', 'Last Day of the Year', 'special'),
]


class HolidayTable:
    """Static date -> Holiday lookup."""

    def __init__(self, entries: Dict[date, Holiday]):
        self._entries = dict(entries)

    @classmethod
    def from_rows(cls, rows: Iterable[Tuple[str, str, str]]) -> 'HolidayTable':
        return cls({date.fromisoformat(key): Holiday(name, kind) for key, name, kind in rows})

    @classmethod
    def from_country(cls, country: str, years: Iterable[int], subdiv: Optional[str] = None) -> 'HolidayTable':
        """
        Build a table from the `holidays` package.

        Args:
            country: ISO country code or name accepted by holidays.country_holidays
            years: Years to materialize
            subdiv: Optional state/province code

        Returns:
            HolidayTable with every entry marked 'regular'
        """
        country_holidays = holidays.country_holidays(country, subdiv=subdiv, years=list(years))
        return cls({day: Holiday(name, 'regular') for day, name in country_holidays.items()})

    def lookup(self, day: date) -> Optional[Holiday]:
        if isinstance(day, datetime):
            day = day.date()
        return self._entries.get(day)

    def __contains__(self, day: date) -> bool:
        return self.lookup(day) is not None

    def __len__(self) -> int:
        return len(self._entries)


DEFAULT_HOLIDAYS = HolidayTable.from_rows(PH_HOLIDAYS_2026)


def sunday_weekday(day: date) -> int:
    """Weekday number with Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % 7


def is_weekend(day_date: date) -> bool:
    """Check if date is a weekend (Saturday or Sunday)."""
    return day_date.weekday() >= 5


def day_hours(
    day: date,
    adjustments: DayMap,
    mode: str,
    excluded_days: Iterable[int],
    exclude_holidays: bool = False,
    holiday_table: HolidayTable = DEFAULT_HOLIDAYS,
) -> int:
    """
    Hours attributable to a single day.

    Manual overrides win, then excluded holidays, then the weekly pattern
    (automatic mode only). Manual mode without an override yields 0.
    """
    adj = adjustments.get(get_date_key(day))
    if adj is not None:
        if adj.status == STATUS_OFF:
            return 0
        return BASE_DAY_HOURS + adj.overtime

    if exclude_holidays and day in holiday_table:
        return 0

    if mode == MODE_AUTOMATIC:
        if sunday_weekday(day) in excluded_days:
            return 0
        return 0 if is_weekend(day) else BASE_DAY_HOURS

    return 0


class _Accrual:
    """Running totals shared by both planning modes."""

    def __init__(self, goal: Union[int, float]):
        self.goal = goal
        self.accumulated = 0
        self.work_days: List[WorkDay] = []
        self.work_days_count = 0
        self.end_date: Optional[date] = None

    def record(self, day: date, hours: int) -> None:
        raise NotImplementedError

    def finished(self, index: int, has_override: bool) -> bool:
        raise NotImplementedError

    def _mark_goal(self, day: date) -> None:
        if self.accumulated >= self.goal and self.end_date is None:
            self.end_date = day


class _AutomaticAccrual(_Accrual):
    """Counts hours until the goal is crossed, then stops."""

    def record(self, day: date, hours: int) -> None:
        if hours <= 0 or self.accumulated >= self.goal:
            return
        self.accumulated += hours
        self.work_days_count += 1
        self._mark_goal(day)
        if self.accumulated <= self.goal:
            self.work_days.append(WorkDay(day, hours))

    def finished(self, index: int, has_override: bool) -> bool:
        return self.accumulated >= self.goal


class _ManualAccrual(_Accrual):
    """Counts every logged day, including those past the goal."""

    def record(self, day: date, hours: int) -> None:
        if hours <= 0:
            return
        self.accumulated += hours
        self.work_days.append(WorkDay(day, hours))
        if self.accumulated <= self.goal:
            self.work_days_count += 1
        self._mark_goal(day)

    def finished(self, index: int, has_override: bool) -> bool:
        return self.accumulated >= self.goal and not has_override and index > MANUAL_CUTOFF_DAYS


def derive_stats(
    goal: Union[int, float],
    start: date,
    accumulated: int,
    end_date: Optional[date],
    work_days_count: int,
    work_days: List[WorkDay],
) -> Stats:
    """Package accumulator output into goal progress figures."""
    exceeded = accumulated > goal
    if end_date is not None:
        end_label = format_long_date(end_date)
    else:
        end_label = 'Goal not reached' if goal > 0 else 'Set goal'

    return Stats(
        total_goal=goal,
        accumulated=accumulated,
        remaining=max(0, goal - accumulated),
        exceeded=exceeded,
        excess_hours=accumulated - goal if exceeded else 0,
        progress_percentage=min(100.0, accumulated / goal * 100) if goal > 0 else 0.0,
        estimated_end_date=end_date,
        estimated_end_date_str=end_label,
        work_days_count=work_days_count,
        total_calendar_days=(end_date - start).days + 1 if end_date else 0,
        work_days=work_days,
    )


def internship_stats(
    goal: Union[int, float],
    start_date: Optional[date],
    adjustments: DayMap,
    mode: str,
    excluded_days: Iterable[int],
    exclude_holidays: bool = False,
    holiday_table: HolidayTable = DEFAULT_HOLIDAYS,
) -> Stats:
    """
    Walk forward from the start date and accumulate hours toward the goal.

    Args:
        goal: Target hours
        start_date: First day of the internship, or None when unset
        adjustments: Manual overrides keyed by YYYY-MM-DD
        mode: 'automatic' or 'manual'
        excluded_days: Weekday numbers (Sunday = 0) that are never worked
        exclude_holidays: Treat holidays as days off
        holiday_table: Holiday lookup to use

    Returns:
        Stats snapshot; an empty one when no start date is set
    """
    if start_date is None:
        return Stats(
            total_goal=goal,
            remaining=max(0, goal),
            estimated_end_date_str='Set start date',
        )

    start = start_date.date() if isinstance(start_date, datetime) else start_date
    excluded = frozenset(excluded_days)
    accrual = _AutomaticAccrual(goal) if mode == MODE_AUTOMATIC else _ManualAccrual(goal)

    iterations = 0
    for index in range(SAFETY_LIMIT):
        iterations = index + 1
        day = start + timedelta(days=index)
        hours = day_hours(day, adjustments, mode, excluded, exclude_holidays, holiday_table)
        accrual.record(day, hours)
        if accrual.finished(index, get_date_key(day) in adjustments):
            break
    else:
        logger.warning("Stopped after %d days without meeting goal %s", SAFETY_LIMIT, goal)

    logger.debug("Accrued %s/%s hours in %s mode over %d days",
                 accrual.accumulated, goal, mode, iterations)

    return derive_stats(
        goal,
        start,
        accrual.accumulated,
        accrual.end_date,
        accrual.work_days_count,
        accrual.work_days,
    )


def format_long_date(day: date) -> str:
    """Format as 'January 9th, 2026'."""
    if 10 <= day.day % 100 <= 20:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(day.day % 10, 'th')
    return f"{calendar.month_name[day.month]} {day.day}{suffix}, {day.year}"


def month_grid(year: int, month: int) -> List[List[Optional[date]]]:
    """
    Generate a calendar grid for the given month.

    Args:
        year: Year (e.g., 2026)
        month: Month (1-12)

    Returns:
        List of weeks, each containing 7 days Mon..Sun (None for empty cells)
    """
    grid = []
    for week in calendar.monthcalendar(year, month):
        grid.append([date(year, month, day) if day else None for day in week])
    return grid


def group_work_days_by_month(work_days: List[WorkDay]) -> Dict[str, List[WorkDay]]:
    """Group work days under 'January 2026' style keys, preserving order."""
    groups: Dict[str, List[WorkDay]] = {}
    for wd in work_days:
        key = f"{calendar.month_name[wd.date.month]} {wd.date.year}"
        groups.setdefault(key, []).append(wd)
    return groups


def get_month_name(month: int) -> str:
    """Get full month name from month number."""
    return calendar.month_name[month]


def add_months(source_date: date, months: int) -> date:
    """Add months to a date, handling edge cases."""
    month = source_date.month - 1 + months
    year = source_date.year + month // 12
    month = month % 12 + 1
    day = min(source_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
