"""
Data models for the internship tracker.
Plain dataclasses shared by the calculator, exports and persistence.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Union

STATUS_WORK = 'work'
STATUS_OFF = 'off'
DAY_STATUSES = (STATUS_WORK, STATUS_OFF)

MODE_MANUAL = 'manual'
MODE_AUTOMATIC = 'automatic'
PLANNING_MODES = (MODE_MANUAL, MODE_AUTOMATIC)

# Weekday numbers use Sunday = 0 ... Saturday = 6
DEFAULT_EXCLUDED_DAYS = [0, 6]
BASE_DAY_HOURS = 8


def get_date_key(day: Union[date, datetime]) -> str:
    """Return the YYYY-MM-DD key used in a DayMap."""
    if isinstance(day, datetime):
        day = day.date()
    return day.isoformat()


def parse_date_key(key: str) -> date:
    """
    Parse a YYYY-MM-DD key back into a date.

    Raises:
        ValueError: if the key is not a valid ISO calendar date
    """
    if not isinstance(key, str) or len(key) != 10:
        raise ValueError(f"Invalid date key: {key!r}")
    return date.fromisoformat(key)


@dataclass(frozen=True)
class DayAdjustment:
    """Manual override for one calendar day."""

    status: str
    overtime: int = 0
    log: Optional[str] = None
    entered: bool = False  # officially logged, locked against range painting

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {'status': self.status, 'overtime': self.overtime}
        if self.log is not None:
            data['log'] = self.log
        if self.entered:
            data['entered'] = True
        return data


DayMap = Dict[str, DayAdjustment]


@dataclass(frozen=True)
class TrackerConfig:
    """
    Caller-owned configuration snapshot.

    `goal` keeps the stored form: an int, or '' when the user has not set one.
    """

    goal: Union[int, float, str] = ''
    start_date_str: str = ''
    adjustments: DayMap = field(default_factory=dict)
    mode: str = MODE_AUTOMATIC
    excluded_days: List[int] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_DAYS))
    exclude_holidays: bool = True

    @property
    def numeric_goal(self) -> Union[int, float]:
        if isinstance(self.goal, bool) or not isinstance(self.goal, (int, float)):
            return 0
        return self.goal

    @property
    def start_date(self) -> Optional[date]:
        if not self.start_date_str:
            return None
        try:
            return parse_date_key(self.start_date_str)
        except ValueError:
            return None


@dataclass(frozen=True)
class WorkDay:
    """A day contributing positive hours."""

    date: date
    hours: int


@dataclass
class Stats:
    """Accrual summary produced by calc.internship_stats."""

    total_goal: int
    accumulated: int = 0
    remaining: int = 0
    exceeded: bool = False
    excess_hours: int = 0
    progress_percentage: float = 0.0
    estimated_end_date: Optional[date] = None
    estimated_end_date_str: str = ''
    work_days_count: int = 0
    total_calendar_days: int = 0
    work_days: List[WorkDay] = field(default_factory=list)
