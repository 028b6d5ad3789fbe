"""
Override editing helpers.
Every function returns a new DayMap; the input map is never mutated.
"""

from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable, List, Optional, Set

from models import (
    STATUS_OFF,
    STATUS_WORK,
    DayAdjustment,
    DayMap,
    TrackerConfig,
    get_date_key,
)


def select_range(
    anchor: date,
    current: date,
    start_date: Optional[date],
    end_limit: Optional[date] = None,
) -> Set[str]:
    """
    Date keys covered by a drag from `anchor` to `current` (inclusive).

    Nothing is selectable before the start date, or after `end_limit`
    when one is given (automatic mode passes the projected end date).
    """
    if start_date is None:
        return set()
    for endpoint in (anchor, current):
        if endpoint < start_date:
            return set()
        if end_limit is not None and endpoint > end_limit:
            return set()

    first, last = min(anchor, current), max(anchor, current)
    return {get_date_key(first + timedelta(days=i)) for i in range((last - first).days + 1)}


def next_paint_status(current_hours: int) -> str:
    """Painting flips a worked day to off and anything else to work."""
    return STATUS_OFF if current_hours > 0 else STATUS_WORK


def paint_range(adjustments: DayMap, keys: Iterable[str], status: str) -> DayMap:
    """Set `status` on every key, keeping overtime. Entered days stay locked."""
    painted = dict(adjustments)
    for key in keys:
        current = adjustments.get(key)
        if current is not None and current.entered:
            continue
        painted[key] = DayAdjustment(status=status, overtime=current.overtime if current else 0)
    return painted


def _current_or_implied(adjustments: DayMap, key: str, current_hours: int) -> DayAdjustment:
    existing = adjustments.get(key)
    if existing is not None:
        return existing
    return DayAdjustment(status=STATUS_WORK if current_hours > 0 else STATUS_OFF, overtime=0)


def update_overtime(adjustments: DayMap, day: date, delta: int, current_hours: int) -> DayMap:
    """
    Add `delta` overtime hours to a day, clamped at zero.

    A day that is off becomes a work day when overtime is added.
    """
    key = get_date_key(day)
    current = _current_or_implied(adjustments, key, current_hours)
    status = STATUS_WORK if current.status == STATUS_OFF and delta > 0 else current.status
    updated = dict(adjustments)
    updated[key] = replace(current, status=status, overtime=max(0, current.overtime + delta))
    return updated


def save_log(adjustments: DayMap, day: date, text: str, current_hours: int) -> DayMap:
    """Attach a daily log; blank text clears it."""
    key = get_date_key(day)
    current = _current_or_implied(adjustments, key, current_hours)
    updated = dict(adjustments)
    updated[key] = replace(current, log=text.strip() or None)
    return updated


def delete_log(adjustments: DayMap, day: date) -> DayMap:
    key = get_date_key(day)
    current = adjustments.get(key)
    if current is None:
        return adjustments
    updated = dict(adjustments)
    updated[key] = replace(current, log=None)
    return updated


def set_entered(adjustments: DayMap, day: date, entered: bool, current_hours: int) -> DayMap:
    """Mark a day as officially logged (or unlock it)."""
    key = get_date_key(day)
    current = _current_or_implied(adjustments, key, current_hours)
    updated = dict(adjustments)
    updated[key] = replace(current, entered=entered)
    return updated


def toggle_excluded_day(excluded_days: List[int], weekday: int) -> List[int]:
    if weekday in excluded_days:
        return [d for d in excluded_days if d != weekday]
    return excluded_days + [weekday]


def reset_config() -> TrackerConfig:
    """Fresh configuration: no goal, no start date, weekends excluded."""
    return TrackerConfig()
