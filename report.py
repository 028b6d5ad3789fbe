"""
Export and import of tracker data.
CSV schedule, PDF progress report and the JSON backup file.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fpdf import FPDF

from models import (
    DAY_STATUSES,
    PLANNING_MODES,
    DayAdjustment,
    DayMap,
    Stats,
    TrackerConfig,
    WorkDay,
    get_date_key,
    parse_date_key,
)

logger = logging.getLogger(__name__)

CSV_HEADER = 'Date,Day,Hours,Status,Daily Log'
REPORT_TITLE = 'Internship Tracker - Progress Report'
# Work days listed in the report before it defers to the CSV
REPORT_DAY_LIMIT = 40


class BackupFormatError(ValueError):
    """Raised when a backup payload does not have the expected shape."""


def _escape_csv(value: str) -> str:
    if ',' in value or '\n' in value or '"' in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def generate_csv(work_days: List[WorkDay], adjustments: Optional[DayMap] = None) -> str:
    """
    Render work days as CSV with the daily log of each day.

    Args:
        work_days: Ordered work days from Stats
        adjustments: Overrides holding the daily logs

    Returns:
        CSV text, header line first
    """
    adjustments = adjustments or {}
    rows = []
    for wd in work_days:
        adj = adjustments.get(get_date_key(wd.date))
        log = adj.log if adj is not None and adj.log else ''
        rows.append(','.join([
            wd.date.isoformat(),
            wd.date.strftime('%A'),
            str(wd.hours),
            'Work',
            _escape_csv(log),
        ]))
    return CSV_HEADER + '\n' + '\n'.join(rows)


def summary_lines(stats: Stats) -> List[str]:
    """Summary fields shown at the top of the progress report."""
    return [
        f"Target Hours: {stats.total_goal}h",
        f"Accumulated: {stats.accumulated}h",
        f"Remaining: {stats.remaining}h",
        f"Progress: {round(stats.progress_percentage)}%",
        f"Work Days: {stats.work_days_count}",
        f"Projected End Date: {stats.estimated_end_date_str}",
    ]


def build_pdf_report(stats: Stats, generated_at: datetime) -> FPDF:
    """
    Lay out the progress report on A4 pages.

    Args:
        stats: Accrual summary to report
        generated_at: Timestamp printed under the title

    Returns:
        FPDF document, one or more pages
    """
    doc = FPDF(unit='mm', format='A4')
    doc.add_page()

    doc.set_font('Helvetica', size=22)
    doc.set_text_color(79, 70, 229)
    doc.text(20, 25, REPORT_TITLE)

    doc.set_font('Helvetica', size=10)
    doc.set_text_color(156, 163, 175)
    doc.text(20, 32, f"Generated on: {generated_at.strftime('%b %d, %Y, %I:%M %p')}")

    doc.set_font('Helvetica', size=14)
    doc.set_text_color(31, 41, 55)
    doc.text(20, 45, 'Summary')

    doc.set_font('Helvetica', size=12)
    y = 55
    for line in summary_lines(stats):
        doc.text(25, y, line)
        y += 7

    doc.text(20, 105, 'Schedule Details')

    y = 115
    doc.set_font('Helvetica', size=10)
    for wd in stats.work_days[:REPORT_DAY_LIMIT]:
        if y > 270:
            doc.add_page()
            y = 20
        doc.text(25, y, f"{wd.date.isoformat()} ({wd.date.strftime('%a')})")
        doc.text(100, y, f"{wd.hours} hours")
        y += 7

    extra = len(stats.work_days) - REPORT_DAY_LIMIT
    if extra > 0:
        doc.set_font('Helvetica', size=8)
        doc.set_text_color(156, 163, 175)
        doc.text(25, y, f"... and {extra} more days. See CSV for full list.")
    return doc


def generate_pdf_report(stats: Stats, generated_at: datetime) -> bytes:
    """Render the progress report as PDF bytes."""
    return bytes(build_pdf_report(stats, generated_at).output())


def config_to_dict(config: TrackerConfig) -> Dict[str, Any]:
    """Stable backup/storage schema."""
    return {
        'goal': config.goal,
        'startDateStr': config.start_date_str,
        'adjustments': {key: adj.to_dict() for key, adj in config.adjustments.items()},
        'mode': config.mode,
        'excludedDays': list(config.excluded_days),
        'excludeHolidays': config.exclude_holidays,
    }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_adjustment(key: str, raw: Any) -> DayAdjustment:
    try:
        parse_date_key(key)
    except ValueError:
        raise BackupFormatError(f"Invalid adjustment date: {key!r}")
    if not isinstance(raw, dict):
        raise BackupFormatError(f"Invalid adjustment for {key}")
    if raw.get('status') not in DAY_STATUSES:
        raise BackupFormatError(f"Invalid status for {key}: {raw.get('status')!r}")

    overtime = raw.get('overtime', 0)
    if not isinstance(overtime, int) or isinstance(overtime, bool) or overtime < 0:
        raise BackupFormatError(f"Invalid overtime for {key}: {overtime!r}")
    log = raw.get('log')
    if log is not None and not isinstance(log, str):
        raise BackupFormatError(f"Invalid log for {key}")
    entered = raw.get('entered', False)
    if not isinstance(entered, bool):
        raise BackupFormatError(f"Invalid entered flag for {key}")

    return DayAdjustment(status=raw['status'], overtime=overtime, log=log, entered=entered)


def config_from_dict(data: Any) -> TrackerConfig:
    """
    Validate a backup/storage payload and build a TrackerConfig.

    Raises:
        BackupFormatError: on the first field with the wrong shape
    """
    if not isinstance(data, dict):
        raise BackupFormatError('Backup must be a JSON object')

    goal = data.get('goal')
    if goal != '' and not (_is_number(goal) and goal >= 0):
        raise BackupFormatError('Invalid goal format')

    start_date_str = data.get('startDateStr')
    if not isinstance(start_date_str, str):
        raise BackupFormatError('Invalid start date format')
    if start_date_str:
        try:
            parse_date_key(start_date_str)
        except ValueError:
            raise BackupFormatError(f"Invalid start date: {start_date_str!r}")

    raw_adjustments = data.get('adjustments')
    if not isinstance(raw_adjustments, dict):
        raise BackupFormatError('Invalid adjustments format')
    adjustments = {key: _parse_adjustment(key, raw) for key, raw in raw_adjustments.items()}

    mode = data.get('mode')
    if mode not in PLANNING_MODES:
        raise BackupFormatError('Invalid mode format')

    excluded_days = data.get('excludedDays')
    if not isinstance(excluded_days, list) or not all(
        isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6 for d in excluded_days
    ):
        raise BackupFormatError('Invalid excluded days format')

    exclude_holidays = data.get('excludeHolidays', True)
    if not isinstance(exclude_holidays, bool):
        raise BackupFormatError('Invalid exclude holidays format')

    return TrackerConfig(
        goal=goal,
        start_date_str=start_date_str,
        adjustments=adjustments,
        mode=mode,
        excluded_days=list(excluded_days),
        exclude_holidays=exclude_holidays,
    )


def serialize_backup(config: TrackerConfig) -> str:
    """Serialize the full configuration as the JSON backup file."""
    return json.dumps(config_to_dict(config), indent=2)


def deserialize_backup(json_data: str) -> TrackerConfig:
    """
    Parse and validate a JSON backup. Nothing is partially applied.

    Raises:
        BackupFormatError: if the text is not JSON or has the wrong shape
    """
    try:
        data = json.loads(json_data)
    except json.JSONDecodeError as e:
        raise BackupFormatError(f"Invalid JSON format: {e}")

    config = config_from_dict(data)
    logger.info("Parsed backup with %d adjustments", len(config.adjustments))
    return config
