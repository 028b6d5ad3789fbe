"""Tests for override editing helpers."""

from datetime import date

import adjustments as adj_ops
from models import DayAdjustment, TrackerConfig


class TestSelectRange:
    """Tests for select_range."""

    def test_inclusive_range_either_direction(self):
        forward = adj_ops.select_range(date(2026, 1, 5), date(2026, 1, 7), date(2026, 1, 1))
        backward = adj_ops.select_range(date(2026, 1, 7), date(2026, 1, 5), date(2026, 1, 1))
        assert forward == backward == {'2026-01-05', '2026-01-06', '2026-01-07'}

    def test_single_day(self):
        assert adj_ops.select_range(date(2026, 1, 5), date(2026, 1, 5), date(2026, 1, 5)) == {'2026-01-05'}

    def test_before_start_is_rejected(self):
        assert adj_ops.select_range(date(2025, 12, 31), date(2026, 1, 3), date(2026, 1, 1)) == set()

    def test_after_end_limit_is_rejected(self):
        selection = adj_ops.select_range(date(2026, 1, 5), date(2026, 1, 12), date(2026, 1, 5), date(2026, 1, 9))
        assert selection == set()

    def test_no_start_date(self):
        assert adj_ops.select_range(date(2026, 1, 5), date(2026, 1, 6), None) == set()


class TestPaintRange:
    """Tests for paint_range and next_paint_status."""

    def test_paint_keeps_overtime(self):
        current = {'2026-01-05': DayAdjustment('work', overtime=3, log='kickoff')}
        painted = adj_ops.paint_range(current, ['2026-01-05', '2026-01-06'], 'off')
        assert painted['2026-01-05'] == DayAdjustment('off', overtime=3)
        assert painted['2026-01-06'] == DayAdjustment('off', overtime=0)

    def test_input_not_mutated(self):
        current = {}
        adj_ops.paint_range(current, ['2026-01-05'], 'work')
        assert current == {}

    def test_entered_days_locked(self):
        current = {'2026-01-05': DayAdjustment('work', entered=True)}
        painted = adj_ops.paint_range(current, ['2026-01-05'], 'off')
        assert painted['2026-01-05'].status == 'work'

    def test_next_paint_status(self):
        assert adj_ops.next_paint_status(8) == 'off'
        assert adj_ops.next_paint_status(0) == 'work'


class TestUpdateOvertime:
    """Tests for update_overtime."""

    def test_add_to_implied_work_day(self):
        updated = adj_ops.update_overtime({}, date(2026, 1, 5), 1, current_hours=8)
        assert updated['2026-01-05'] == DayAdjustment('work', overtime=1)

    def test_add_flips_off_day_to_work(self):
        current = {'2026-01-10': DayAdjustment('off')}
        updated = adj_ops.update_overtime(current, date(2026, 1, 10), 2, current_hours=0)
        assert updated['2026-01-10'] == DayAdjustment('work', overtime=2)

    def test_clamped_at_zero(self):
        current = {'2026-01-05': DayAdjustment('work', overtime=1)}
        updated = adj_ops.update_overtime(current, date(2026, 1, 5), -3, current_hours=9)
        assert updated['2026-01-05'].overtime == 0

    def test_removing_from_implied_off_day_stays_off(self):
        updated = adj_ops.update_overtime({}, date(2026, 1, 10), -1, current_hours=0)
        assert updated['2026-01-10'] == DayAdjustment('off', overtime=0)


class TestLogs:
    """Tests for daily log helpers."""

    def test_save_log_strips_text(self):
        updated = adj_ops.save_log({}, date(2026, 1, 5), '  standup notes  ', current_hours=8)
        assert updated['2026-01-05'] == DayAdjustment('work', log='standup notes')

    def test_blank_log_clears(self):
        current = {'2026-01-05': DayAdjustment('work', log='old')}
        updated = adj_ops.save_log(current, date(2026, 1, 5), '   ', current_hours=8)
        assert updated['2026-01-05'].log is None

    def test_delete_log_keeps_status(self):
        current = {'2026-01-05': DayAdjustment('work', overtime=2, log='old')}
        updated = adj_ops.delete_log(current, date(2026, 1, 5))
        assert updated['2026-01-05'] == DayAdjustment('work', overtime=2)
        assert current['2026-01-05'].log == 'old'

    def test_delete_missing_log(self):
        assert adj_ops.delete_log({}, date(2026, 1, 5)) == {}

    def test_set_entered(self):
        updated = adj_ops.set_entered({}, date(2026, 1, 5), True, current_hours=8)
        assert updated['2026-01-05'].entered


class TestConfigHelpers:
    """Tests for weekday toggling and reset."""

    def test_toggle_excluded_day(self):
        assert adj_ops.toggle_excluded_day([0, 6], 6) == [0]
        assert adj_ops.toggle_excluded_day([0], 3) == [0, 3]

    def test_reset_config(self):
        config = adj_ops.reset_config()
        assert config == TrackerConfig()
        assert config.goal == ''
        assert config.excluded_days == [0, 6]
        assert config.exclude_holidays is True
        assert config.mode == 'automatic'
