"""Tests for data models and date keys."""

from datetime import date, datetime

import pytest

from models import DayAdjustment, TrackerConfig, get_date_key, parse_date_key


class TestDateKeys:
    """Tests for get_date_key / parse_date_key."""

    def test_key_from_date_and_datetime(self):
        assert get_date_key(date(2026, 1, 5)) == '2026-01-05'
        assert get_date_key(datetime(2026, 1, 5, 23, 59)) == '2026-01-05'

    def test_parse_valid(self):
        assert parse_date_key('2024-02-29') == date(2024, 2, 29)

    @pytest.mark.parametrize('key', ['2026/01/05', '2026-02-30', '2026-1-5', '', 'not-a-date', None])
    def test_parse_invalid(self, key):
        with pytest.raises(ValueError):
            parse_date_key(key)


class TestTrackerConfig:
    """Tests for TrackerConfig derived properties."""

    def test_numeric_goal(self):
        assert TrackerConfig(goal=480).numeric_goal == 480
        assert TrackerConfig(goal='').numeric_goal == 0

    def test_start_date(self):
        assert TrackerConfig(start_date_str='2026-01-05').start_date == date(2026, 1, 5)
        assert TrackerConfig(start_date_str='').start_date is None
        assert TrackerConfig(start_date_str='garbage').start_date is None


class TestDayAdjustment:
    """Tests for DayAdjustment.to_dict."""

    def test_minimal(self):
        assert DayAdjustment('off').to_dict() == {'status': 'off', 'overtime': 0}

    def test_full(self):
        data = DayAdjustment('work', overtime=2, log='demo day', entered=True).to_dict()
        assert data == {'status': 'work', 'overtime': 2, 'log': 'demo day', 'entered': True}
