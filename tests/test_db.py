"""Tests for Supabase persistence helpers using a mocked client."""

import json
from unittest.mock import MagicMock

import pytest

import db
from models import DayAdjustment, TrackerConfig
from report import config_to_dict


def make_client(rows=None):
    """Client whose every query chain resolves to `rows`."""
    client = MagicMock()
    query = client.table.return_value
    for method in ('select', 'update', 'insert', 'delete', 'eq', 'limit'):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=rows or [])
    return client


@pytest.fixture
def config():
    return TrackerConfig(
        goal=120,
        start_date_str='2026-01-05',
        adjustments={'2026-01-05': DayAdjustment('work', overtime=1, log='first day')},
    )


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_when_nothing_stored(self):
        assert db.load_config('intern', client=make_client()) == TrackerConfig()

    def test_stored_state(self, config):
        client = make_client([{'data_json': json.dumps(config_to_dict(config))}])
        assert db.load_config('intern', client=client) == config
        client.table.assert_called_with(db.STATE_TABLE)
        client.table.return_value.eq.assert_any_call('storage_key', db.STORAGE_KEY)

    def test_unreadable_state_falls_back(self):
        client = make_client([{'data_json': '{"goal": "lots"}'}])
        assert db.load_config('intern', client=client) == TrackerConfig()


class TestSaveConfig:
    """Tests for save_config and clear_config."""

    def test_update_existing(self, config):
        client = make_client([{'id': 1}])
        db.save_config('intern', config, client=client)
        query = client.table.return_value
        fields = query.update.call_args[0][0]
        assert json.loads(fields['data_json']) == config_to_dict(config)
        query.insert.assert_not_called()

    def test_insert_when_missing(self, config):
        client = make_client()
        db.save_config('intern', config, client=client)
        inserted = client.table.return_value.insert.call_args[0][0]
        assert inserted['user_id'] == 'intern'
        assert inserted['storage_key'] == db.STORAGE_KEY

    def test_clear(self):
        client = make_client()
        db.clear_config('intern', client=client)
        client.table.return_value.delete.assert_called_once()


class TestSchemaAndSecrets:
    """Tests for init_schema_if_needed and credentials."""

    def test_schema_present(self):
        assert db.init_schema_if_needed(make_client()) is True

    def test_schema_missing(self):
        client = make_client()
        client.table.return_value.execute.side_effect = Exception('relation does not exist')
        assert db.init_schema_if_needed(client) is False

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.setattr(db, 'get_secret', lambda name, default=None: default)
        with pytest.raises(RuntimeError, match='Missing SUPABASE_URL'):
            db.get_supabase_client()

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv('TRACKER_USER_ID', 'intern-42')
        monkeypatch.setattr(db.st, 'secrets', {})
        assert db.get_current_user_id() == 'intern-42'
