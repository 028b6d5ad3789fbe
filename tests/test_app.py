"""Tests for the Streamlit app flows that replace the whole configuration."""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import db
from models import TrackerConfig

APP_PATH = str(Path(__file__).resolve().parent.parent / 'app.py')


class FakeStore:
    """In-memory stand-in for the Supabase helpers in db."""

    def __init__(self, stored):
        self.stored = stored
        self.saves = []
        self.cleared = []

    def install(self, monkeypatch):
        monkeypatch.setattr(db, 'get_current_user_id', lambda: 'intern')
        monkeypatch.setattr(db, 'init_schema_if_needed', lambda client=None: True)
        monkeypatch.setattr(db, 'load_config', lambda user_id, client=None: self.stored)
        monkeypatch.setattr(db, 'save_config', lambda user_id, config, client=None: self.saves.append(config))
        monkeypatch.setattr(db, 'clear_config', lambda user_id, client=None: self.cleared.append(user_id))


def make_app(monkeypatch, stored):
    store = FakeStore(stored)
    store.install(monkeypatch)
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    return at, store


def widget(elements, label):
    return next(el for el in elements if el.label == label)


@pytest.fixture
def wednesday_off():
    return TrackerConfig(
        goal=40,
        start_date_str='2026-01-05',
        mode='manual',
        excluded_days=[0, 3, 6],
        exclude_holidays=False,
    )


class TestResetFlow:
    """Tests for the two-step reset in the sidebar."""

    def test_reset_clears_weekly_schedule(self, monkeypatch, wednesday_off):
        at, store = make_app(monkeypatch, wednesday_off)
        assert widget(at.checkbox, 'Wed').value is True

        widget(at.button, 'Reset everything').click().run()
        widget(at.button, 'Confirm reset').click().run()

        assert not at.exception
        assert at.session_state['config'] == TrackerConfig()
        assert widget(at.checkbox, 'Wed').value is False
        assert store.cleared == ['intern']
        assert store.saves == []


class TestRestoreFlow:
    """Tests for installing a restored backup."""

    def test_restore_repopulates_setup(self, monkeypatch, wednesday_off):
        at, store = make_app(monkeypatch, TrackerConfig())
        assert widget(at.checkbox, 'Wed').value is False

        at.session_state['pending_config'] = wednesday_off
        at.session_state['flash'] = 'Backup restored successfully!'
        at.run()

        assert not at.exception
        assert at.session_state['config'] == wednesday_off
        assert store.saves == [wednesday_off]
        assert widget(at.checkbox, 'Wed').value is True
        assert at.sidebar.success[0].value == 'Backup restored successfully!'

    def test_flash_shown_once(self, monkeypatch, wednesday_off):
        at, _ = make_app(monkeypatch, TrackerConfig())
        at.session_state['pending_config'] = wednesday_off
        at.session_state['flash'] = 'Backup restored successfully!'
        at.run()
        at.run()
        assert len(at.sidebar.success) == 0


class TestLoadedGoal:
    """A freshly loaded config is not rewritten when nothing was edited."""

    @pytest.mark.parametrize('goal', [486.0, 0, '', 40])
    def test_no_save_on_first_run(self, monkeypatch, goal):
        stored = TrackerConfig(goal=goal, start_date_str='2026-01-05')
        at, store = make_app(monkeypatch, stored)
        assert store.saves == []
        assert at.session_state['config'] == stored
