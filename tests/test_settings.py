# -*- coding: utf-8 -*-
"""Tests for SettingsStore and Session."""
import pytest

from planner_server.context import Session
from planner_server.errors import NotFoundError, ValidationError
from planner_server.schemas import decode_settings
from planner_server.storage import SETTINGS_KEY, MemoryStorage
from planner_server.store import SettingsStore


def test_load_uses_defaults_without_stored_settings() -> None:
    store = SettingsStore.load(MemoryStorage())
    assert store.settings.default_reminder_days == [1, 3]
    assert store.settings.default_view == "calendar"


def test_load_ignores_corrupt_settings() -> None:
    store = SettingsStore.load(MemoryStorage({SETTINGS_KEY: "{{{"}))
    assert store.settings.dark_mode is False


def test_each_setter_persists(storage: MemoryStorage) -> None:
    store = SettingsStore(storage)

    store.set_dark_mode(True)
    assert decode_settings(storage.get(SETTINGS_KEY)).dark_mode is True

    store.set_default_view("list")
    store.set_notifications_enabled(False)
    stored = decode_settings(storage.get(SETTINGS_KEY))
    assert stored.default_view == "list"
    assert stored.notifications_enabled is False

    reloaded = SettingsStore.load(storage)
    assert reloaded.settings == store.settings


def test_toggle_default_reminder(storage: MemoryStorage) -> None:
    store = SettingsStore(storage)
    assert store.toggle_default_reminder(7).default_reminder_days == [1, 3, 7]
    assert store.toggle_default_reminder(1).default_reminder_days == [3, 7]
    assert store.toggle_default_reminder(1).default_reminder_days == [1, 3, 7]


def test_invalid_values_leave_settings_untouched(storage: MemoryStorage) -> None:
    store = SettingsStore(storage)
    with pytest.raises(ValidationError):
        store.set_default_view("agenda")
    with pytest.raises(ValidationError):
        store.toggle_default_reminder(-3)
    assert store.settings.default_view == "calendar"
    assert storage.get(SETTINGS_KEY) is None


def test_settings_snapshot_is_detached(storage: MemoryStorage) -> None:
    store = SettingsStore(storage)
    snapshot = store.settings
    snapshot.default_reminder_days.append(5)
    assert store.settings.default_reminder_days == [1, 3]


def test_session_starts_with_first_user_and_switches() -> None:
    session = Session()
    assert session.current_user.id == "user1"

    user = session.switch_user("user3")
    assert user.name == "Jamie Lee"
    assert session.current_user is user


def test_session_rejects_unknown_user() -> None:
    session = Session()
    with pytest.raises(NotFoundError):
        session.switch_user("user99")
    assert session.current_user.id == "user1"


def test_session_needs_a_roster() -> None:
    with pytest.raises(ValidationError, match="at least one user"):
        Session([])


def test_get_user_falls_back_to_first_member() -> None:
    session = Session()
    assert session.get_user("user2").name == "Alex Smith"
    assert session.get_user("ghost").id == "user1"
