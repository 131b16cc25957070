# -*- coding: utf-8 -*-
"""Tests for the stored JSON encoding and the storage backends."""
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from conftest import NOW
from planner_server.errors import PersistenceError
from planner_server.models import Settings
from planner_server.schemas import decode_events, decode_settings, encode_events, encode_settings
from planner_server.seed import sample_events
from planner_server.storage import JsonFileStorage, MemoryStorage


def test_event_list_round_trips_field_for_field() -> None:
    events = sample_events(NOW)
    assert decode_events(encode_events(events)) == events


def test_encoded_events_use_original_field_names() -> None:
    blob = json.loads(encode_events(sample_events(NOW)[:1]))
    assert set(blob[0]) == {
        "id", "title", "description", "date", "location", "createdBy", "attendees", "reminders",
    }
    assert blob[0]["createdBy"] == "user2"
    assert blob[0]["reminders"] == [1, 3]


def test_decode_events_accepts_browser_style_blob() -> None:
    """ISO strings with milliseconds and 'Z', as a browser would write them."""
    raw = json.dumps([{
        "id": "event1700000000000",
        "title": "Lunch",
        "description": "",
        "date": "2024-06-10T12:00:00.000Z",
        "location": "",
        "createdBy": "user1",
        "attendees": ["user1"],
        "reminders": [1],
    }])
    [event] = decode_events(raw)
    assert event.date == datetime(2024, 6, 10, 12, tzinfo=timezone.utc)
    assert event.created_by == "user1"


def test_decode_events_treats_absent_and_corrupt_alike() -> None:
    assert decode_events(None) is None
    assert decode_events("") is None
    assert decode_events("{}") is None


def test_decode_events_rejects_duplicate_ids() -> None:
    events = sample_events(NOW)
    raw = encode_events([events[0], events[0]])
    assert decode_events(raw) is None


def test_settings_round_trip() -> None:
    settings = Settings(dark_mode=True, default_view="list", default_reminder_days=[7, 1], notifications_enabled=False)
    decoded = decode_settings(encode_settings(settings))
    assert decoded == settings
    assert json.loads(encode_settings(settings)) == {
        "darkMode": True,
        "defaultView": "list",
        "defaultReminderDays": [1, 7],
        "notificationsEnabled": False,
    }


@pytest.mark.parametrize("raw", ["nope", '{"defaultView": "agenda"}', '{"defaultReminderDays": [0]}'])
def test_decode_settings_ignores_corrupt_blob(raw: str) -> None:
    assert decode_settings(raw) is None


def test_decode_settings_fills_missing_fields_with_defaults() -> None:
    assert decode_settings('{"darkMode": true}') == Settings(dark_mode=True)


def test_memory_storage_get_and_set() -> None:
    storage = MemoryStorage()
    assert storage.get("events") is None
    storage.set("events", "[]")
    assert storage.get("events") == "[]"


def test_json_file_storage_writes_one_file_per_key(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "data")
    assert storage.get("events") is None

    storage.set("events", "[]")
    storage.set("settings", "{}")

    assert (tmp_path / "data" / "events.json").read_text(encoding="utf-8") == "[]"
    assert storage.get("settings") == "{}"
    assert not list((tmp_path / "data").glob("*.tmp"))


def test_json_file_storage_cleans_up_after_failed_replace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A write that fails halfway leaves neither a temp file nor a changed blob."""
    storage = JsonFileStorage(tmp_path)
    storage.set("events", "[]")

    def failing_replace(src, dst) -> None:
        raise OSError("device busy")

    monkeypatch.setattr("planner_server.storage.os.replace", failing_replace)

    with pytest.raises(PersistenceError, match="device busy"):
        storage.set("events", '[{"id": "e1"}]')

    assert not list(tmp_path.glob("*.tmp"))
    assert storage.get("events") == "[]"


def test_json_file_storage_wraps_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    storage = JsonFileStorage(blocker / "data")

    with pytest.raises(PersistenceError):
        storage.set("events", "[]")
