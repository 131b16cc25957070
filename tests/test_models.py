# -*- coding: utf-8 -*-
"""Tests for record validation in planner_server.models."""
from datetime import datetime, timedelta, timezone

import pytest

from planner_server.errors import ValidationError
from planner_server.models import Event, Settings, parse_instant


def test_parse_instant_accepts_trailing_z() -> None:
    """A 'Z' suffix means UTC."""
    assert parse_instant("2024-06-10T09:30:00.000Z") == datetime(2024, 6, 10, 9, 30, tzinfo=timezone.utc)


def test_parse_instant_normalizes_offsets_to_utc() -> None:
    """Instants with an offset are stored as the equivalent UTC instant."""
    instant = parse_instant("2024-06-10T09:30:00+02:00")
    assert instant.tzinfo == timezone.utc
    assert instant == datetime(2024, 6, 10, 7, 30, tzinfo=timezone.utc)


def test_parse_instant_reads_naive_values_as_local_time() -> None:
    """A naive datetime is interpreted in the process time zone."""
    naive = datetime(2024, 6, 10, 9, 30)
    assert parse_instant(naive) == naive.astimezone()


@pytest.mark.parametrize("value", ["", "tomorrow", "2024-13-45", "10/06/2024"])
def test_parse_instant_rejects_garbage(value: str) -> None:
    with pytest.raises(ValidationError):
        parse_instant(value)


def test_event_rejects_blank_title() -> None:
    with pytest.raises(ValidationError, match="title"):
        Event(id="e1", title="   ", date=datetime.now(timezone.utc), created_by="user1")


def test_event_collapses_duplicate_reminders_and_attendees() -> None:
    """Reminders behave as a set, attendees as an ordered set."""
    event = Event(
        id="e1",
        title="Picnic",
        date="2024-06-10T12:00:00Z",
        created_by="user1",
        attendees=["user3", "user1", "user3"],
        reminders=[3, 1, 3],
    )
    assert event.reminders == [1, 3]
    assert event.attendees == ["user3", "user1"]
    assert event.date == datetime(2024, 6, 10, 12, tzinfo=timezone.utc)


@pytest.mark.parametrize("reminders", [[0], [-1], [1.5], [True]])
def test_event_rejects_invalid_reminder_offsets(reminders: list) -> None:
    with pytest.raises(ValidationError):
        Event(id="e1", title="Picnic", date=datetime.now(timezone.utc), created_by="user1", reminders=reminders)


def test_settings_defaults_match_first_run() -> None:
    settings = Settings()
    assert settings.dark_mode is False
    assert settings.default_view == "calendar"
    assert settings.default_reminder_days == [1, 3]
    assert settings.notifications_enabled is True


def test_settings_reject_unknown_view() -> None:
    with pytest.raises(ValidationError, match="Default view"):
        Settings(default_view="agenda")


def test_event_creator_may_be_absent_from_attendees() -> None:
    """The organizer is allowed to RSVP out of their own event."""
    event = Event(
        id="e1",
        title="Picnic",
        date=datetime.now(timezone.utc) + timedelta(days=1),
        created_by="user1",
        attendees=["user2"],
    )
    assert not event.is_attending("user1")
