"""
Pydantic models for persisted JSON blobs.

This module contains Pydantic equivalents of the dataclass models in
`planner_server.models`, ensuring the stored events and settings keep the
camelCase field names of the original blobs. Decoding helpers return None for
corrupt or schema-invalid input so callers can fall back to seeded defaults.
"""
from __future__ import annotations

import logging
import typing as t
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import DefaultView, Event, Settings

logger = logging.getLogger(__name__)


class EventRecord(BaseModel):
    """Wire shape of a stored event."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str = ""
    date: datetime
    location: str = ""
    created_by: str = Field(alias="createdBy")
    attendees: list[str] = Field(default_factory=list)
    reminders: list[int] = Field(default_factory=list)  # days before event


class SettingsRecord(BaseModel):
    """Wire shape of the stored settings."""
    model_config = ConfigDict(populate_by_name=True)

    dark_mode: bool = Field(default=False, alias="darkMode")
    default_view: DefaultView = Field(default="calendar", alias="defaultView")
    default_reminder_days: list[int] = Field(default_factory=lambda: [1, 3], alias="defaultReminderDays")
    notifications_enabled: bool = Field(default=True, alias="notificationsEnabled")


_event_list = TypeAdapter(list[EventRecord])


def event_to_record(event: Event) -> EventRecord:
    return EventRecord(
        id=event.id,
        title=event.title,
        description=event.description,
        date=event.date,
        location=event.location,
        created_by=event.created_by,
        attendees=list(event.attendees),
        reminders=list(event.reminders),
    )


def record_to_event(record: EventRecord) -> Event:
    return Event(
        id=record.id,
        title=record.title,
        description=record.description,
        date=record.date,
        location=record.location,
        created_by=record.created_by,
        attendees=list(record.attendees),
        reminders=list(record.reminders),
    )


def encode_events(events: t.Sequence[Event]) -> str:
    """Serializes the event list into the stored JSON blob."""
    records = [event_to_record(event) for event in events]
    return _event_list.dump_json(records, by_alias=True).decode("utf-8")


def decode_events(raw: t.Optional[str]) -> t.Optional[list[Event]]:
    """Parses a stored events blob.

    :param raw: JSON text as returned by the storage backend, or None.
    :return: The decoded events, or None when the blob is absent or unusable.
    """
    if raw is None:
        return None
    try:
        records = _event_list.validate_json(raw)
        events = [record_to_event(record) for record in records]
    except (PydanticValidationError, ValidationError) as e:
        logger.warning("Ignoring corrupt events blob: %s", e)
        return None

    ids = [event.id for event in events]
    if len(set(ids)) != len(ids):
        logger.warning("Ignoring events blob with duplicate event ids")
        return None
    return events


def encode_settings(settings: Settings) -> str:
    """Serializes settings into the stored JSON blob."""
    record = SettingsRecord(
        dark_mode=settings.dark_mode,
        default_view=settings.default_view,
        default_reminder_days=list(settings.default_reminder_days),
        notifications_enabled=settings.notifications_enabled,
    )
    return record.model_dump_json(by_alias=True)


def decode_settings(raw: t.Optional[str]) -> t.Optional[Settings]:
    """Parses a stored settings blob, returning None when absent or unusable."""
    if raw is None:
        return None
    try:
        record = SettingsRecord.model_validate_json(raw)
        return Settings(
            dark_mode=record.dark_mode,
            default_view=record.default_view,
            default_reminder_days=list(record.default_reminder_days),
            notifications_enabled=record.notifications_enabled,
        )
    except (PydanticValidationError, ValidationError) as e:
        logger.warning("Ignoring corrupt settings blob: %s", e)
        return None
