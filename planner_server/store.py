# -*- coding: utf-8 -*-
"""
Event and settings stores.

Each store owns its records in memory and writes the full blob through to the
storage backend after every mutation. A failed write is logged and remembered
on `persistence_error`; the in-memory state stays authoritative and the next
mutation tries to persist again.
"""
from __future__ import annotations

import logging
import typing as t
import uuid
from dataclasses import replace

from .errors import NotFoundError, PersistenceError, ValidationError
from .models import DefaultView, Event, EventDraft, Settings, normalize_reminders, parse_instant
from .schemas import decode_events, decode_settings, encode_events, encode_settings
from .storage import EVENTS_KEY, SETTINGS_KEY, KeyValueStorage

logger = logging.getLogger(__name__)


def _new_event_id() -> str:
    return f"event-{uuid.uuid4().hex}"


def _detached(event: Event) -> Event:
    # Records never share their lists with callers
    return replace(event, attendees=list(event.attendees), reminders=list(event.reminders))


def _read_blob(storage: KeyValueStorage, key: str) -> t.Optional[str]:
    try:
        return storage.get(key)
    except PersistenceError as e:
        logger.warning("Could not read %r from storage, using defaults: %s", key, e)
        return None


class EventStore:
    """Single source of truth for the event list."""

    def __init__(
            self,
            storage: KeyValueStorage,
            events: t.Optional[t.Iterable[Event]] = None,
            id_factory: t.Callable[[], str] = _new_event_id,
    ) -> None:
        self._storage = storage
        self._events: list[Event] = [_detached(event) for event in events or []]
        self._id_factory = id_factory
        self.persistence_error: t.Optional[PersistenceError] = None

    @classmethod
    def load(
            cls,
            storage: KeyValueStorage,
            seed: t.Callable[[], list[Event]] = list,
    ) -> "EventStore":
        """Hydrates a store from storage, falling back to `seed()` when nothing usable is stored.

        :param storage: Backend holding the events blob.
        :param seed: Factory for the initial events when the blob is absent or corrupt.
        :return: A ready EventStore.
        """
        events = decode_events(_read_blob(storage, EVENTS_KEY))
        if events is None:
            events = seed()
            logger.info("Seeded event store with %d event(s)", len(events))
        else:
            logger.info("Loaded %d event(s) from storage", len(events))
        return cls(storage, events)

    @property
    def events(self) -> list[Event]:
        """Snapshot of the current event list, in insertion order."""
        return [_detached(event) for event in self._events]

    def __len__(self) -> int:
        return len(self._events)

    def _index(self, event_id: str) -> int:
        for idx, event in enumerate(self._events):
            if event.id == event_id:
                return idx
        raise NotFoundError(f"Event {event_id!r} not found")

    def get(self, event_id: str) -> Event:
        return _detached(self._events[self._index(event_id)])

    def create(self, draft: EventDraft, acting_user: str) -> Event:
        """Creates an event organized by `acting_user`, who attends it from the start.

        :raises ValidationError: If the title is blank or the date does not parse.
        """
        event = Event(
            id=self._id_factory(),
            title=draft.title.strip() if isinstance(draft.title, str) else draft.title,
            date=parse_instant(draft.date),
            created_by=acting_user,
            description=draft.description,
            location=draft.location,
            attendees=[acting_user],
            reminders=normalize_reminders(draft.reminders),
        )
        self._events = [*self._events, event]
        self._persist()
        return _detached(event)

    def update(self, event: Event) -> Event:
        """Replaces the stored event with the same id.

        The organizer is fixed at creation and cannot be replaced.

        :raises NotFoundError: If no event has that id.
        :raises ValidationError: If `event` names a different organizer.
        """
        idx = self._index(event.id)
        stored = self._events[idx]
        if event.created_by != stored.created_by:
            raise ValidationError(
                f"Event {event.id!r} is organized by {stored.created_by!r}; the organizer cannot be changed"
            )
        events = list(self._events)
        events[idx] = _detached(event)
        self._events = events
        self._persist()
        return _detached(events[idx])

    def delete(self, event_id: str) -> None:
        """Removes an event permanently.

        :raises NotFoundError: If no event has that id.
        """
        self._index(event_id)
        self._events = [event for event in self._events if event.id != event_id]
        self._persist()

    def toggle_attendance(self, event_id: str, user_id: str) -> Event:
        """Adds `user_id` to the attendees, or removes it if already attending."""
        event = self.get(event_id)
        if event.is_attending(user_id):
            attendees = [a for a in event.attendees if a != user_id]
        else:
            attendees = [*event.attendees, user_id]
        return self.update(replace(event, attendees=attendees))

    def toggle_reminder(self, event_id: str, days: int) -> Event:
        """Adds the `days` reminder offset, or removes it if already set."""
        event = self.get(event_id)
        normalize_reminders([days])
        if event.has_reminder(days):
            reminders = [d for d in event.reminders if d != days]
        else:
            reminders = [*event.reminders, days]
        return self.update(replace(event, reminders=reminders))

    def _persist(self) -> None:
        try:
            self._storage.set(EVENTS_KEY, encode_events(self._events))
        except PersistenceError as e:
            logger.error("Failed to persist %d event(s), keeping in-memory state: %s", len(self._events), e)
            self.persistence_error = e
        else:
            self.persistence_error = None


class SettingsStore:
    """Holds the current Settings and persists every change."""

    def __init__(self, storage: KeyValueStorage, settings: t.Optional[Settings] = None) -> None:
        self._storage = storage
        self._settings = settings or Settings()
        self.persistence_error: t.Optional[PersistenceError] = None

    @classmethod
    def load(cls, storage: KeyValueStorage) -> "SettingsStore":
        settings = decode_settings(_read_blob(storage, SETTINGS_KEY))
        return cls(storage, settings)

    @property
    def settings(self) -> Settings:
        return replace(self._settings, default_reminder_days=list(self._settings.default_reminder_days))

    def set_dark_mode(self, enabled: bool) -> Settings:
        return self._apply(replace(self._settings, dark_mode=enabled))

    def set_default_view(self, view: DefaultView) -> Settings:
        return self._apply(replace(self._settings, default_view=view))

    def set_notifications_enabled(self, enabled: bool) -> Settings:
        return self._apply(replace(self._settings, notifications_enabled=enabled))

    def toggle_default_reminder(self, days: int) -> Settings:
        current = self._settings.default_reminder_days
        normalize_reminders([days])
        if days in current:
            reminder_days = [d for d in current if d != days]
        else:
            reminder_days = [*current, days]
        return self._apply(replace(self._settings, default_reminder_days=reminder_days))

    def _apply(self, settings: Settings) -> Settings:
        self._settings = settings
        try:
            self._storage.set(SETTINGS_KEY, encode_settings(settings))
        except PersistenceError as e:
            logger.error("Failed to persist settings, keeping in-memory state: %s", e)
            self.persistence_error = e
        else:
            self.persistence_error = None
        return self.settings
