# -*- coding: utf-8 -*-
"""Shared fixtures for planner tests."""
import itertools
from datetime import datetime, timezone

import pytest

from planner_server.context import PlannerContext, Session
from planner_server.models import Event
from planner_server.storage import MemoryStorage
from planner_server.store import EventStore, SettingsStore

NOW = datetime(2024, 6, 7, 12, 0, tzinfo=timezone.utc)


def make_event(event_id: str, date: datetime, **fields) -> Event:
    """Build an event with sensible defaults for the fields a test does not care about."""
    fields.setdefault("title", f"Event {event_id}")
    fields.setdefault("created_by", "user1")
    return Event(id=event_id, date=date, **fields)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> EventStore:
    counter = itertools.count(1)
    return EventStore(storage, id_factory=lambda: f"event-{next(counter)}")


@pytest.fixture
def context(storage: MemoryStorage, store: EventStore) -> PlannerContext:
    return PlannerContext(events=store, settings=SettingsStore(storage), session=Session())
