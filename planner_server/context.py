# -*- coding: utf-8 -*-
"""
Explicit planner context: stores, the active user and reminder bookkeeping.

Everything the tool surface needs is reached through a PlannerContext passed
in by the caller, so several independent planners can coexist in one process
(tests build a fresh one per case).
"""
from __future__ import annotations

import typing as t
from dataclasses import dataclass, field
from datetime import date, datetime

from .errors import NotFoundError, ValidationError
from .models import DueReminder, User
from .seed import DEMO_USERS, sample_events
from .storage import KeyValueStorage
from .store import EventStore, SettingsStore


class Session:
    """The fixed user roster and which member of it is acting right now."""

    def __init__(self, users: t.Sequence[User] = DEMO_USERS, current_user_id: t.Optional[str] = None) -> None:
        if not users:
            raise ValidationError("A session needs at least one user")
        self.users: tuple[User, ...] = tuple(users)
        self.current_user = self.users[0]
        if current_user_id is not None:
            self.switch_user(current_user_id)

    def find_user(self, user_id: str) -> t.Optional[User]:
        for user in self.users:
            if user.id == user_id:
                return user
        return None

    def get_user(self, user_id: str) -> User:
        """Looks up a user for display, falling back to the first roster member."""
        return self.find_user(user_id) or self.users[0]

    def switch_user(self, user_id: str) -> User:
        user = self.find_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id!r} is not in the roster")
        self.current_user = user
        return user


@dataclass
class PlannerContext:
    """Bundle of state a planner front end operates on."""
    events: EventStore
    settings: SettingsStore
    session: Session = field(default_factory=Session)
    # (event id, days until, local day) triples already announced
    notified: set[tuple[str, int, date]] = field(default_factory=set)

    def unannounced(self, due: t.Iterable[DueReminder], today: date) -> list[DueReminder]:
        """Filters out reminders already announced today and marks the rest as announced."""
        fresh: list[DueReminder] = []
        for reminder in due:
            key = (reminder.event.id, reminder.days_until, today)
            if key in self.notified:
                continue
            self.notified.add(key)
            fresh.append(reminder)
        return fresh


def create_context(storage: KeyValueStorage, now: datetime) -> PlannerContext:
    """Hydrates a context from storage, seeding demo events placed relative to `now`.

    :param storage: Backend for the events and settings blobs.
    :param now: Reference instant for the sample events when nothing is stored.
    :return: A ready PlannerContext with the first demo user acting.
    """
    return PlannerContext(
        events=EventStore.load(storage, seed=lambda: sample_events(now)),
        settings=SettingsStore.load(storage),
        session=Session(),
    )
