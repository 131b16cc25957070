# -*- coding: utf-8 -*-
"""Demo roster and sample events used when nothing has been stored yet."""
from __future__ import annotations

from datetime import datetime, timedelta

from .models import Event, User


def _avatar(name: str, background: str) -> str:
    return f"https://ui-avatars.com/api/?name={name.replace(' ', '+')}&background={background}&color=fff"


DEMO_USERS: tuple[User, ...] = (
    User(id="user1", name="You", avatar=_avatar("You", "6366f1")),
    User(id="user2", name="Alex Smith", avatar=_avatar("Alex Smith", "22c55e")),
    User(id="user3", name="Jamie Lee", avatar=_avatar("Jamie Lee", "ef4444")),
    User(id="user4", name="Taylor Kim", avatar=_avatar("Taylor Kim", "f59e0b")),
    User(id="user5", name="Jordan Patel", avatar=_avatar("Jordan Patel", "8b5cf6")),
)


def sample_events(now: datetime) -> list[Event]:
    """Builds the demo events, placed relative to `now`."""
    return [
        Event(
            id="event1",
            title="Team Lunch",
            description="Monthly team lunch at the Italian restaurant",
            date=now + timedelta(days=3),
            location="Pasta Palace, Downtown",
            created_by="user2",
            attendees=["user1", "user2", "user3"],
            reminders=[1, 3],
        ),
        Event(
            id="event2",
            title="Project Planning",
            description="Quarterly planning session for Q3",
            date=now + timedelta(days=7),
            location="Conference Room A",
            created_by="user1",
            attendees=["user1", "user4", "user5"],
            reminders=[1],
        ),
        Event(
            id="event3",
            title="Movie Night",
            description="Watching the new sci-fi movie at Cinema City",
            date=now + timedelta(days=10),
            location="Cinema City, Mall",
            created_by="user3",
            attendees=["user3", "user5"],
            reminders=[2],
        ),
        Event(
            id="event4",
            title="Birthday Party",
            description="Celebrating Alex's birthday",
            date=now - timedelta(days=2),
            location="Rooftop Bar",
            created_by="user4",
            attendees=["user1", "user2", "user3", "user4", "user5"],
            reminders=[1, 7],
        ),
    ]
