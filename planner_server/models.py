"""
Data models for the group planner.

This module contains the dataclasses used to represent events, users and
settings inside the planner. Every record validates itself on construction,
so a value that exists is a value that honours its invariants.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import typing as t

from .errors import ValidationError


# Type literals for commonly used values
DefaultView = t.Literal["calendar", "list"]
DEFAULT_VIEWS: tuple[str, ...] = ("calendar", "list")

# Reminder offsets offered when creating or editing an event
REMINDER_CHOICES: tuple[int, ...] = (1, 3, 5, 7)


def parse_instant(value: datetime | str) -> datetime:
    """Parses an ISO-8601 string or datetime into an aware UTC instant.

    Naive values are read as process-local time.

    :param value: ISO-8601 string (a trailing 'Z' is accepted) or datetime.
    :return: Timezone-aware datetime in UTC.
    :raises ValidationError: If the value is not a valid instant.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r} is not an ISO-8601 date or datetime")
    else:
        raise ValidationError(f"Invalid date: expected ISO-8601 text, got {type(value).__name__}")

    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(timezone.utc)


def normalize_reminders(values: t.Iterable[int]) -> list[int]:
    """Collapses reminder offsets into a sorted list of unique positive days."""
    days: set[int] = set()
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"Reminder offset must be a whole number of days, got {value!r}")
        if value <= 0:
            raise ValidationError(f"Reminder offset must be at least 1 day, got {value}")
        days.add(value)
    return sorted(days)


def _unique_in_order(values: t.Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            out.append(value)
    return out


@dataclass
class User:
    """A member of the demo roster."""
    id: str
    name: str
    avatar: str = ""


@dataclass
class EventDraft:
    """User input for a new event, before an id and organizer are assigned."""
    title: str
    date: datetime | str
    description: str = ""
    location: str = ""
    reminders: list[int] = field(default_factory=list)


@dataclass
class Event:
    """
    A planned occurrence with an organizer, attendees and reminder offsets.

    `date` is always stored as an aware UTC instant. `attendees` keeps
    insertion order with duplicates removed; `reminders` is a sorted set of
    positive day offsets.
    """
    id: str
    title: str
    date: datetime
    created_by: str
    description: str = ""
    location: str = ""
    attendees: list[str] = field(default_factory=list)
    reminders: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("Event id must not be empty")
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValidationError("Please enter an event title")
        if not self.created_by:
            raise ValidationError("Event organizer must not be empty")
        self.date = parse_instant(self.date)
        self.description = self.description or ""
        self.location = self.location or ""
        self.attendees = _unique_in_order(self.attendees)
        self.reminders = normalize_reminders(self.reminders)

    def is_attending(self, user_id: str) -> bool:
        return user_id in self.attendees

    def has_reminder(self, days: int) -> bool:
        return days in self.reminders


@dataclass
class DueReminder:
    """An event whose reminder offset matches the days left until it starts."""
    event: Event
    days_until: int


@dataclass
class Settings:
    """Process-wide display and reminder preferences."""
    dark_mode: bool = False
    default_view: DefaultView = "calendar"
    default_reminder_days: list[int] = field(default_factory=lambda: [1, 3])
    notifications_enabled: bool = True

    def __post_init__(self) -> None:
        if self.default_view not in DEFAULT_VIEWS:
            raise ValidationError(
                f"Default view must be one of {', '.join(DEFAULT_VIEWS)}, got {self.default_view!r}"
            )
        self.dark_mode = bool(self.dark_mode)
        self.notifications_enabled = bool(self.notifications_enabled)
        self.default_reminder_days = normalize_reminders(self.default_reminder_days)
