# -*- coding: utf-8 -*-
"""
Calendar queries over a snapshot of events.

Every function here is pure: it reads the events it is given and the reference
instant or day it is passed, and never consults the system clock. Calendar-day
comparisons project instants into one time zone, the process-local one unless
`tz` is given.
"""
from __future__ import annotations

import math
import typing as t
from datetime import date, datetime, timedelta, tzinfo

from .models import DueReminder, Event, parse_instant

SECONDS_PER_DAY = 24 * 60 * 60


def day_of(instant: datetime, tz: t.Optional[tzinfo] = None) -> date:
    """Projects an instant onto the calendar day it falls on in `tz` (local time by default)."""
    return instant.astimezone(tz).date()


def _calendar_day(day: date, tz: t.Optional[tzinfo]) -> date:
    """Reduces a datetime to its calendar day in `tz`; plain dates pass through."""
    if isinstance(day, datetime):
        return day.astimezone(tz).date() if day.tzinfo is not None else day.date()
    return day


def events_on_day(events: t.Iterable[Event], day: date, tz: t.Optional[tzinfo] = None) -> list[Event]:
    """Returns the events whose date falls on `day`, keeping list order."""
    day = _calendar_day(day, tz)
    return [event for event in events if day_of(event.date, tz) == day]


def has_events_on_day(events: t.Iterable[Event], day: date, tz: t.Optional[tzinfo] = None) -> bool:
    day = _calendar_day(day, tz)
    return any(day_of(event.date, tz) == day for event in events)


def sorted_events(events: t.Iterable[Event]) -> list[Event]:
    """All events ordered by date; events at the same instant keep list order."""
    return sorted(events, key=lambda event: event.date)


def upcoming_events(
        events: t.Iterable[Event],
        now: datetime | str,
        limit: t.Optional[int] = None,
) -> list[Event]:
    """Returns events at or after `now`, earliest first.

    :param events: Event snapshot to filter.
    :param now: Reference instant.
    :param limit: Keep only the first `limit` events when given.
    :return: Events sorted ascending by date (stable for ties).
    """
    now = parse_instant(now)
    upcoming = sorted_events(event for event in events if event.date >= now)
    if limit is not None:
        return upcoming[:max(limit, 0)]
    return upcoming


def days_until(event: Event, now: datetime) -> int:
    """Whole days left until the event, rounded up."""
    return math.ceil((event.date - now).total_seconds() / SECONDS_PER_DAY)


def due_reminders(events: t.Iterable[Event], now: datetime | str) -> list[DueReminder]:
    """Finds events whose remaining days match one of their reminder offsets.

    This is a snapshot check: calling it twice on the same day reports the
    same reminders twice.
    """
    now = parse_instant(now)
    due: list[DueReminder] = []
    for event in events:
        remaining = days_until(event, now)
        if remaining > 0 and remaining in event.reminders:
            due.append(DueReminder(event=event, days_until=remaining))
    return due


def _month_start(anchor: date) -> date:
    return date(anchor.year, anchor.month, 1)


def next_month(anchor: date) -> date:
    """First day of the month after the one containing `anchor`."""
    start = _month_start(anchor)
    if start.month == 12:
        return date(start.year + 1, 1, 1)
    return date(start.year, start.month + 1, 1)


def previous_month(anchor: date) -> date:
    """First day of the month before the one containing `anchor`."""
    start = _month_start(anchor)
    if start.month == 1:
        return date(start.year - 1, 12, 1)
    return date(start.year, start.month - 1, 1)


class MonthDays:
    """Every day of one month in ascending order.

    Iterating creates a fresh generator, so the sequence can be walked any
    number of times.
    """

    def __init__(self, anchor: date) -> None:
        if isinstance(anchor, datetime):
            anchor = anchor.date()
        self.first = _month_start(anchor)
        self.last = next_month(anchor) - timedelta(days=1)

    def __iter__(self) -> t.Iterator[date]:
        day = self.first
        while day <= self.last:
            yield day
            day += timedelta(days=1)

    def __len__(self) -> int:
        return self.last.day

    def __contains__(self, day: object) -> bool:
        if isinstance(day, datetime) or not isinstance(day, date):
            return False
        return self.first <= day <= self.last

    def __repr__(self) -> str:
        return f"MonthDays({self.first.isoformat()}..{self.last.isoformat()})"


def days_in_month_grid(anchor: date) -> MonthDays:
    """Days from the first to the last of the month containing `anchor`."""
    return MonthDays(anchor)
