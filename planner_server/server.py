# -*- coding: utf-8 -*-
import io
import logging
import typing as t
from datetime import date, datetime, timezone, tzinfo
from dataclasses import replace

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from rich.console import Console
from rich.table import Table

from planner_server import config
from planner_server.context import PlannerContext, create_context
from planner_server.errors import PlannerError, ValidationError
from planner_server.models import DueReminder, Event, EventDraft, Settings, User, normalize_reminders, parse_instant
from planner_server.queries import (days_in_month_grid, due_reminders, events_on_day, sorted_events,
                                    upcoming_events)
from planner_server.storage import JsonFileStorage, KeyValueStorage, MemoryStorage

logger = logging.getLogger(__name__)

WEEKDAY_HEADERS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def _plural_days(days: int) -> str:
    return f"{days} day{'s' if days > 1 else ''}"


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except (ValueError, AttributeError):
        raise ValidationError(f"Invalid day: {value!r} is not a YYYY-MM-DD date")


# -----------------------------
# Tool implementations
# -----------------------------

def _create_event(
        context: PlannerContext,
        title: str,
        date: str,
        description: str = "",
        location: str = "",
        reminders: t.Optional[list[int]] = None,
) -> Event:
    """Creates an event organized by the current user.

    When `reminders` is omitted the default reminder days from settings apply.
    """
    if reminders is None:
        reminders = context.settings.settings.default_reminder_days
    draft = EventDraft(
        title=title,
        date=date,
        description=description,
        location=location,
        reminders=list(reminders),
    )
    event = context.events.create(draft, acting_user=context.session.current_user.id)
    logger.info("Created event %s (%s)", event.id, event.title)
    return event


def _update_event(
        context: PlannerContext,
        event_id: str,
        title: t.Optional[str] = None,
        date: t.Optional[str] = None,
        description: t.Optional[str] = None,
        location: t.Optional[str] = None,
        reminders: t.Optional[list[int]] = None,
) -> Event:
    """Edits an event, carrying forward every field that is not given."""
    current = context.events.get(event_id)
    changes: dict[str, t.Any] = {}
    if title is not None:
        changes["title"] = title.strip()
    if date is not None:
        changes["date"] = parse_instant(date)
    if description is not None:
        changes["description"] = description
    if location is not None:
        changes["location"] = location
    if reminders is not None:
        changes["reminders"] = normalize_reminders(reminders)
    return context.events.update(replace(current, **changes))


def _delete_event(context: PlannerContext, event_id: str) -> str:
    event = context.events.get(event_id)
    context.events.delete(event_id)
    logger.info("Deleted event %s (%s)", event.id, event.title)
    return f"Event \"{event.title}\" deleted successfully"


def _toggle_rsvp(context: PlannerContext, event_id: str) -> str:
    user = context.session.current_user
    event = context.events.toggle_attendance(event_id, user.id)
    if event.is_attending(user.id):
        return "You're attending the event!"
    return "You've left the event"


def _toggle_event_reminder(context: PlannerContext, event_id: str, days: int) -> str:
    event = context.events.toggle_reminder(event_id, days)
    action = "set" if event.has_reminder(days) else "removed"
    return f"Reminder {action} for {_plural_days(days)} before the event"


def _check_reminders(context: PlannerContext, now: datetime, tz: t.Optional[tzinfo] = None) -> list[str]:
    """Returns reminder messages not yet announced today.

    Nothing is announced while notifications are disabled in settings.
    """
    if not context.settings.settings.notifications_enabled:
        return []
    due = due_reminders(context.events.events, now)
    fresh = context.unannounced(due, today=now.astimezone(tz).date())
    return [format_reminder_message(reminder) for reminder in fresh]


def _update_settings(
        context: PlannerContext,
        dark_mode: t.Optional[bool] = None,
        default_view: t.Optional[str] = None,
        notifications_enabled: t.Optional[bool] = None,
) -> Settings:
    store = context.settings
    if dark_mode is not None:
        store.set_dark_mode(dark_mode)
    if default_view is not None:
        store.set_default_view(default_view)
    if notifications_enabled is not None:
        store.set_notifications_enabled(notifications_enabled)
    return store.settings


# -----------------------------
# Text views
# -----------------------------

def format_reminder_message(reminder: DueReminder) -> str:
    return f"Reminder: \"{reminder.event.title}\" is in {_plural_days(reminder.days_until)}!"


def _format_datetime(instant: datetime, tz: t.Optional[tzinfo] = None) -> str:
    """Formats an instant into a concise readable format.

    :param instant: Aware datetime.
    :param tz: Display time zone, local time when omitted.
    :return: Concise datetime string (e.g., 'Mon 1/15 2:30 PM').
    """
    return instant.astimezone(tz).strftime("%a %-m/%-d %-I:%M %p")


def format_events(
        events: t.Sequence[Event],
        context: PlannerContext,
        heading: str = "EVENTS",
        tz: t.Optional[tzinfo] = None,
) -> str:
    """Formats events as a clean table with attendance for the current user."""
    if not events:
        return "📅 No events found."

    current_user = context.session.current_user.id
    lines = []
    lines.append(f"📅 {heading}")
    lines.append("=" * 100)
    lines.append(f"{'#':<4} {'Title':<30} {'When':<18} {'Location':<22} {'Going':<6} {'Host':<14}")
    lines.append("-" * 100)

    for idx, event in enumerate(events, 1):
        title = event.title[:29] if len(event.title) > 29 else event.title
        location = event.location[:21] if event.location and len(event.location) > 21 else (event.location or "—")
        going = "✓" if event.is_attending(current_user) else ""
        host = context.session.get_user(event.created_by).name[:13]
        lines.append(
            f"{idx:<4} {title:<30} {_format_datetime(event.date, tz):<18} "
            f"{location:<22} {going:<6} {host:<14}"
        )

    lines.append("=" * 100)
    lines.append(f"Total: {len(events)} event(s)")
    return "\n".join(lines)


def format_month_calendar(
        events: t.Sequence[Event],
        anchor: date,
        today: t.Optional[date] = None,
        tz: t.Optional[tzinfo] = None,
) -> str:
    """Renders the month containing `anchor` as a Sunday-first grid.

    Each day shows at most two event titles and a "+N more" line beyond that.
    """
    month = days_in_month_grid(anchor)
    table = Table(title=month.first.strftime("%B %Y"), show_header=True, header_style="bold", show_lines=True)
    for header in WEEKDAY_HEADERS:
        table.add_column(header, width=12, overflow="ellipsis", no_wrap=False)

    # date.weekday() is Monday=0, the grid starts on Sunday
    week: list[str] = [""] * ((month.first.weekday() + 1) % 7)
    for day in month:
        day_events = events_on_day(events, day, tz)
        label = f"{day.day}"
        if day == today:
            label += " (today)"
        cell = [label]
        cell.extend(event.title for event in day_events[:2])
        if len(day_events) > 2:
            cell.append(f"+{len(day_events) - 2} more")
        week.append("\n".join(cell))
        if len(week) == 7:
            table.add_row(*week)
            week = []
    if week:
        week.extend([""] * (7 - len(week)))
        table.add_row(*week)

    console = Console(record=True, width=7 * 15 + 2, file=io.StringIO(), color_system=None)
    console.print(table)
    return console.export_text()


def format_settings(settings: Settings, current_user: User) -> str:
    lines = []
    lines.append("⚙️ SETTINGS")
    lines.append("=" * 40)
    lines.append(f"{'Current user':<24} {current_user.name}")
    lines.append(f"{'Dark mode':<24} {'on' if settings.dark_mode else 'off'}")
    lines.append(f"{'Default view':<24} {settings.default_view}")
    reminder_days = ", ".join(str(d) for d in settings.default_reminder_days) or "none"
    lines.append(f"{'Default reminders':<24} {reminder_days}")
    lines.append(f"{'Notifications':<24} {'on' if settings.notifications_enabled else 'off'}")
    return "\n".join(lines)


# -----------------------------
# MCP server
# -----------------------------

def _tool_call(fn: t.Callable[..., t.Any], *args: t.Any, **kwargs: t.Any) -> t.Any:
    try:
        return fn(*args, **kwargs)
    except PlannerError as e:
        raise ToolError(str(e)) from e


def build_server(context: PlannerContext) -> FastMCP:
    """Creates a FastMCP server whose tools act on `context`."""
    mcp = FastMCP("GroupPlannerServer")

    @mcp.tool()
    def create_event(
            title: str,
            date: str,
            description: str = "",
            location: str = "",
            reminders: t.Optional[list[int]] = None,
    ) -> Event:
        """Creates an event organized by the current user, who attends it.

        :param title: Title of the event.
        :param date: Date or datetime in ISO format.
        :param description: Description of the event (optional).
        :param location: Location of the event (optional).
        :param reminders: Days before the event to remind (defaults from settings).
        :return: The created Event.
        """
        return _tool_call(_create_event, context, title, date, description, location, reminders)

    @mcp.tool()
    def update_event(
            event_id: str,
            title: t.Optional[str] = None,
            date: t.Optional[str] = None,
            description: t.Optional[str] = None,
            location: t.Optional[str] = None,
            reminders: t.Optional[list[int]] = None,
    ) -> Event:
        """Edits an event; fields left out keep their current value."""
        return _tool_call(_update_event, context, event_id, title, date, description, location, reminders)

    @mcp.tool()
    def delete_event(event_id: str) -> str:
        """Deletes an event permanently."""
        return _tool_call(_delete_event, context, event_id)

    @mcp.tool()
    def toggle_rsvp(event_id: str) -> str:
        """Joins or leaves an event as the current user."""
        return _tool_call(_toggle_rsvp, context, event_id)

    @mcp.tool()
    def toggle_event_reminder(event_id: str, days: int) -> str:
        """Sets or removes a reminder `days` before the event."""
        return _tool_call(_toggle_event_reminder, context, event_id, days)

    @mcp.tool()
    def list_events() -> list[Event]:
        """Lists all events ordered by date."""
        return sorted_events(context.events.events)

    @mcp.tool()
    def list_upcoming_events(limit: t.Optional[int] = None) -> list[Event]:
        """Lists events that have not started yet, earliest first."""
        return upcoming_events(context.events.events, datetime.now(timezone.utc), limit)

    @mcp.tool()
    def list_events_on_day(day: str) -> list[Event]:
        """Lists events on a calendar day given as YYYY-MM-DD (local time)."""
        return events_on_day(context.events.events, _tool_call(_parse_day, day))

    @mcp.tool()
    def check_reminders() -> list[str]:
        """Returns reminder messages due today that have not been shown yet."""
        return _tool_call(_check_reminders, context, datetime.now(timezone.utc))

    @mcp.tool()
    def show_month_calendar(month: t.Optional[str] = None) -> str:
        """Displays a month as a calendar grid.

        :param month: Any YYYY-MM-DD day inside the month; the current month when omitted.
        :return: The month grid as text.
        """
        today = datetime.now().date()
        anchor = _tool_call(_parse_day, month) if month else today
        return format_month_calendar(context.events.events, anchor, today=today)

    @mcp.tool()
    def show_upcoming_events() -> str:
        """Displays the next few upcoming events as a table."""
        events = upcoming_events(context.events.events, datetime.now(timezone.utc), config.PLANNER_UPCOMING_LIMIT)
        return format_events(events, context, heading="UPCOMING EVENTS")

    @mcp.tool()
    def get_settings() -> str:
        """Displays the current settings."""
        return format_settings(context.settings.settings, context.session.current_user)

    @mcp.tool()
    def update_settings(
            dark_mode: t.Optional[bool] = None,
            default_view: t.Optional[str] = None,
            notifications_enabled: t.Optional[bool] = None,
    ) -> Settings:
        """Changes display and notification settings; omitted values stay as they are."""
        return _tool_call(_update_settings, context, dark_mode, default_view, notifications_enabled)

    @mcp.tool()
    def toggle_default_reminder(days: int) -> Settings:
        """Adds or removes a default reminder offset for new events."""
        return _tool_call(context.settings.toggle_default_reminder, days)

    @mcp.tool()
    def list_users() -> list[User]:
        """Lists the user roster."""
        return list(context.session.users)

    @mcp.tool()
    def switch_user(user_id: str) -> User:
        """Makes another roster member the current user."""
        return _tool_call(context.session.switch_user, user_id)

    return mcp


def _build_storage() -> KeyValueStorage:
    if config.PLANNER_STORAGE == "memory":
        return MemoryStorage()
    return JsonFileStorage(config.PLANNER_DATA_DIR)


def main() -> None:
    logging.basicConfig(level=config.PLANNER_LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
    context = create_context(_build_storage(), now=datetime.now(timezone.utc))
    build_server(context).run()


if __name__ == "__main__":
    main()
