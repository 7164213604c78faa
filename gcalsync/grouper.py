"""Event Grouper - buckets a week's events into calendar days.

Takes the raw, start-ordered event list returned by the Calendar API and
builds the day/event structure the templates consume. Event captions are
HTML-escaped here so the template layer never sees raw user text.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from markupsafe import Markup, escape

from gcalsync.errors import MalformedTimestamp

logger = logging.getLogger(__name__)

# Indexed by datetime.weekday(): Monday is 0
CLASS_SUFFIXES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

DAY_NAMES: dict[str, tuple[str, ...]] = {
    "ru": ("Понедельник", "Вторник", "Среда", "Четверг", "Пятница", "Суббота", "Воскресенье"),
    "en": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
}

DAY_NAMES_SHORT: dict[str, tuple[str, ...]] = {
    "ru": ("пн", "вт", "ср", "чт", "пт", "сб", "вс"),
    "en": ("mon", "tue", "wed", "thu", "fri", "sat", "sun"),
}


@dataclass(frozen=True)
class EventView:
    """A single event as shown inside a day column."""

    time_start: str
    time_end: str
    mins_start: int
    mins_end: int
    caption: Markup
    background_color: str
    foreground_color: str


@dataclass
class DayView:
    """All events starting on one calendar day."""

    caption: str
    class_suffix: str
    day_name_short: str
    day_num: str
    weekday: int
    events: list[EventView] = field(default_factory=list)


def parse_timestamp(value: Any, field_name: str) -> datetime:
    """Parse an RFC 3339 timestamp, keeping its UTC offset.

    Raises:
        MalformedTimestamp: If the value is missing, unparseable, or has no offset.
    """
    if not isinstance(value, str) or not value:
        raise MalformedTimestamp(field_name, value)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise MalformedTimestamp(field_name, value) from e
    if parsed.tzinfo is None:
        raise MalformedTimestamp(field_name, value)
    return parsed


def make_caption(title: str) -> Markup:
    """Trim surrounding spaces from an event title and HTML-escape it."""
    return escape(title.strip(" "))


def new_day(start: datetime, locale: str) -> DayView:
    """Build an empty DayView labelled from an event's start date."""
    weekday = start.weekday()
    return DayView(
        caption=f"{DAY_NAMES[locale][weekday]} {start.day:02d}.{start.month:02d}.{start.year:04d}",
        class_suffix=CLASS_SUFFIXES[weekday],
        day_name_short=DAY_NAMES_SHORT[locale][weekday],
        day_num=f"{start.day:02d}",
        weekday=weekday,
    )


def group_events(
    events: list[dict[str, Any]],
    colors: Mapping[str, Mapping[str, str]],
    filter_time: datetime,
    locale: str = "ru",
) -> list[DayView]:
    """Group start-ordered events into per-day buckets.

    Events are expected in ascending start order (the API query uses
    ``orderBy=startTime``); they are not re-sorted. A new day bucket starts
    whenever an event's weekday differs from the previous bucket's.

    Args:
        events: Raw event resources from the Calendar API.
        colors: Event color table, colorId -> {"background", "foreground"}.
        filter_time: Events starting before this moment are dropped.
        locale: Key into the day name tables.

    Returns:
        Day buckets in first-seen order.

    Raises:
        MalformedTimestamp: If any event has a bad start or end time.
        ValueError: If the locale is unknown.
    """
    if locale not in DAY_NAMES:
        raise ValueError(f"Unknown day locale {locale!r}. Choose from: {', '.join(sorted(DAY_NAMES))}")

    week: list[DayView] = []

    for item in events:
        start = parse_timestamp(item.get("start", {}).get("dateTime"), "start time")
        end = parse_timestamp(item.get("end", {}).get("dateTime"), "end time")
        if start < filter_time:
            logger.debug("Skipping '%s': starts %s, before window", item.get("summary", ""), start)
            continue

        if not week or week[-1].weekday != start.weekday():
            week.append(new_day(start, locale))

        color = colors.get(item.get("colorId", ""), {})
        week[-1].events.append(EventView(
            time_start=f"{start.hour:02d}:{start.minute:02d}",
            time_end=f"{end.hour:02d}:{end.minute:02d}",
            mins_start=start.hour * 60 + start.minute,
            mins_end=end.hour * 60 + end.minute,
            caption=make_caption(item.get("summary", "")),
            background_color=color.get("background", ""),
            foreground_color=color.get("foreground", ""),
        ))

    return week
