"""Schedule sync - one run of the fetch, group, render, publish workflow.

Steps:
1. Calculate the Monday-to-Monday window for "now"
2. Fetch the event color table and the window's events
3. Group events into day buckets
4. Render and publish the print artifact, then the display artifact

Any failure propagates to the caller. The two artifacts are published
independently: if the display step fails, the print artifact already
published in this run stays in place.
"""

import logging
from datetime import datetime
from typing import Any, Mapping
from zoneinfo import ZoneInfo

from config.settings import Settings
from gcalsync.google_client import fetch_colors, fetch_events
from gcalsync.grouper import DayView, group_events
from gcalsync.publisher import publish
from gcalsync.renderer import ArtifactRenderer
from gcalsync.week import TimeWindow, calculate_week_window

logger = logging.getLogger(__name__)


def current_time(timezone: str = "") -> datetime:
    """Return "now" in the given zone, or naive system local time if none is set.

    A naive value lets the week window resolve each midnight through the
    system zone rules instead of freezing today's UTC offset.
    """
    if timezone:
        return datetime.now(ZoneInfo(timezone))
    return datetime.now()


def store_schedule(
    events: list[dict[str, Any]],
    colors: Mapping[str, Mapping[str, str]],
    window: TimeWindow,
    renderer: ArtifactRenderer,
    print_path: str,
    display_path: str,
    locale: str = "ru",
) -> list[DayView]:
    """Group events and publish both artifacts.

    Returns:
        The grouped week that was rendered.
    """
    week = group_events(events, colors, filter_time=window.start, locale=locale)
    logger.info("Grouped %d events into %d days", sum(len(d.events) for d in week), len(week))

    publish(renderer.render("print", week), print_path)
    publish(renderer.render("display", week), display_path)

    return week


def sync_schedule(
    service: Any,
    settings: Settings,
    now: datetime | None = None,
) -> list[DayView] | None:
    """Fetch the current week's events and publish the rendered artifacts.

    Args:
        service: Calendar API client.
        settings: Loaded application settings.
        now: Moment to compute the week from; defaults to the current time.

    Returns:
        The published week, which is empty when every fetched event was
        filtered out. None if the query returned no events, in which case
        nothing is published.
    """
    if now is None:
        now = current_time(settings.user_timezone)
    window = calculate_week_window(now)
    logger.info("Syncing week %s to %s", window.time_min, window.time_max)

    colors = fetch_colors(service)
    events = fetch_events(service, settings.calendar_id, window, settings.user_timezone)

    if not events:
        logger.info("No calendar events found.")
        return None

    renderer = ArtifactRenderer(
        settings.template_dir,
        display_template=settings.display_template,
        print_template=settings.print_template,
    )
    return store_schedule(
        events,
        colors,
        window,
        renderer,
        print_path=settings.print_output,
        display_path=settings.display_output,
        locale=settings.day_locale,
    )
