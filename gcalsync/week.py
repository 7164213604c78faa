"""Week window calculation.

The window runs from Monday 00:00 local time to the following Monday 00:00.
Both boundaries are passed to the Calendar API as RFC 3339 strings.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo


@dataclass(frozen=True)
class TimeWindow:
    """Monday-to-Monday span events are filtered and grouped into."""

    start: datetime
    end: datetime

    @property
    def time_min(self) -> str:
        return self.start.isoformat()

    @property
    def time_max(self) -> str:
        return self.end.isoformat()


def calculate_week_window(now: datetime) -> TimeWindow:
    """Calculate the current week's window for a given moment.

    The Monday is resolved from the calendar date of ``now`` so the same day
    always maps to the same Monday regardless of the time of day.

    Args:
        now: The current time. Naive values are taken as system local time,
            and each midnight gets the offset the system zone has on that day.

    Returns:
        TimeWindow starting at Monday midnight in ``now``'s timezone.
    """
    # Monday is weekday 0, so Sunday goes back 6 days
    monday = now.date() - timedelta(days=now.weekday())
    next_monday = monday + timedelta(days=7)

    return TimeWindow(
        start=_midnight(monday, now.tzinfo),
        end=_midnight(next_monday, now.tzinfo),
    )


def _midnight(day: date, zone: tzinfo | None) -> datetime:
    """Local midnight of a day, aware."""
    if zone is None:
        return datetime.combine(day, time()).astimezone()
    return datetime.combine(day, time(), tzinfo=zone)
