"""Date and time helper functions for weekly rotation logic.

All calendar arithmetic happens on UTC dates. Local timezone and DST of the
running process never influence which week an instant belongs to.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from pydantic import BaseModel

DISPLAY_DATE_FORMAT = "%d.%m.%Y"


class WeekInfo(BaseModel):
    """ISO week metadata for display."""

    week_number: int
    week_start: date
    week_end: date
    formatted_start: str
    formatted_end: str


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def utc_date(moment: datetime | date) -> date:
    """Return the UTC calendar date of an instant.

    Naive datetimes are treated as UTC already. Plain dates pass through.
    """

    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc)
        return moment.date()
    return moment


def monday_for(day: date) -> date:
    """Return Monday date for the provided day."""

    return day - timedelta(days=day.isoweekday() - 1)


def week_start_for(moment: datetime | date) -> date:
    """Return Monday date for the provided instant."""

    return monday_for(utc_date(moment))


def add_weeks(week_start: date, weeks: int) -> date:
    return week_start + timedelta(days=weeks * 7)


def format_day(day: date) -> str:
    return day.strftime(DISPLAY_DATE_FORMAT)


def week_info_for(moment: datetime | date) -> WeekInfo:
    """Derive ISO week number and Monday-Sunday bounds for an instant.

    The last week of the calendar ends early: ``week_end`` is capped at
    ``date.max``.
    """

    day = utc_date(moment)
    week_start = monday_for(day)
    week_end = week_start + timedelta(days=6) if week_start <= date.max - timedelta(days=6) else date.max
    return WeekInfo(
        week_number=day.isocalendar()[1],
        week_start=week_start,
        week_end=week_end,
        formatted_start=format_day(week_start),
        formatted_end=format_day(week_end),
    )
