"""Weekly rotation of a list's people, driven by its Monday anchor."""

from __future__ import annotations

import logging
from datetime import date, datetime

from ..records import RotationRecord
from .time_utils import add_weeks, monday_for, utc_date

_LOGGER = logging.getLogger(__name__)


def elapsed_weeks(anchor: date, now: datetime | date) -> int:
    """Whole weeks between the anchor and the Monday of the current week.

    Anchors in the future count as zero weeks.
    """

    elapsed_days = (monday_for(utc_date(now)) - anchor).days
    if elapsed_days < 0:
        _LOGGER.warning("Rotation anchor %s is after %s, treating as current", anchor, now)
        return 0
    return elapsed_days // 7


def rotate_people(people: tuple[str, ...], steps: int) -> tuple[str, ...]:
    """Rotate left by ``steps``: the head moves to the tail once per step."""

    if len(people) < 2:
        return people
    offset = steps % len(people)
    return people[offset:] + people[:offset]


def reconcile(record: RotationRecord, now: datetime | date) -> RotationRecord:
    """Bring a record's rotation up to date with ``now``.

    Returns ``record`` itself when no week has passed, otherwise a new record
    with the people rotated once per elapsed week and the anchor advanced by
    the same number of weeks. Callers persist only when a new record comes
    back.
    """

    weeks = elapsed_weeks(record.last_rotation_anchor, now)
    if weeks == 0:
        return record

    updated = record.model_copy(
        update={
            "last_rotation_anchor": add_weeks(record.last_rotation_anchor, weeks),
            "ordered_people": rotate_people(record.ordered_people, weeks),
        }
    )
    _LOGGER.info(
        "Rotated list %s by %s week(s), anchor %s -> %s",
        record.identifier,
        weeks,
        record.last_rotation_anchor,
        updated.last_rotation_anchor,
    )
    return updated


def current_person(record: RotationRecord) -> str | None:
    if not record.ordered_people:
        return None
    return record.ordered_people[0]


def next_rotation(record: RotationRecord) -> date:
    return add_weeks(record.last_rotation_anchor, 1)
