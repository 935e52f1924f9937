"""Rotation list records and their persisted JSON encoding."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .services.time_utils import monday_for

_LOGGER = logging.getLogger(__name__)

_ISO_DAY_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class InvalidRecordError(ValueError):
    """Stored payload cannot be decoded into a rotation record."""


class InvalidAnchorError(InvalidRecordError):
    """Stored rotation anchor is malformed."""


class RotationRecord(BaseModel):
    """One named rotation queue anchored to the Monday of a week."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    display_name: str
    last_rotation_anchor: date
    ordered_people: tuple[str, ...] = ()


class CalendarDateAnchor(BaseModel):
    kind: Literal["calendar_date"] = "calendar_date"
    day: date


class LegacyInstantAnchor(BaseModel):
    """Anchor written by old releases as epoch milliseconds.

    Those releases stored local midnight of a Monday, but the writer's
    timezone is unknown. The instant is read on the UTC calendar, so a value
    written east of UTC lands on the preceding Sunday and is then pulled back
    to that Sunday's Monday.
    """

    kind: Literal["legacy_instant"] = "legacy_instant"
    epoch_ms: float

    def utc_day(self) -> date:
        try:
            return (_EPOCH + timedelta(milliseconds=self.epoch_ms)).date()
        except (OverflowError, ValueError) as exc:
            raise InvalidAnchorError(f"Legacy anchor {self.epoch_ms!r} is out of range") from exc


StoredAnchor = Union[CalendarDateAnchor, LegacyInstantAnchor]


def parse_anchor(raw: Any) -> StoredAnchor:
    if isinstance(raw, bool):
        raise InvalidAnchorError(f"Unsupported anchor value {raw!r}")
    if isinstance(raw, (int, float)):
        try:
            return LegacyInstantAnchor(epoch_ms=raw)
        except ValidationError as exc:
            raise InvalidAnchorError(f"Legacy anchor {raw!r} is not a usable number") from exc
    if isinstance(raw, str):
        if not _ISO_DAY_RE.fullmatch(raw):
            raise InvalidAnchorError(f"Anchor {raw!r} is not a YYYY-MM-DD date")
        try:
            return CalendarDateAnchor(day=date.fromisoformat(raw))
        except ValueError as exc:
            raise InvalidAnchorError(f"Anchor {raw!r} is not a valid calendar date") from exc
    raise InvalidAnchorError(f"Unsupported anchor value {raw!r}")


def resolve_anchor(anchor: StoredAnchor, identifier: str = "") -> date:
    """Turn a stored anchor into the Monday it stands for."""

    if isinstance(anchor, LegacyInstantAnchor):
        day = anchor.utc_day()
        _LOGGER.warning("List %s uses a legacy timestamp anchor, read as %s", identifier, day)
    elif isinstance(anchor, CalendarDateAnchor):
        day = anchor.day
    else:
        raise InvalidAnchorError(f"Unknown anchor variant {anchor!r}")

    monday = monday_for(day)
    if monday != day:
        _LOGGER.warning("List %s anchor %s is not a Monday, using %s", identifier, day, monday)
    return monday


def decode_record(payload: Any) -> RotationRecord:
    if not isinstance(payload, dict):
        raise InvalidRecordError("Record payload must be a JSON object")

    missing = [key for key in ("id", "name", "lastRotation", "people") if key not in payload]
    if missing:
        raise InvalidRecordError(f"Record is missing field(s): {', '.join(missing)}")

    identifier = payload["id"]
    name = payload["name"]
    people = payload["people"]
    if not isinstance(identifier, str) or not isinstance(name, str):
        raise InvalidRecordError("Record id and name must be strings")
    if not isinstance(people, list) or not all(isinstance(person, str) for person in people):
        raise InvalidRecordError(f"Record {identifier} people must be a list of strings")

    anchor = resolve_anchor(parse_anchor(payload["lastRotation"]), identifier)
    return RotationRecord(
        identifier=identifier,
        display_name=name,
        last_rotation_anchor=anchor,
        ordered_people=tuple(people),
    )


def encode_record(record: RotationRecord) -> dict[str, Any]:
    return {
        "id": record.identifier,
        "name": record.display_name,
        "lastRotation": record.last_rotation_anchor.isoformat(),
        "people": list(record.ordered_people),
    }
