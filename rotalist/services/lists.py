"""Rotation list lifecycle and people editing."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime

from ..records import RotationRecord
from ..store import RecordStore
from .rotation import reconcile
from .time_utils import week_start_for

_LOGGER = logging.getLogger(__name__)

MOVE_DIRECTIONS = ("up", "down")


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Name must not be blank")
    return cleaned


def create_list(store: RecordStore, name: str, now: datetime | date) -> RotationRecord:
    record = RotationRecord(
        identifier=str(uuid.uuid4()),
        display_name=_clean_name(name),
        last_rotation_anchor=week_start_for(now),
        ordered_people=(),
    )
    store.save(record)
    _LOGGER.info("Created list %s (%s) anchored at %s", record.identifier, record.display_name, record.last_rotation_anchor)
    return record


def list_summaries(store: RecordStore) -> list[RotationRecord]:
    return sorted(store.list_records(), key=lambda record: (record.display_name.casefold(), record.identifier))


def load_current(store: RecordStore, identifier: str, now: datetime | date) -> RotationRecord:
    """Load a list with its rotation brought up to date, saving only on change."""

    record = store.load(identifier)
    updated = reconcile(record, now)
    if updated is not record:
        store.save(updated)
    return updated


def add_person(store: RecordStore, identifier: str, name: str) -> RotationRecord:
    record = store.load(identifier)
    person = _clean_name(name)
    if person in record.ordered_people:
        return record
    updated = record.model_copy(update={"ordered_people": record.ordered_people + (person,)})
    store.save(updated)
    return updated


def remove_person(store: RecordStore, identifier: str, index: int) -> RotationRecord:
    record = store.load(identifier)
    if not 0 <= index < len(record.ordered_people):
        return record
    people = list(record.ordered_people)
    del people[index]
    updated = record.model_copy(update={"ordered_people": tuple(people)})
    store.save(updated)
    return updated


def move_person(store: RecordStore, identifier: str, index: int, direction: str) -> RotationRecord:
    if direction not in MOVE_DIRECTIONS:
        raise ValueError(f"direction must be one of {', '.join(MOVE_DIRECTIONS)}")

    record = store.load(identifier)
    people = list(record.ordered_people)
    target = index - 1 if direction == "up" else index + 1
    if not 0 <= index < len(people) or not 0 <= target < len(people):
        return record

    people[index], people[target] = people[target], people[index]
    updated = record.model_copy(update={"ordered_people": tuple(people)})
    store.save(updated)
    return updated


def rename_list(store: RecordStore, identifier: str, name: str) -> RotationRecord:
    record = store.load(identifier)
    updated = record.model_copy(update={"display_name": _clean_name(name)})
    if updated != record:
        store.save(updated)
    return updated


def delete_list(store: RecordStore, identifier: str) -> None:
    store.delete(identifier)
    _LOGGER.info("Deleted list %s", identifier)
