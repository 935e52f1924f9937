"""Keyed storage of rotation records.

Both backends are last-write-wins and do no locking: one writer per record
is assumed.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from . import db
from .models import RotationList
from .records import CalendarDateAnchor, InvalidRecordError, RotationRecord, decode_record, encode_record, resolve_anchor
from .settings import Settings, settings

_LOGGER = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_-]+")


class RecordNotFoundError(LookupError):
    def __init__(self, identifier: str) -> None:
        super().__init__(f"List {identifier} not found")
        self.identifier = identifier


class RecordStore(ABC):
    @abstractmethod
    def load(self, identifier: str) -> RotationRecord:
        """Return the stored record or raise RecordNotFoundError."""

    @abstractmethod
    def save(self, record: RotationRecord) -> None:
        """Overwrite whatever is stored under the record's identifier."""

    @abstractmethod
    def delete(self, identifier: str) -> None:
        """Remove the record; missing records are ignored."""

    @abstractmethod
    def list_records(self) -> list[RotationRecord]:
        ...


class JsonFileRecordStore(RecordStore):
    """One pretty-printed ``<id>.json`` file per record."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def _path(self, identifier: str) -> Path | None:
        if not _IDENTIFIER_RE.fullmatch(identifier):
            return None
        return self.data_dir / f"{identifier}.json"

    def _read(self, path: Path) -> RotationRecord:
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidRecordError(f"{path.name} is not valid UTF-8 JSON: {exc}") from exc
        record = decode_record(payload)
        # The file name decides where writes go, so it must agree with the payload.
        if record.identifier != path.stem:
            raise InvalidRecordError(f"{path.name} holds list {record.identifier!r}")
        return record

    def load(self, identifier: str) -> RotationRecord:
        path = self._path(identifier)
        if path is None or not path.is_file():
            raise RecordNotFoundError(identifier)
        _LOGGER.debug("Reading list %s from %s", identifier, path)
        return self._read(path)

    def save(self, record: RotationRecord) -> None:
        path = self._path(record.identifier)
        if path is None:
            raise ValueError(f"Invalid list identifier {record.identifier!r}")
        self.data_dir.mkdir(parents=True, exist_ok=True)
        # Unique temp file per writer; concurrent saves of one record race only on os.replace.
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{path.stem}.", suffix=".tmp")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(encode_record(record), handle, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        finally:
            tmp_path.unlink(missing_ok=True)
        _LOGGER.debug("Wrote list %s to %s", record.identifier, path)

    def delete(self, identifier: str) -> None:
        path = self._path(identifier)
        if path is None:
            return
        path.unlink(missing_ok=True)

    def list_records(self) -> list[RotationRecord]:
        if not self.data_dir.is_dir():
            return []
        records = []
        for path in sorted(self.data_dir.glob("*.json")):
            try:
                records.append(self._read(path))
            except (InvalidRecordError, OSError) as exc:
                _LOGGER.warning("Skipping unreadable list file %s: %s", path, exc)
        return records


class SqlRecordStore(RecordStore):
    """Records kept in the ``rotation_lists`` table."""

    def __init__(self, sessions: sessionmaker[Session]) -> None:
        self._sessions = sessions

    @staticmethod
    def _to_record(row: RotationList) -> RotationRecord:
        return RotationRecord(
            identifier=row.id,
            display_name=row.name,
            last_rotation_anchor=resolve_anchor(CalendarDateAnchor(day=row.last_rotation), row.id),
            ordered_people=tuple(row.people or ()),
        )

    def load(self, identifier: str) -> RotationRecord:
        with self._sessions() as session:
            row = session.get(RotationList, identifier)
            if row is None:
                raise RecordNotFoundError(identifier)
            return self._to_record(row)

    def save(self, record: RotationRecord) -> None:
        with self._sessions() as session:
            row = session.get(RotationList, record.identifier)
            if row is None:
                row = RotationList(id=record.identifier)
                session.add(row)
            row.name = record.display_name
            row.last_rotation = record.last_rotation_anchor
            row.people = list(record.ordered_people)
            session.commit()

    def delete(self, identifier: str) -> None:
        with self._sessions() as session:
            session.execute(delete(RotationList).where(RotationList.id == identifier))
            session.commit()

    def list_records(self) -> list[RotationRecord]:
        with self._sessions() as session:
            rows = session.execute(select(RotationList).order_by(RotationList.name.asc())).scalars().all()
            return [self._to_record(row) for row in rows]


def build_store(config: Settings = settings) -> RecordStore:
    if config.storage == "sqlite":
        db.configure_engine(config.db_url)
        return SqlRecordStore(db.session_factory())
    return JsonFileRecordStore(config.data_dir)
