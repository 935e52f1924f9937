"""Test fixtures for the rotalist service."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from rotalist.store import JsonFileRecordStore, SqlRecordStore


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    # Wednesday of ISO week 24.
    return FakeClock(datetime(2024, 6, 12, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def json_store(tmp_path: Path) -> JsonFileRecordStore:
    return JsonFileRecordStore(tmp_path / "data")


@pytest.fixture
def sql_store(tmp_path: Path) -> SqlRecordStore:
    from rotalist import db

    db.configure_engine(f"sqlite:///{tmp_path / 'test.db'}")
    assert db.engine is not None
    db.Base.metadata.drop_all(bind=db.engine)
    db.create_tables()
    return SqlRecordStore(db.session_factory())


@pytest.fixture(params=["file", "sqlite"])
def store(request: pytest.FixtureRequest):
    return request.getfixturevalue("json_store" if request.param == "file" else "sql_store")


def _make_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, clock: FakeClock, storage: str):
    monkeypatch.setenv("ROTALIST_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ROTALIST_STORAGE", storage)
    monkeypatch.delenv("ROTALIST_DB_PATH", raising=False)
    monkeypatch.delenv("ROTALIST_API_TOKEN", raising=False)

    from rotalist.main import app, get_now

    app.dependency_overrides[get_now] = lambda: clock.now
    try:
        with TestClient(app) as api_client:
            yield api_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, clock: FakeClock) -> TestClient:
    yield from _make_client(tmp_path, monkeypatch, clock, "file")


@pytest.fixture
def sqlite_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, clock: FakeClock) -> TestClient:
    yield from _make_client(tmp_path, monkeypatch, clock, "sqlite")


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"
