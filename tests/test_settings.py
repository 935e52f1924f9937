"""Settings resolution tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from rotalist import settings as settings_module


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in (
        "ROTALIST_DATA_DIR",
        "ROTALIST_STORAGE",
        "ROTALIST_DB_PATH",
        "ROTALIST_API_TOKEN",
        "ROTALIST_HOST",
        "ROTALIST_PORT",
        "ROTALIST_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = settings_module.Settings()
    assert settings.data_dir == Path("./data")
    assert settings.storage == "file"
    assert settings.db_path == Path("./data/rotalist.db")
    assert settings.api_token == ""
    assert settings.host == "0.0.0.0"
    assert settings.port == 8000
    assert settings.log_level == "info"


def test_db_path_follows_data_dir(monkeypatch) -> None:
    monkeypatch.setenv("ROTALIST_DATA_DIR", "/srv/rotalist")
    settings = settings_module.Settings()
    assert settings.db_path == Path("/srv/rotalist/rotalist.db")
    assert settings.db_url == "sqlite:////srv/rotalist/rotalist.db"


def test_db_path_prefers_explicit_env(monkeypatch) -> None:
    monkeypatch.setenv("ROTALIST_DB_PATH", "/tmp/custom-rotalist.db")
    settings = settings_module.Settings()
    assert settings.db_path == Path("/tmp/custom-rotalist.db")


def test_storage_is_normalized_and_validated(monkeypatch) -> None:
    monkeypatch.setenv("ROTALIST_STORAGE", " SQLite ")
    assert settings_module.Settings().storage == "sqlite"

    monkeypatch.setenv("ROTALIST_STORAGE", "postgres")
    with pytest.raises(ValueError, match="ROTALIST_STORAGE"):
        settings_module.Settings().storage


def test_port_and_log_level_overrides(monkeypatch) -> None:
    monkeypatch.setenv("ROTALIST_PORT", "9001")
    monkeypatch.setenv("ROTALIST_LOG_LEVEL", "DEBUG")
    settings = settings_module.Settings()
    assert settings.port == 9001
    assert settings.log_level == "debug"
