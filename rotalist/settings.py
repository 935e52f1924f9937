"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from pathlib import Path

STORAGE_BACKENDS = ("file", "sqlite")


class Settings:
    """Runtime settings for the service."""

    @property
    def data_dir(self) -> Path:
        return Path(os.environ.get("ROTALIST_DATA_DIR", "./data"))

    @property
    def storage(self) -> str:
        backend = os.environ.get("ROTALIST_STORAGE", "file").strip().lower()
        if backend not in STORAGE_BACKENDS:
            raise ValueError(f"ROTALIST_STORAGE must be one of {', '.join(STORAGE_BACKENDS)}, got {backend!r}")
        return backend

    @property
    def db_path(self) -> Path:
        configured = os.environ.get("ROTALIST_DB_PATH")
        if configured:
            return Path(configured)
        return self.data_dir / "rotalist.db"

    @property
    def db_url(self) -> str:
        return f"sqlite:///{self.db_path}"

    @property
    def api_token(self) -> str:
        return os.environ.get("ROTALIST_API_TOKEN", "")

    @property
    def host(self) -> str:
        return os.environ.get("ROTALIST_HOST", "0.0.0.0")

    @property
    def port(self) -> int:
        return int(os.environ.get("ROTALIST_PORT", "8000"))

    @property
    def log_level(self) -> str:
        return os.environ.get("ROTALIST_LOG_LEVEL", "info").lower()


settings = Settings()
