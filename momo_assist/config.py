"""Environment-driven settings.

Values are read at call time so a ``.env`` loaded by the CLI (via
``python-dotenv``) or a test's ``monkeypatch.setenv`` takes effect without
re-importing anything.

- ``MOMO_STORE_PATH``: receiver snapshot file (default ``./momo.json``).
- ``MOMO_DATABASE_URL``: when set, snapshots live in a SQL table instead.
- ``MOMO_ASSIST_LOG_LEVEL``: default level for ``configure_logging``.
"""

from __future__ import annotations

import os
from pathlib import Path

STORE_FILE_NAME = "momo.json"


def get_store_path() -> Path:
    raw = os.getenv("MOMO_STORE_PATH")
    if raw and raw.strip():
        return Path(raw.strip()).expanduser().resolve()
    return (Path.cwd() / STORE_FILE_NAME).resolve()


def get_database_url() -> str | None:
    raw = os.getenv("MOMO_DATABASE_URL")
    if raw and raw.strip():
        return raw.strip()
    return None


def get_log_level() -> str | None:
    raw = os.getenv("MOMO_ASSIST_LOG_LEVEL")
    return raw.strip() if raw and raw.strip() else None


__all__ = ["STORE_FILE_NAME", "get_store_path", "get_database_url", "get_log_level"]
