"""Snapshot persistence collaborators for :class:`momo_assist.store.ReceiverStore`.

A backend is an opaque blob store holding one serialized snapshot under a
single fixed logical name (``momo.json``). ``load()`` returns ``None`` when
nothing has been stored yet. Backends raise their native errors (``OSError``,
``SQLAlchemyError``); the store wraps them in ``PersistenceError``.

- :class:`JsonFileBackend`: one JSON file, written atomically (``.tmp`` then
  ``os.replace``), so readers only ever see a complete snapshot.
- :class:`SqlBackend`: one row in a SQLAlchemy-managed key/value table.
- :class:`MemoryBackend`: in-process, for tests and embedding.
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from os import PathLike
from pathlib import Path
from typing import Protocol, runtime_checkable

from sqlalchemy import DateTime, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .config import STORE_FILE_NAME, get_database_url, get_store_path

SNAPSHOT_KEY = STORE_FILE_NAME


@runtime_checkable
class SnapshotBackend(Protocol):
    def load(self) -> str | None: ...

    def save(self, data: str) -> None: ...


class MemoryBackend:
    """Keep the serialized snapshot in memory."""

    def __init__(self, data: str | None = None) -> None:
        self.data = data
        self.saves = 0

    def load(self) -> str | None:
        return self.data

    def save(self, data: str) -> None:
        self.data = data
        self.saves += 1


class JsonFileBackend:
    """Store the snapshot as a UTF-8 JSON file."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return f"JsonFileBackend(path={os.fspath(self.path)!r})"

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def save(self, data: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp.write_text(data, encoding="utf-8")
            os.replace(tmp, self.path)
        except Exception:
            with contextlib.suppress(FileNotFoundError):
                tmp.unlink()
            raise


# ---------------------------------------------------------------------------
# SQL backend
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class MomoSnapshot(Base):
    __tablename__ = "momo_snapshots"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SqlBackend:
    """Store the snapshot in the ``momo_snapshots`` table.

    The table is created on first use. Each instance owns its engine; pass a
    SQLite URL (``sqlite:///momo.db``) for a local database.
    """

    def __init__(self, database_url: str, *, key: str = SNAPSHOT_KEY) -> None:
        self.key = key
        self._engine: Engine = create_engine(database_url, pool_pre_ping=True)
        self._session_maker = sessionmaker(
            bind=self._engine, expire_on_commit=False, class_=Session
        )
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            Base.metadata.create_all(self._engine)
            self._schema_ready = True

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        self._ensure_schema()
        session = self._session_maker()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def load(self) -> str | None:
        with self._session_scope() as session:
            row = session.get(MomoSnapshot, self.key)
            return row.payload if row is not None else None

    def save(self, data: str) -> None:
        with self._session_scope() as session:
            session.merge(
                MomoSnapshot(key=self.key, payload=data, updated_at=datetime.now(UTC))
            )

    def dispose(self) -> None:
        self._engine.dispose()


def backend_from_env() -> SnapshotBackend:
    """Build the backend selected by ``MOMO_DATABASE_URL`` / ``MOMO_STORE_PATH``."""

    url = get_database_url()
    if url:
        return SqlBackend(url)
    return JsonFileBackend(get_store_path())


__all__ = [
    "SNAPSHOT_KEY",
    "SnapshotBackend",
    "MemoryBackend",
    "JsonFileBackend",
    "SqlBackend",
    "MomoSnapshot",
    "backend_from_env",
]
