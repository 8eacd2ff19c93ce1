"""Pytest configuration for test isolation.

The CLI resolves its receiver store from ``MOMO_STORE_PATH`` (default
``./momo.json``) or ``MOMO_DATABASE_URL``. To keep tests hermetic, every test
gets its own store file under ``tmp_path`` and never sees a database URL from
the developer's environment.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from momo_assist.backends import MemoryBackend
from momo_assist.store import ReceiverStore


@pytest.fixture(autouse=True)
def _isolate_store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    store_path = tmp_path / "store" / "momo.json"
    monkeypatch.setenv("MOMO_STORE_PATH", os.fspath(store_path))
    monkeypatch.delenv("MOMO_DATABASE_URL", raising=False)
    return store_path


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1_000) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend, clock: FakeClock) -> ReceiverStore:
    return ReceiverStore(backend, clock=clock)
