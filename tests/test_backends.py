import json
import os

import pytest

from momo_assist import JsonFileBackend, ReceiverStore, SnapshotBackend, SqlBackend
from momo_assist.backends import MemoryBackend, backend_from_env
from momo_assist.models import Receiver, StoreSnapshot


def _sample_snapshot() -> StoreSnapshot:
    return StoreSnapshot(
        receivers=[
            Receiver(id=1, name="Alice", number="0788123456", last_used=1_700_000_000_000),
            Receiver(id=3, name="Chez Lando", number="774455", last_used=1_700_000_050_000),
        ],
        last_id=4,
    )


def test_backends_satisfy_protocol(tmp_path):
    assert isinstance(MemoryBackend(), SnapshotBackend)
    assert isinstance(JsonFileBackend(tmp_path / "momo.json"), SnapshotBackend)


def test_json_file_round_trip(tmp_path):
    path = tmp_path / "nested" / "momo.json"
    backend = JsonFileBackend(path)
    assert backend.load() is None

    snap = _sample_snapshot()
    backend.save(snap.to_json())

    assert StoreSnapshot.model_validate_json(backend.load()) == snap
    assert json.loads(path.read_text(encoding="utf-8"))["lastId"] == 4
    # Atomic write leaves no temp file behind
    assert not (path.parent / "momo.json.tmp").exists()


def test_json_file_save_failure_cleans_temp(tmp_path):
    # The target path is a directory, so os.replace fails after the temp write
    target = tmp_path / "momo.json"
    target.mkdir()
    backend = JsonFileBackend(target)
    with pytest.raises(OSError):
        backend.save("{}")
    assert not (tmp_path / "momo.json.tmp").exists()


def test_sql_round_trip():
    backend = SqlBackend("sqlite://")
    try:
        assert backend.load() is None
        first = _sample_snapshot()
        backend.save(first.to_json())
        assert StoreSnapshot.model_validate_json(backend.load()) == first

        # Saving again replaces the single row
        second = StoreSnapshot.empty()
        backend.save(second.to_json())
        assert StoreSnapshot.model_validate_json(backend.load()) == second
    finally:
        backend.dispose()


def test_store_over_sql_backend(tmp_path):
    url = f"sqlite:///{os.fspath(tmp_path / 'momo.db')}"
    backend = SqlBackend(url)
    try:
        store = ReceiverStore(backend)
        store.upsert("Alice", "0788123456")
        store.upsert("Bob", "0722000111")
    finally:
        backend.dispose()

    reopened = SqlBackend(url)
    try:
        names = [r.name for r in ReceiverStore(reopened).snapshot().receivers]
        assert names == ["Alice", "Bob"]
    finally:
        reopened.dispose()


def test_backend_from_env_prefers_database_url(monkeypatch, tmp_path):
    assert isinstance(backend_from_env(), JsonFileBackend)

    monkeypatch.setenv("MOMO_DATABASE_URL", f"sqlite:///{os.fspath(tmp_path / 'x.db')}")
    backend = backend_from_env()
    try:
        assert isinstance(backend, SqlBackend)
    finally:
        backend.dispose()


def test_backend_from_env_uses_store_path(_isolate_store):
    backend = backend_from_env()
    assert isinstance(backend, JsonFileBackend)
    assert backend.path == _isolate_store.resolve()
