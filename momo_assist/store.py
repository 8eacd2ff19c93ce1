"""Persistent store of payment receivers.

:class:`ReceiverStore` keeps no durable state of its own: every operation
loads the snapshot from its backend, works on it, and (for writes) saves it
back before returning. Callers construct one store per backend and pass it
around explicitly.

Concurrency
-----------
A per-instance re-entrant lock serializes every operation, so ``upsert``
cannot race another ``upsert`` into duplicate ids, and ``search``/``recent``
block until an in-flight write has been saved. Separate processes sharing one
file are not coordinated.

Failure policy
--------------
- A snapshot that is missing is created empty.
- A snapshot that cannot be read or decoded is replaced by an empty one, which
  is saved immediately. The event is logged at WARNING and passed to the
  ``on_reset`` hook because every stored receiver is lost.
- Any failed save raises :class:`~momo_assist.errors.PersistenceError`. There
  is no retry.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable

from pydantic import ValidationError

from .backends import SnapshotBackend
from .errors import CorruptSnapshotError, PersistenceError
from .logging_setup import get_logger
from .models import Receiver, StoreSnapshot

SEARCH_LIMIT = 5
RECENT_LIMIT = 5

_logger = get_logger("momo_assist.store")


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _most_recent(receivers: Iterable[Receiver], limit: int) -> list[Receiver]:
    # sorted() is stable with reverse=True, so ties keep insertion order.
    return sorted(receivers, key=lambda r: r.last_used, reverse=True)[:limit]


def decode_snapshot(raw: str) -> StoreSnapshot:
    """Decode a serialized snapshot, raising ``CorruptSnapshotError`` on bad input."""

    try:
        return StoreSnapshot.model_validate_json(raw)
    except ValidationError as exc:
        raise CorruptSnapshotError(f"snapshot does not match schema: {exc}") from exc


class ReceiverStore:
    """Upsert, search, and recency listing over a persisted receiver snapshot.

    Parameters
    ----------
    backend:
        Persistence collaborator holding the serialized snapshot.
    clock:
        Returns the current time in milliseconds since the epoch. Defaults to
        the system clock.
    on_reset:
        Called with a short reason whenever an unreadable or corrupt snapshot
        is discarded.
    """

    def __init__(
        self,
        backend: SnapshotBackend,
        *,
        clock: Callable[[], int] | None = None,
        on_reset: Callable[[str], None] | None = None,
    ) -> None:
        self._backend = backend
        self._clock = clock or _now_ms
        self._on_reset = on_reset
        self._lock = threading.RLock()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ------------------------------------------------------------------
    # Snapshot I/O
    # ------------------------------------------------------------------

    def _save(self, snapshot: StoreSnapshot) -> None:
        try:
            self._backend.save(snapshot.to_json())
        except Exception as exc:
            raise PersistenceError(f"failed to save receiver snapshot: {exc}") from exc

    def _reset(self, reason: str) -> StoreSnapshot:
        _logger.warning("receiver snapshot reset; stored receivers discarded: %s", reason)
        if self._on_reset is not None:
            self._on_reset(reason)
        snapshot = StoreSnapshot.empty()
        self._save(snapshot)
        return snapshot

    def _load(self) -> StoreSnapshot:
        try:
            raw = self._backend.load()
        except Exception as exc:
            _logger.debug("snapshot read failed", exc_info=True)
            snapshot = self._reset(f"unreadable snapshot: {exc}")
        else:
            if raw is None:
                snapshot = StoreSnapshot.empty()
                self._save(snapshot)
            else:
                try:
                    snapshot = decode_snapshot(raw)
                except CorruptSnapshotError as exc:
                    snapshot = self._reset(str(exc))
        self._initialized = True
        return snapshot

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Make sure a snapshot exists in the backend."""

        with self._lock:
            self._load()

    def snapshot(self) -> StoreSnapshot:
        """Return the current durable snapshot (a fresh copy on every call)."""

        with self._lock:
            return self._load()

    def upsert(self, name: str, number: str) -> Receiver:
        """Record a payment to ``(name, number)``.

        An exact, case-sensitive match on both fields refreshes ``last_used``;
        otherwise a receiver is appended with the next id. Returns the stored
        receiver.
        """

        with self._lock:
            snapshot = self._load()
            now = self._clock()
            for receiver in snapshot.receivers:
                if receiver.name == name and receiver.number == number:
                    # Keep last_used strictly increasing even if the clock is coarse.
                    receiver.last_used = max(now, receiver.last_used + 1)
                    break
            else:
                snapshot.last_id += 1
                receiver = Receiver(id=snapshot.last_id, name=name, number=number, last_used=now)
                snapshot.receivers.append(receiver)
                _logger.debug("receiver added id=%d", receiver.id)
            self._save(snapshot)
            return receiver

    def search(self, query: str) -> list[Receiver]:
        """Receivers whose name contains ``query`` (any case) or whose number
        contains it verbatim, most recently used first, at most five."""

        with self._lock:
            snapshot = self._load()
        lowered = query.lower()
        matches = (
            r for r in snapshot.receivers if lowered in r.name.lower() or query in r.number
        )
        return _most_recent(matches, SEARCH_LIMIT)

    def recent(self) -> list[Receiver]:
        """The five most recently used receivers."""

        with self._lock:
            snapshot = self._load()
        return _most_recent(snapshot.receivers, RECENT_LIMIT)


__all__ = ["RECENT_LIMIT", "SEARCH_LIMIT", "ReceiverStore", "decode_snapshot"]
