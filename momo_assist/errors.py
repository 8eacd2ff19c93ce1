"""Exception types for ``momo_assist``."""

from __future__ import annotations


class MomoAssistError(Exception):
    """Base exception for momo_assist errors."""


class PersistenceError(MomoAssistError):
    """The snapshot backend failed to read or write."""


class CorruptSnapshotError(MomoAssistError):
    """A stored snapshot could not be decoded into the expected shape.

    Raised and handled inside :class:`momo_assist.store.ReceiverStore`, which
    resets to an empty snapshot instead of surfacing it to callers.
    """


class PaymentValidationError(MomoAssistError, ValueError):
    """Payment form values are missing or malformed."""


__all__ = [
    "MomoAssistError",
    "PersistenceError",
    "CorruptSnapshotError",
    "PaymentValidationError",
]
