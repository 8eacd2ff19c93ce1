"""Public interface for the ``momo_assist`` package.

Symbol re-exports only: the notification parser, the receiver store and its
backends, and the payment helpers built on them.
"""

from .api import (
    confirm_payment,
    prefill_from_text,
    prepare_payment,
    suggest_receivers,
)
from .backends import JsonFileBackend, MemoryBackend, SnapshotBackend, SqlBackend
from .errors import (
    CorruptSnapshotError,
    MomoAssistError,
    PaymentValidationError,
    PersistenceError,
)
from .models import (
    NumberKind,
    PaymentRequest,
    Receiver,
    StoreSnapshot,
    TransactionKind,
    TransactionRecord,
)
from .parser import parse_notification, split_merchant_description
from .store import ReceiverStore
from .templates import render_template

__all__ = [
    # Parser
    "parse_notification",
    "split_merchant_description",
    # Store
    "ReceiverStore",
    "SnapshotBackend",
    "JsonFileBackend",
    "MemoryBackend",
    "SqlBackend",
    # Workflows
    "confirm_payment",
    "prefill_from_text",
    "prepare_payment",
    "suggest_receivers",
    "render_template",
    # Models
    "NumberKind",
    "PaymentRequest",
    "Receiver",
    "StoreSnapshot",
    "TransactionKind",
    "TransactionRecord",
    # Errors
    "MomoAssistError",
    "PersistenceError",
    "CorruptSnapshotError",
    "PaymentValidationError",
]
