"""Data models for ``momo_assist``.

Two families live here:

- Parser output (:class:`TransactionRecord`), a frozen dataclass that is never
  persisted.
- Store state (:class:`Receiver`, :class:`StoreSnapshot`), pydantic models that
  validate the on-disk JSON shape. Wire field names match the mobile app's
  ``momo.json`` (``lastUsed``, ``lastId``); Python attributes are snake_case.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Parser output
# ---------------------------------------------------------------------------


class TransactionKind(str, Enum):
    """Which confirmation flow a parsed notification belongs to."""

    PERSON_TRANSFER = "person_transfer"
    MERCHANT_PAYMENT = "merchant_payment"


@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """Structured fields recovered from a mobile-money notification.

    ``amount`` is whole RWF. ``counterparty_number`` is a phone number, a
    merchant code, or empty when the notification carries neither.
    ``counterparty_name`` is captured verbatim (not trimmed) and may be empty.
    """

    amount: int
    counterparty_name: str
    counterparty_number: str
    kind: TransactionKind

    def to_dict(self) -> dict[str, object]:
        return {
            "amount": self.amount,
            "counterparty_name": self.counterparty_name,
            "counterparty_number": self.counterparty_number,
            "kind": self.kind.value,
        }


class NumberKind(str, Enum):
    PHONE = "phone"
    PHONE_INTERNATIONAL = "phone_international"
    BUSINESS_CODE = "business_code"


@dataclass(frozen=True, slots=True)
class PaymentRequest:
    """Validated payment form values, ready for confirmation."""

    name: str
    number: str
    amount: int
    number_kind: NumberKind | None


# ---------------------------------------------------------------------------
# Receiver store state
# ---------------------------------------------------------------------------


class Receiver(BaseModel):
    """A previously paid person, merchant, or code."""

    model_config = ConfigDict(strict=True, extra="forbid", populate_by_name=True)

    id: int
    name: str
    number: str
    # Milliseconds since the epoch
    last_used: int = Field(alias="lastUsed")


class StoreSnapshot(BaseModel):
    """Full serialized state of the receiver store."""

    model_config = ConfigDict(strict=True, extra="forbid", populate_by_name=True)

    receivers: list[Receiver] = Field(default_factory=list)
    last_id: int = Field(default=0, alias="lastId")

    @model_validator(mode="after")
    def _check_ids(self) -> StoreSnapshot:
        ids = [r.id for r in self.receivers]
        if len(ids) != len(set(ids)):
            raise ValueError("receiver ids must be unique")
        if ids and self.last_id < max(ids):
            raise ValueError("lastId must be >= every receiver id")
        return self

    @classmethod
    def empty(cls) -> StoreSnapshot:
        return cls(receivers=[], last_id=0)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


__all__ = [
    "TransactionKind",
    "TransactionRecord",
    "NumberKind",
    "PaymentRequest",
    "Receiver",
    "StoreSnapshot",
]
