"""Caller-facing workflows that wire the parser, the store and the templates.

These mirror the payment screen: a pasted notification pre-fills the form,
typing in the search box suggests previous receivers, and pressing "pay"
validates the form, remembers the receiver and renders the confirmation text.
"""

from __future__ import annotations

from .errors import PaymentValidationError, PersistenceError
from .logging_setup import get_logger
from .models import NumberKind, PaymentRequest, Receiver, TransactionRecord
from .parser import parse_amount, parse_notification
from .receiver_numbers import classify_number, display_number
from .store import ReceiverStore
from .templates import RESPONSES, format_amount, render_template

MIN_SEARCH_QUERY_LENGTH = 2

_logger = get_logger("momo_assist.api")


def prefill_from_text(text: str) -> TransactionRecord | None:
    """Parse clipboard text; ``None`` means the form should stay as it is."""

    return parse_notification(text)


def suggest_receivers(store: ReceiverStore, query: str) -> list[Receiver]:
    """Search suggestions for a partially typed receiver.

    Queries shorter than :data:`MIN_SEARCH_QUERY_LENGTH` return nothing and do
    not touch the store.
    """

    if len(query) < MIN_SEARCH_QUERY_LENGTH:
        return []
    return store.search(query)


def prepare_payment(name: str, number: str, amount: int | str) -> PaymentRequest:
    """Validate payment form values.

    ``name`` and a positive ``amount`` are required. ``number`` may be empty;
    when given it must be a merchant code or an MTN mobile number.
    """

    if not name or not name.strip():
        raise PaymentValidationError("receiver name is required")

    if isinstance(amount, str):
        try:
            value = parse_amount(amount)
        except ValueError as exc:
            raise PaymentValidationError(f"invalid amount: {amount!r}") from exc
    elif isinstance(amount, bool) or not isinstance(amount, int):
        raise PaymentValidationError(f"invalid amount: {amount!r}")
    else:
        value = amount
    if value <= 0:
        raise PaymentValidationError("amount must be greater than zero")

    kind = classify_number(number) if number else None
    if number and kind is None:
        raise PaymentValidationError(f"invalid number/code format: {number!r}")

    return PaymentRequest(name=name, number=number, amount=value, number_kind=kind)


def confirm_payment(store: ReceiverStore, name: str, number: str, amount: int | str) -> str:
    """Validate, remember the receiver, and return the confirmation message.

    A store failure is logged and does not block the confirmation; validation
    failures raise :class:`PaymentValidationError`.
    """

    request = prepare_payment(name, number, amount)

    try:
        store.upsert(request.name, request.number)
    except PersistenceError:
        _logger.warning("failed to remember receiver name=%r", request.name, exc_info=True)

    is_phone = request.number_kind in (NumberKind.PHONE, NumberKind.PHONE_INTERNATIONAL)
    template = RESPONSES["transfer"] if is_phone else RESPONSES["merchant"]
    return render_template(
        template,
        {
            "amount": format_amount(request.amount),
            "name": request.name,
            "number": display_number(request.number),
        },
    )


__all__ = [
    "MIN_SEARCH_QUERY_LENGTH",
    "confirm_payment",
    "prefill_from_text",
    "prepare_payment",
    "suggest_receivers",
]
