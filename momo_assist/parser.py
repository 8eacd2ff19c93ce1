"""Mobile-money notification parser.

Turns the body of an MTN MoMo (Rwanda) SMS, as pasted from the clipboard, into
a :class:`~momo_assist.models.TransactionRecord`.

The gateway has reworded its notifications over time, so several formats are
recognized. They overlap, and the first matcher in :data:`MATCHERS` that
succeeds wins:

1. Person-to-person transfer
   ``... 5,000 RWF transferred to NAME (NUMBER) ... at TIMESTAMP ... Fee was: F
   RWF ... New balance: B RWF``
2. Merchant payment (current)
   ``TxId: ID. Your payment of AMOUNT RWF to MERCHANT CODE has been completed
   at TIMESTAMP. Your new balance: B RWF. Fee was F RWF.``
3. Merchant payment (legacy)
   ``A transaction of AMOUNT RWF by NAME on your MOMO ... completed at
   TIMESTAMP ... Your new balance:B RWF. Fee was F RWF``

Fee, timestamp and balance must be present for a format to match but are not
returned. Names are returned verbatim (no trimming); only the amount is
normalized.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from .logging_setup import get_logger
from .models import TransactionKind, TransactionRecord

_logger = get_logger("momo_assist.parser")

# Notifications may be pasted with line breaks, hence DOTALL.
TRANSFER_PATTERN = re.compile(
    r"(?P<amount>\d[\d,]*)\sRWF.*?transferred.*?to\s(?P<name>.*?)\((?P<number>\d+)\)"
    r".*?at\s(?P<timestamp>[\d\-\s:]+)"
    r".*?Fee\swas:\s(?P<fee>.*?)\sRWF"
    r".*?\sNew\sbalance:\s(?P<balance>.*?)\sRWF",
    re.DOTALL,
)

MERCHANT_PAYMENT_PATTERN = re.compile(
    r"TxId: (?P<txid>\d+)\. Your payment of (?P<amount>.*?) RWF to (?P<merchant>.*?)"
    r" has been completed at (?P<timestamp>[\d\-\s:]+)\."
    r" Your new balance: (?P<balance>.*?) RWF\. Fee was (?P<fee>\d+) RWF",
    re.DOTALL,
)

LEGACY_MERCHANT_PAYMENT_PATTERN = re.compile(
    r"A transaction of (?P<amount>\d[\d,]*) RWF by (?P<name>.*?) on your MOMO"
    r".*?completed at (?P<timestamp>[\d\-\s:]+)"
    r".*?Your new balance:(?P<balance>.*?) RWF\. Fee was (?P<fee>\d+) RWF",
    re.DOTALL,
)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def parse_amount(raw: str) -> int:
    """Return whole RWF from a notification amount such as ``"1,000"``.

    Raises ``ValueError`` when anything other than digits and thousands
    separators is present.
    """

    s = raw.strip().replace(",", "")
    if not s or not (s.isascii() and s.isdigit()):
        raise ValueError(f"invalid amount: {raw!r}")
    return int(s)


def split_merchant_description(description: str) -> tuple[str, str]:
    """Split ``"Chez Lando 774455"`` into ``("Chez Lando", "774455")``.

    The last space-delimited token is the merchant code. A single token
    yields an empty name.
    """

    name, _, code = description.rpartition(" ")
    return name, code


# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------

type Matcher = Callable[[str], TransactionRecord | None]


def match_transfer(text: str) -> TransactionRecord | None:
    m = TRANSFER_PATTERN.search(text)
    if m is None:
        return None
    try:
        amount = parse_amount(m.group("amount"))
    except ValueError:
        _logger.debug("transfer: unusable amount %r", m.group("amount"))
        return None
    return TransactionRecord(
        amount=amount,
        counterparty_name=m.group("name"),
        counterparty_number=m.group("number"),
        kind=TransactionKind.PERSON_TRANSFER,
    )


def match_merchant_payment(text: str) -> TransactionRecord | None:
    m = MERCHANT_PAYMENT_PATTERN.search(text)
    if m is None:
        return None
    try:
        amount = parse_amount(m.group("amount"))
    except ValueError:
        _logger.debug("merchant_payment: unusable amount %r", m.group("amount"))
        return None
    name, code = split_merchant_description(m.group("merchant"))
    return TransactionRecord(
        amount=amount,
        counterparty_name=name,
        counterparty_number=code,
        kind=TransactionKind.MERCHANT_PAYMENT,
    )


def match_legacy_merchant_payment(text: str) -> TransactionRecord | None:
    # Legacy notifications never carry the merchant code separately.
    m = LEGACY_MERCHANT_PAYMENT_PATTERN.search(text)
    if m is None:
        return None
    try:
        amount = parse_amount(m.group("amount"))
    except ValueError:
        _logger.debug("legacy_merchant_payment: unusable amount %r", m.group("amount"))
        return None
    return TransactionRecord(
        amount=amount,
        counterparty_name=m.group("name"),
        counterparty_number="",
        kind=TransactionKind.MERCHANT_PAYMENT,
    )


# Priority order: newer formats before the legacy fallback.
MATCHERS: tuple[Matcher, ...] = (
    match_transfer,
    match_merchant_payment,
    match_legacy_merchant_payment,
)


def parse_notification(text: str) -> TransactionRecord | None:
    """Parse a pasted notification; ``None`` means no known format matched."""

    if not text:
        return None
    for matcher in MATCHERS:
        record = matcher(text)
        if record is not None:
            _logger.debug("parse_notification: matched %s", matcher.__name__)
            return record
    _logger.debug("parse_notification: no match (len=%d)", len(text))
    return None


__all__ = [
    "TRANSFER_PATTERN",
    "MERCHANT_PAYMENT_PATTERN",
    "LEGACY_MERCHANT_PAYMENT_PATTERN",
    "MATCHERS",
    "Matcher",
    "match_transfer",
    "match_merchant_payment",
    "match_legacy_merchant_payment",
    "parse_amount",
    "parse_notification",
    "split_merchant_description",
]
