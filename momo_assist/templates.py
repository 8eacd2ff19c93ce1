"""Confirmation message templates.

Placeholders use ``{name}`` syntax. Substitution is a plain string replace,
so braces in values and unknown placeholders are left alone.
"""

from __future__ import annotations

from collections.abc import Mapping

RESPONSES: dict[str, str] = {
    "transfer": (
        "You are about to transfer {amount} RWF to {name} ({number}). "
        "Enter your PIN to confirm."
    ),
    "merchant": (
        "You are about to pay {amount} RWF to {name} ({number}). "
        "Enter your PIN to confirm."
    ),
}


def render_template(template: str, values: Mapping[str, object]) -> str:
    """Replace every ``{key}`` in ``template`` with ``str(values[key])``."""

    result = template
    for key, value in values.items():
        result = result.replace("{" + key + "}", str(value))
    return result


def format_amount(amount: int) -> str:
    return f"{amount:,}"


__all__ = ["RESPONSES", "format_amount", "render_template"]
