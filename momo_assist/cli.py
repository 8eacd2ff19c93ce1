"""CLI for the ``momo_assist`` package.

Command handlers (``cmd_*``) hold the behavior and return exit codes; the
Typer commands below only parse options and delegate. Settings are read from
the environment, optionally populated from a local ``.env`` by
``python-dotenv``.
"""

from __future__ import annotations

import json
import sys

import typer
from dotenv import load_dotenv

from .logging_setup import configure_logging


def _open_store():
    from .backends import backend_from_env
    from .store import ReceiverStore

    def _report_reset(reason: str) -> None:
        print(f"Warning: receiver history was unreadable and has been reset ({reason})", file=sys.stderr)

    return ReceiverStore(backend_from_env(), on_reset=_report_reset)


def _print_receivers(receivers) -> None:
    for r in receivers:
        print(f"{r.id}\t{r.name}\t{r.number}")


def cmd_parse(text: str | None) -> int:
    """Parse a notification and print it as JSON; exit 1 when no format matches."""

    from .parser import parse_notification

    if text is None:
        text = sys.stdin.read()
    record = parse_notification(text)
    if record is None:
        print("Error: text does not match any known notification format.", file=sys.stderr)
        return 1
    print(json.dumps(record.to_dict(), ensure_ascii=False))
    return 0


def cmd_pay(name: str, number: str, amount: str) -> int:
    from .api import confirm_payment
    from .errors import PaymentValidationError
    from .receiver_numbers import normalize_number_input

    try:
        store = _open_store()
        message = confirm_payment(store, name, normalize_number_input(number), amount)
    except PaymentValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(message)
    return 0


def cmd_search(query: str) -> int:
    from .api import suggest_receivers
    from .errors import PersistenceError

    try:
        _print_receivers(suggest_receivers(_open_store(), query))
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_recent() -> int:
    from .errors import PersistenceError

    try:
        _print_receivers(_open_store().recent())
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_pick() -> int:
    from .errors import PersistenceError
    from .term_ui import select_receiver

    try:
        chosen = select_receiver(_open_store())
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if chosen is None:
        return 1
    _print_receivers([chosen])
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Parse MTN MoMo notifications and remember whom you paid. "
        "Reads MOMO_STORE_PATH / MOMO_DATABASE_URL from the environment or a local .env."
    ),
)


@app.command("parse")
def parse_cmd(
    text: str | None = typer.Argument(None, help="Notification text (read from stdin when omitted)."),
) -> None:
    """Print the structured fields of a pasted notification."""

    raise typer.Exit(cmd_parse(text))


@app.command("pay")
def pay_cmd(
    *,
    name: str = typer.Option(..., help="Receiver name."),
    number: str = typer.Option("", help="Phone number or merchant code."),
    amount: str = typer.Option(..., help="Amount in RWF."),
) -> None:
    """Remember the receiver and print the confirmation message."""

    raise typer.Exit(cmd_pay(name, number, amount))


@app.command("search")
def search_cmd(query: str = typer.Argument(..., help="Name or number fragment.")) -> None:
    """List up to five matching receivers, most recent first."""

    raise typer.Exit(cmd_search(query))


@app.command("recent")
def recent_cmd() -> None:
    """List the five most recently used receivers."""

    raise typer.Exit(cmd_recent())


@app.command("pick")
def pick_cmd() -> None:
    """Choose a previous receiver interactively."""

    raise typer.Exit(cmd_pick())


@app.callback()
def _root() -> None:
    """Load ``.env`` (without overriding the environment) and configure logging."""

    load_dotenv(override=False)
    configure_logging()


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
