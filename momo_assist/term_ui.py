"""Interactive receiver picker (prompt_toolkit-based).

Typing filters previous receivers the same way the payment screen's search
box does: fewer than two characters lists the most recent receivers, longer
input searches by name or number. Tab cycles through candidates, Enter
accepts, Ctrl+C cancels.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.key_binding import KeyBindings

from .api import MIN_SEARCH_QUERY_LENGTH, suggest_receivers
from .models import Receiver
from .store import ReceiverStore


def receiver_label(receiver: Receiver) -> str:
    if receiver.number:
        return f"{receiver.name} ({receiver.number})"
    return receiver.name


def _candidates(store: ReceiverStore, text: str) -> list[Receiver]:
    if len(text) < MIN_SEARCH_QUERY_LENGTH:
        return store.recent()
    return suggest_receivers(store, text)


class ReceiverCompleter(Completer):
    """Complete against stored receivers; remembers every label it offered."""

    def __init__(self, store: ReceiverStore) -> None:
        self._store = store
        self.offered: dict[str, Receiver] = {}

    def candidates(self, text: str) -> list[Receiver]:
        found = _candidates(self._store, text)
        self.offered.update((receiver_label(r), r) for r in found)
        return found

    def get_completions(self, document, complete_event) -> Iterable[Completion]:
        text = document.text
        for r in self.candidates(text):
            yield Completion(
                receiver_label(r),
                start_position=-len(text),
                display=r.name or r.number,
                display_meta=r.number,
            )


def select_receiver(
    store: ReceiverStore,
    *,
    message: str = "Receiver (Tab to cycle, Enter to accept): ",
    session: PromptSession | None = None,
) -> Receiver | None:
    """Prompt for a previous receiver; ``None`` when nothing was chosen."""

    completer = ReceiverCompleter(store)
    kb = KeyBindings()
    _cycle: list[Receiver] = []
    _cycle_index = 0

    @kb.add("tab", eager=True)
    def _(event) -> None:
        nonlocal _cycle, _cycle_index
        b = event.app.current_buffer
        labels = [receiver_label(r) for r in _cycle]
        if b.document.text in labels:
            _cycle_index = (_cycle_index + 1) % len(_cycle)
        else:
            _cycle = completer.candidates(b.document.text)
            _cycle_index = 0
        if not _cycle:
            return
        b.text = receiver_label(_cycle[_cycle_index])
        b.cursor_position = len(b.text)

    @kb.add("down", eager=True)
    def _(event) -> None:  # pragma: no cover - integration path
        b = event.app.current_buffer
        if b.complete_state is None:
            b.start_completion(select_first=True)
        else:
            b.complete_next()

    @kb.add("enter", eager=True)
    def _(event) -> None:
        b = event.app.current_buffer
        cs = b.complete_state
        if cs is not None and cs.current_completion is not None:
            b.apply_completion(cs.current_completion)
        b.validate_and_handle()

    @kb.add("c-c", eager=True)
    def _(event) -> None:
        event.app.exit(result=None)

    if session is None:
        sess: PromptSession = PromptSession(key_bindings=kb)
    else:
        sess = PromptSession(
            input=getattr(session, "input", None),
            output=getattr(session, "output", None),
            key_bindings=kb,
        )

    prompt_kwargs: dict[str, Any] = {
        "message": message,
        "completer": completer,
        "complete_while_typing": False,
        "key_bindings": kb,
    }
    result = sess.prompt(**prompt_kwargs)
    if result is None:
        return None

    answer = result.strip()
    if not answer:
        return None
    if answer in completer.offered:
        return completer.offered[answer]
    # Typed a full label without cycling: search by its name part
    for r in completer.candidates(answer.split(" (", 1)[0]):
        if receiver_label(r) == answer:
            return r
    return None


__all__ = ["ReceiverCompleter", "receiver_label", "select_receiver"]
