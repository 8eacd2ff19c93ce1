import contextlib

import pytest
from prompt_toolkit import PromptSession
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from momo_assist.term_ui import receiver_label, select_receiver


@contextlib.contextmanager
def pipe_session():
    with create_pipe_input() as pipe:
        sess = PromptSession(input=pipe, output=DummyOutput())
        yield pipe, sess


@pytest.fixture
def seeded(store, clock):
    store.upsert("Alice", "0788123456")
    clock.advance()
    store.upsert("Alina", "0722000111")
    clock.advance()
    store.upsert("Bob", "774455")
    return store


def test_tab_on_empty_input_picks_most_recent(seeded):
    with pipe_session() as (pipe, sess):
        pipe.send_text("\t\r")
        chosen = select_receiver(seeded, session=sess)
    assert chosen is not None
    assert chosen.name == "Bob"


def test_tab_completes_search_match(seeded):
    with pipe_session() as (pipe, sess):
        pipe.send_text("Alic\t\r")
        chosen = select_receiver(seeded, session=sess)
    assert chosen is not None
    assert (chosen.name, chosen.number) == ("Alice", "0788123456")


def test_repeated_tab_cycles_matches_by_recency(seeded):
    with pipe_session() as (pipe, sess):
        pipe.send_text("ali\t\t\r")
        chosen = select_receiver(seeded, session=sess)
    # "Alina" is more recent, so the second Tab lands on "Alice"
    assert chosen is not None
    assert chosen.name == "Alice"


def test_typing_a_full_label_selects_it(seeded):
    with pipe_session() as (pipe, sess):
        pipe.send_text("Alice (0788123456)\r")
        chosen = select_receiver(seeded, session=sess)
    assert chosen is not None
    assert chosen.id == 1


@pytest.mark.parametrize("keys", ["\r", "zzz\r", "Carol (0788000000)\r"])
def test_unknown_or_empty_input_returns_none(seeded, keys):
    with pipe_session() as (pipe, sess):
        pipe.send_text(keys)
        assert select_receiver(seeded, session=sess) is None


def test_ctrl_c_cancels(seeded):
    with pipe_session() as (pipe, sess):
        pipe.send_text("Al\x03")
        assert select_receiver(seeded, session=sess) is None


def test_receiver_label(seeded):
    recent = seeded.recent()
    assert [receiver_label(r) for r in recent] == [
        "Bob (774455)",
        "Alina (0722000111)",
        "Alice (0788123456)",
    ]
