import contextlib

from prompt_toolkit import PromptSession
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from expense_analysis.models import Category
from expense_analysis.term_ui import match_category, prompt_category


@contextlib.contextmanager
def pipe_session():
    with create_pipe_input() as pipe:
        sess = PromptSession(input=pipe, output=DummyOutput())
        yield pipe, sess


def test_enter_accepts_default():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\r")
        assert prompt_category(default=Category.BILLS, session=sess) is Category.BILLS


def test_typed_exact_value_replaces_default():
    with pipe_session() as (pipe, sess):
        # Ctrl-A (home), Ctrl-K (kill to end), type, Enter
        pipe.send_text("\x01\x0bEntertainment\r")
        assert prompt_category(session=sess) is Category.ENTERTAINMENT


def test_unique_prefix_is_accepted():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\x01\x0btra\r")
        assert prompt_category(session=sess) is Category.TRANSPORTATION


def test_invalid_entry_is_rejected_until_corrected():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\x01\x0bGroceries\r")
        pipe.send_text("\x01\x0bFood\r")
        assert prompt_category(session=sess) is Category.FOOD


def test_match_category():
    assert match_category("food") is Category.FOOD
    assert match_category(" SH ") is Category.SHOPPING
    assert match_category("") is None
    assert match_category("x") is None
