"""Tiny terminal UI helpers (prompt_toolkit-based).

Kept separate from the CLI commands so the prompt can be driven in tests with
a pipe input and a dummy output.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.validation import ValidationError, Validator

from .models import Category


def is_interactive() -> bool:
    """Return True when both stdin and stdout are attached to a TTY."""

    try:
        return sys.stdin.isatty() and sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def match_category(text: str, options: Sequence[Category] = tuple(Category)) -> Category | None:
    """Resolve typed text to a category: exact (case-insensitive), then unique prefix."""

    t = text.strip().lower()
    if not t:
        return None
    for c in options:
        if c.value.lower() == t:
            return c
    prefixed = [c for c in options if c.value.lower().startswith(t)]
    if len(prefixed) == 1:
        return prefixed[0]
    return None


class _CategoryValidator(Validator):
    def __init__(self, options: Sequence[Category]) -> None:
        self._options = options

    def validate(self, document) -> None:
        if match_category(document.text, self._options) is None:
            allowed = ", ".join(c.value for c in self._options)
            raise ValidationError(
                message=f"Choose one of: {allowed}",
                cursor_position=len(document.text),
            )


def prompt_category(
    *,
    default: Category = Category.OTHER,
    options: Sequence[Category] = tuple(Category),
    message: str = "Category (Tab to complete, Enter to accept): ",
    session: PromptSession | None = None,
) -> Category:
    """Ask for a category with completion; the default is pre-filled.

    Typing a unique prefix (``"tra"``) is enough. Input that matches nothing
    is rejected inline until corrected.
    """

    completer = WordCompleter([c.value for c in options], ignore_case=True)
    sess: PromptSession = session or PromptSession()
    text = sess.prompt(
        message,
        default=default.value,
        completer=completer,
        complete_while_typing=True,
        validator=_CategoryValidator(options),
        validate_while_typing=False,
    )
    chosen = match_category(text, options)
    assert chosen is not None  # guaranteed by the validator
    return chosen


__all__ = ["is_interactive", "match_category", "prompt_category"]
