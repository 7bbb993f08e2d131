"""Vendor identity resolution.

A record's vendor is its explicit ``vendor`` field when one was entered;
otherwise it is extracted from the free-text description with a small set of
heuristics ("Lunch at X", "Gas from X", "X - Dinner", first three words).
Both functions are total: they never raise on well-formed records and always
return the same output for the same input.
"""

from __future__ import annotations

import re

from .models import ExpenseRecord, normalize_vendor

# Descriptions this short without a connective are taken to be vendor names.
SHORT_DESCRIPTION_MAX_LEN = 25
MAX_VENDOR_WORDS = 3

_AT_RE = re.compile(r" at ", re.IGNORECASE)
_FROM_RE = re.compile(r" from ", re.IGNORECASE)
_DASH = " - "


def _has_connective(text: str) -> bool:
    return bool(_AT_RE.search(text) or _FROM_RE.search(text) or _DASH in text)


def _after_connective(text: str, pattern: re.Pattern[str]) -> str | None:
    m = pattern.search(text)
    if m is None or m.start() == 0:
        return None
    tail = text[m.end() :].strip()
    return tail or None


def extract_vendor_name(description: str) -> str:
    """Best-effort vendor name from a free-text description.

    Examples
    --------
    >>> extract_vendor_name("Lunch at McDonald's")
    "McDonald's"
    >>> extract_vendor_name("Walmart - Groceries")
    'Walmart'
    >>> extract_vendor_name("Generic grocery store purchase")
    'Generic grocery store'
    """

    cleaned = description.strip()

    if len(cleaned) <= SHORT_DESCRIPTION_MAX_LEN and not _has_connective(cleaned):
        return cleaned

    for pattern in (_AT_RE, _FROM_RE):
        vendor = _after_connective(cleaned, pattern)
        if vendor is not None:
            return vendor

    head, sep, _tail = cleaned.partition(_DASH)
    if sep and head.strip():
        return head.strip()

    words = cleaned.split()
    if len(words) <= MAX_VENDOR_WORDS:
        return cleaned
    return " ".join(words[:MAX_VENDOR_WORDS])


def resolve_vendor_name(record: ExpenseRecord) -> str:
    """Return the canonical vendor identity for ``record``.

    An explicit, non-blank ``vendor`` always wins over the description, even
    when the description names a different vendor.
    """

    explicit = normalize_vendor(record.vendor)
    if explicit is not None:
        return explicit
    return extract_vendor_name(record.description)


__all__ = ["extract_vendor_name", "resolve_vendor_name"]
