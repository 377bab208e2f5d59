"""Helpers for working with strings and lists of strings."""

from __future__ import annotations

import base64
from collections import Counter
from collections.abc import Iterable, Sequence

__all__ = [
    "diff",
    "include",
    "unique",
    "camel_case_to_underscore",
    "underscore_to_camel_case",
    "find_string",
    "string_in",
    "reverse",
    "remove_all",
    "add",
    "contains",
    "frequency_sort",
    "contains_equal_fold",
    "decode_base64",
]


def diff(base: Iterable[str], exclude: Iterable[str]) -> list[str]:
    """Return the items of ``base`` that do not appear in ``exclude``."""
    excluded = set(exclude)
    return [item for item in base if item not in excluded]


def include(base: Iterable[str], include: Iterable[str]) -> list[str]:
    """Return the items of ``include`` that also appear in ``base``."""
    known = set(base)
    return [item for item in include if item in known]


def unique(items: Iterable[str]) -> list[str]:
    """Return the distinct items, each once, in order of first appearance."""
    return list(dict.fromkeys(items))


def camel_case_to_underscore(text: str) -> str:
    """Convert ``CamelCase`` to ``camel_case``; digits stay in their segment."""
    segments: list[str] = []
    current: list[str] = []
    for ch in text:
        if not ch.islower() and ch != "_" and not ch.isnumeric():
            if current:
                segments.append("".join(current))
            current = []
        current.append(ch.lower())
    if current:
        segments.append("".join(current))
    return "_".join(segments)


def _is_separator(ch: str) -> bool:
    if ch.isascii():
        return not (ch.isalnum() or ch == "_")
    if ch.isalpha() or ch.isdecimal():
        return False
    return ch.isspace()


def _title(text: str) -> str:
    result = []
    previous = " "
    for ch in text:
        result.append(ch.title() if _is_separator(previous) else ch)
        previous = ch
    return "".join(result)


def underscore_to_camel_case(text: str) -> str:
    """Convert ``snake_case`` (or space separated words) to ``SnakeCase``."""
    return _title(text.lower().replace("_", " ")).replace(" ", "")


def find_string(items: Sequence[str], text: str) -> int:
    """Return the index of ``text`` in ``items``, or -1 if it is absent."""
    for index, item in enumerate(items):
        if item == text:
            return index
    return -1


def string_in(text: str, items: Sequence[str]) -> bool:
    """Whether ``text`` is one of ``items``."""
    return find_string(items, text) > -1


def reverse(text: str) -> str:
    """Return ``text`` with its characters in reverse order."""
    return text[::-1]


def remove_all(items: Iterable[str], value: str) -> list[str]:
    """Return ``items`` without any occurrence of ``value``."""
    return [item for item in items if item != value]


def add(items: Sequence[str], value: str) -> list[str]:
    """Return ``items`` with ``value`` appended unless it is already present."""
    if value in items:
        return list(items)
    return [*items, value]


def contains(items: Iterable[str], value: str) -> bool:
    """Whether ``value`` is one of ``items``."""
    return any(item == value for item in items)


def frequency_sort(items: Iterable[str]) -> list[str]:
    """Return the distinct items ordered from least to most frequent.

    Items with the same frequency keep the order of their first appearance.
    """
    counts = Counter(items)
    return sorted(counts, key=counts.__getitem__)


def contains_equal_fold(items: Iterable[str], text: str) -> bool:
    """Whether ``text`` is one of ``items``, ignoring case."""
    folded = text.casefold()
    return any(item.casefold() == folded for item in items)


def decode_base64(text: str) -> bytes:
    """Decode standard, padded base64; line breaks in the input are ignored.

    Raises ``binascii.Error`` (a ``ValueError``) on malformed input.
    """
    cleaned = text.replace("\r", "").replace("\n", "")
    return base64.b64decode(cleaned, validate=True)