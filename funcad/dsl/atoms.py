"""Recognizers for the lexical atoms of the funcad language.

Each recognizer looks at ``text`` starting at ``index`` and either returns an
:class:`AtomMatch` describing the longest atom found there, or ``None``.  The
recognizers never skip whitespace: atoms cannot contain any, and callers are
responsible for skipping it between atoms.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Optional

LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
NONZERO_DIGITS = DIGITS - {"0"}
EXPONENT_MARKERS = frozenset("eE")
SIGNS = frozenset("+-")

PARENT_STEP = "../"


@dataclass(frozen=True, slots=True)
class AtomMatch:
    """Result of a successful atom recognition.

    ``parts`` holds the identifier pieces of composite atoms: ``(module,
    function)`` or ``(function,)`` for function names, the path segments for
    file names.  ``up_levels`` counts the leading ``../`` steps of a file name.
    """

    kind: str
    text: str
    start: int
    end: int
    parts: tuple[str, ...] = ()
    up_levels: int = 0


def _char(text: str, index: int) -> str:
    return text[index : index + 1]


def _skip_digits(text: str, index: int) -> int:
    while _char(text, index) in DIGITS:
        index += 1
    return index


def match_identifier(text: str, index: int) -> Optional[AtomMatch]:
    """Match a letter followed by any number of letters and digits."""

    if _char(text, index) not in LETTERS:
        return None
    end = index + 1
    while _char(text, end) in LETTERS or _char(text, end) in DIGITS:
        end += 1
    return AtomMatch("identifier", text[index:end], index, end)


def match_number(text: str, index: int) -> Optional[AtomMatch]:
    """Match a decimal number such as ``0``, ``-12.``, ``3.25`` or ``1e-9``."""

    end = index
    if _char(text, end) == "-":
        end += 1
    head = _char(text, end)
    if head == "0":
        end += 1
    elif head in NONZERO_DIGITS:
        end = _skip_digits(text, end + 1)
    else:
        return None
    if _char(text, end) == ".":
        end = _skip_digits(text, end + 1)
    if _char(text, end) in EXPONENT_MARKERS:
        exponent = end + 1
        if _char(text, exponent) in SIGNS:
            exponent += 1
        if _char(text, exponent) in DIGITS:
            end = _skip_digits(text, exponent)
    return AtomMatch("number", text[index:end], index, end)


def match_func_name(text: str, index: int) -> Optional[AtomMatch]:
    """Match ``name`` or ``module.name``."""

    first = match_identifier(text, index)
    if first is None:
        return None
    if _char(text, first.end) == ".":
        second = match_identifier(text, first.end + 1)
        if second is not None:
            return AtomMatch(
                "function name",
                text[index : second.end],
                index,
                second.end,
                parts=(first.text, second.text),
            )
    return AtomMatch("function name", first.text, index, first.end, parts=(first.text,))


def match_file_name(text: str, index: int) -> Optional[AtomMatch]:
    """Match a relative path like ``a``, ``lib/geo`` or ``../../shared/util``."""

    end = index
    up_levels = 0
    while text.startswith(PARENT_STEP, end):
        up_levels += 1
        end += len(PARENT_STEP)
    segment = match_identifier(text, end)
    if segment is None:
        return None
    segments = [segment.text]
    end = segment.end
    while _char(text, end) == "/":
        segment = match_identifier(text, end + 1)
        if segment is None:
            break
        segments.append(segment.text)
        end = segment.end
    return AtomMatch(
        "file name",
        text[index:end],
        index,
        end,
        parts=tuple(segments),
        up_levels=up_levels,
    )


def is_identifier(text: str) -> bool:
    """Return True when the whole of ``text`` is a single identifier."""

    found = match_identifier(text, 0)
    return found is not None and found.end == len(text)


__all__ = [
    "AtomMatch",
    "is_identifier",
    "match_file_name",
    "match_func_name",
    "match_identifier",
    "match_number",
]
