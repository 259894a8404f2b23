"""Cursor positions and completion signals for the input engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class AtIndex:
    """Cursor sitting before the character at ``index``."""

    index: int


@dataclass(frozen=True, slots=True)
class AtEnd:
    """Cursor sitting after the last character.

    Kept apart from ``AtIndex(char_count)`` so that typing at the end of the
    line appends without any index bookkeeping.
    """


AT_END = AtEnd()

Cursor = Union[AtIndex, AtEnd]


@dataclass(frozen=True, slots=True)
class Commit:
    """Enter was pressed; ``text`` is the line as it stood."""

    text: str


@dataclass(frozen=True, slots=True)
class Cancel:
    """Escape was pressed on an empty line."""


CompletionSignal = Union[Commit, Cancel]


__all__ = [
    "AT_END",
    "AtEnd",
    "AtIndex",
    "Cancel",
    "Commit",
    "CompletionSignal",
    "Cursor",
]
