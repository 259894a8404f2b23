"""Single-line input engine driven by key events."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from zone_watch.runtime import telemetry

from .buffer import InputInvariantError, TextBuffer
from .keys import KeyInput
from .state import AT_END, AtEnd, AtIndex, Cancel, Commit, CompletionSignal, Cursor

INPUT_LOGGER = "zone_watch.input"


class InputEngine:
    """Cursor-addressable line editor.

    Owns a :class:`TextBuffer` and a :class:`Cursor`. ``process_key`` applies
    one key event and returns ``None`` while editing continues, ``Commit`` on
    Enter, or ``Cancel`` on Escape over an empty line. The caller decides what
    happens after a completion signal; the engine only resets itself.
    """

    def __init__(self) -> None:
        self._buffer = TextBuffer()
        self._cursor: Cursor = AT_END
        self.logger = telemetry.get_logger(INPUT_LOGGER)
        self._operations: Dict[str, Callable[[], Optional[CompletionSignal]]] = {
            "backspace": self.backspace,
            "delete": self.delete,
            "move_left": self.move_left,
            "move_right": self.move_right,
            "move_home": self.move_home,
            "move_end": self.move_end,
            "enter": self.enter,
            "escape": self.escape,
        }

    # -- read-only accessors ----------------------------------------------

    @property
    def text(self) -> str:
        return self._buffer.text

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    @property
    def cursor_position(self) -> int:
        if isinstance(self._cursor, AtIndex):
            return self._cursor.index
        return self._buffer.char_count

    @property
    def byte_length(self) -> int:
        return self._buffer.byte_length

    @property
    def char_count(self) -> int:
        return self._buffer.char_count

    @property
    def multi_byte_count(self) -> int:
        return self._buffer.multi_byte_count

    # -- dispatch ----------------------------------------------------------

    def process_key(self, event: KeyInput) -> Optional[CompletionSignal]:
        operation = event.binding()
        if operation is not None:
            return self._operations[operation]()

        char = event.character()
        if char is not None:
            self.insert_char(char)
        return None

    # -- edits -------------------------------------------------------------

    def insert_char(self, char: str) -> None:
        cursor = self._cursor
        if isinstance(cursor, AtEnd):
            self._buffer.append(char)
            return
        self._check_index(cursor.index)
        self._buffer.insert(cursor.index, char)
        self._cursor = AtIndex(cursor.index + 1)

    def backspace(self) -> None:
        cursor = self._cursor
        if isinstance(cursor, AtEnd):
            if not self._buffer.is_empty():
                self._buffer.remove(self._buffer.char_count - 1)
            return

        if cursor.index == 0:
            return
        self._check_index(cursor.index)
        self._buffer.remove(cursor.index - 1)
        if self._buffer.is_empty():
            self._cursor = AT_END
        else:
            self._cursor = AtIndex(cursor.index - 1)

    def delete(self) -> None:
        cursor = self._cursor
        if isinstance(cursor, AtEnd):
            return
        self._check_index(cursor.index)
        if cursor.index >= self._buffer.char_count:
            return
        self._buffer.remove(cursor.index)
        if cursor.index == self._buffer.char_count:
            self._cursor = AT_END

    # -- cursor movement ---------------------------------------------------

    def move_left(self) -> None:
        cursor = self._cursor
        if isinstance(cursor, AtEnd):
            if not self._buffer.is_empty():
                self._cursor = AtIndex(self._buffer.char_count - 1)
        elif cursor.index > 0:
            self._cursor = AtIndex(cursor.index - 1)

    def move_right(self) -> None:
        cursor = self._cursor
        if isinstance(cursor, AtEnd):
            return
        following = cursor.index + 1
        if following >= self._buffer.char_count:
            self._cursor = AT_END
        else:
            self._cursor = AtIndex(following)

    def move_home(self) -> None:
        # An empty line has no position other than the end.
        if not self._buffer.is_empty():
            self._cursor = AtIndex(0)

    def move_end(self) -> None:
        self._cursor = AT_END

    # -- completion --------------------------------------------------------

    def enter(self) -> Commit:
        text = self._buffer.take()
        self._cursor = AT_END
        self.logger.debug(f"input::commit chars={len(text)}")
        return Commit(text)

    def escape(self) -> Optional[Cancel]:
        if self._buffer.is_empty():
            if not isinstance(self._cursor, AtEnd):
                raise InputInvariantError(
                    "empty buffer with a positioned cursor", cursor=self._cursor
                )
            self.logger.debug("input::cancel")
            return Cancel()
        self.clear()
        return None

    def clear(self) -> None:
        self._buffer.clear()
        self._cursor = AT_END

    def verify(self) -> None:
        """Check every invariant; raises :class:`InputInvariantError`."""

        self._buffer.verify()
        if self._buffer.is_empty() and not isinstance(self._cursor, AtEnd):
            raise InputInvariantError(
                "empty buffer with a positioned cursor", cursor=self._cursor
            )
        if isinstance(self._cursor, AtIndex):
            self._check_index(self._cursor.index)

    def _check_index(self, index: int) -> None:
        if index < 0 or index > self._buffer.char_count:
            raise InputInvariantError(
                f"cursor index {index} outside [0, {self._buffer.char_count}]",
                cursor=self._cursor,
            )

    def __str__(self) -> str:
        return (
            f"buf: {self.text}, len: {self.byte_length}, "
            f"chars: {self.char_count}, cursor pos: {self.cursor_position}"
        )


__all__ = ["InputEngine"]
