"""UTF-8 line buffer with incremental character accounting."""

from __future__ import annotations

from typing import Optional

from .state import Cursor


class InputInvariantError(RuntimeError):
    """Raised when the engine's internal model no longer matches its content.

    This signals a programming error inside the input package, never bad
    user input.
    """

    def __init__(self, message: str, *, cursor: Optional[Cursor] = None) -> None:
        super().__init__(message)
        self.cursor = cursor


def _is_lead_byte(byte: int) -> bool:
    return byte & 0xC0 != 0x80


def _sequence_width(lead: int) -> int:
    if lead < 0x80:
        return 1
    if lead < 0xE0:
        return 2
    if lead < 0xF0:
        return 3
    return 4


class TextBuffer:
    """Single line of text stored as UTF-8 bytes.

    ``char_count`` and ``multi_byte_count`` are maintained on every edit
    instead of being recomputed. While ``multi_byte_count`` is zero the line
    is pure ASCII and character ``i`` lives at byte ``i``; otherwise byte
    offsets are found by walking scalar boundaries from the start.
    """

    __slots__ = ("_data", "char_count", "multi_byte_count")

    def __init__(self) -> None:
        self._data = bytearray()
        self.char_count = 0
        self.multi_byte_count = 0

    @property
    def text(self) -> str:
        return self._data.decode("utf-8")

    @property
    def byte_length(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return self.char_count == 0

    def append(self, char: str) -> None:
        self._data += self._encode(char)

    def insert(self, index: int, char: str) -> None:
        if index < 0 or index > self.char_count:
            raise InputInvariantError(
                f"insert index {index} outside [0, {self.char_count}]"
            )
        offset = self._byte_offset(index)
        self._data[offset:offset] = self._encode(char)

    def remove(self, index: int) -> str:
        """Remove and return the character at ``index``."""

        if index < 0 or index >= self.char_count:
            raise InputInvariantError(
                f"remove index {index} outside [0, {self.char_count})"
            )
        start = self._byte_offset(index)
        width = _sequence_width(self._data[start])
        removed = bytes(self._data[start : start + width])
        del self._data[start : start + width]

        self.char_count -= 1
        if width > 1:
            self.multi_byte_count -= 1
        return removed.decode("utf-8")

    def take(self) -> str:
        """Move the contents out and leave the buffer empty."""

        text = self.text
        self.clear()
        return text

    def clear(self) -> None:
        self._data.clear()
        self.char_count = 0
        self.multi_byte_count = 0

    def verify(self) -> None:
        """Recount the content and compare it with the running counters."""

        text = self.text
        multi = sum(1 for char in text if len(char.encode("utf-8")) > 1)
        if len(text) != self.char_count or multi != self.multi_byte_count:
            raise InputInvariantError(
                f"counters drifted: chars={self.char_count}/{len(text)} "
                f"multi_byte={self.multi_byte_count}/{multi}"
            )

    def _encode(self, char: str) -> bytes:
        if len(char) != 1:
            raise InputInvariantError(f"expected a single character, got {char!r}")
        encoded = char.encode("utf-8")
        self.char_count += 1
        if len(encoded) > 1:
            self.multi_byte_count += 1
        return encoded

    def _byte_offset(self, index: int) -> int:
        if self.multi_byte_count == 0:
            return index
        if index == self.char_count:
            return len(self._data)

        seen = 0
        for offset, byte in enumerate(self._data):
            if _is_lead_byte(byte):
                if seen == index:
                    return offset
                seen += 1
        raise InputInvariantError(f"no character boundary for index {index}")

    def __len__(self) -> int:
        return self.char_count

    def __repr__(self) -> str:
        return (
            f"TextBuffer(text={self.text!r}, chars={self.char_count}, "
            f"multi_byte={self.multi_byte_count})"
        )


__all__ = ["InputInvariantError", "TextBuffer"]
