"""Normalized key events and the editing key table."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

# Modifiers that turn a printable key into a shortcut rather than text.
SHORTCUT_MODIFIERS = frozenset({"CTRL", "ALT", "META"})

# Key token -> InputEngine operation. Up/Down are intentionally absent: there
# is no input history to recall.
EDITING_BINDINGS: Mapping[str, str] = MappingProxyType(
    {
        "BACKSPACE": "backspace",
        "DELETE": "delete",
        "LEFT": "move_left",
        "RIGHT": "move_right",
        "HOME": "move_home",
        "END": "move_end",
        "ENTER": "enter",
        "ESC": "escape",
    }
)


@dataclass(frozen=True, slots=True)
class KeyInput:
    """Key event as delivered by a terminal adapter.

    ``key`` is an upper-case token for named keys (``"LEFT"``, ``"ESC"``) or
    the character itself for printable keys; ``text`` carries the produced
    character, if any.
    """

    key: str
    text: Optional[str] = None
    modifiers: Tuple[str, ...] = ()

    @classmethod
    def char(cls, value: str) -> "KeyInput":
        return cls(key=value, text=value)

    @classmethod
    def named(cls, token: str) -> "KeyInput":
        return cls(key=token.upper())

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join(self.modifiers) + f"+{self.key}"
        return self.key

    def binding(self) -> Optional[str]:
        """Editing operation bound to this key, if any."""

        if SHORTCUT_MODIFIERS.intersection(self.modifiers):
            return None
        return EDITING_BINDINGS.get(self.key)

    def character(self) -> Optional[str]:
        """The single character this key inserts, or ``None``."""

        if SHORTCUT_MODIFIERS.intersection(self.modifiers):
            return None
        value = self.text
        if value is None or len(value) != 1:
            return None
        if not value.isprintable() or "\ud800" <= value <= "\udfff":
            return None
        return value


__all__ = ["EDITING_BINDINGS", "KeyInput", "SHORTCUT_MODIFIERS"]
