"""Textual host for the zone console."""

from .controller import InputLine, TextualConsoleAdapter, TextualUIHooks

__all__ = ["InputLine", "TextualConsoleAdapter", "TextualUIHooks"]
