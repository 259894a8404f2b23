"""Line-editing input engine."""

from .buffer import InputInvariantError, TextBuffer
from .engine import InputEngine
from .keys import EDITING_BINDINGS, KeyInput
from .state import AT_END, AtEnd, AtIndex, Cancel, Commit, CompletionSignal, Cursor

__all__ = [
    "AT_END",
    "AtEnd",
    "AtIndex",
    "Cancel",
    "Commit",
    "CompletionSignal",
    "Cursor",
    "EDITING_BINDINGS",
    "InputEngine",
    "InputInvariantError",
    "KeyInput",
    "TextBuffer",
]
