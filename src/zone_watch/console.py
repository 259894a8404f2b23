"""Session controller routing keys between the input engine and controls."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional

from zone_watch.runtime import telemetry

from .input import Cancel, Commit, CompletionSignal, InputEngine, KeyInput
from .save import save_data
from .zones import ZoneManager, ZoneParseError, parse_zone

CONSOLE_LOGGER = "zone_watch.console"


class InputMode(str, Enum):
    EDITING = "editing"
    CONTROL = "control"


@dataclass(slots=True)
class ConsoleResult:
    """Outcome of one key press as seen by the UI."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    signal: Optional[CompletionSignal] = None


class Console:
    """Owns the input engine, the zone list and the mode switch.

    In Editing mode every key goes to the :class:`InputEngine`. A commit is
    parsed into a zone, stored and saved; a cancel drops back to Control mode.
    Control mode maps single keys to session commands.
    """

    def __init__(
        self,
        zones: ZoneManager,
        *,
        save_path: Optional[str | Path] = None,
        input_engine: Optional[InputEngine] = None,
        mode: InputMode = InputMode.EDITING,
    ) -> None:
        self.zones = zones
        self.save_path = Path(save_path) if save_path is not None else None
        self.input = input_engine or InputEngine()
        self._mode = mode
        self._exit = False
        self.logger = telemetry.get_logger(CONSOLE_LOGGER)
        self._controls: Dict[str, Callable[[], ConsoleResult]] = {
            "e": self._enter_editing,
            "i": self._enter_editing,
            "s": self._save,
            "d": self._remove_last_zone,
            "q": self._request_exit,
            "ESC": self._request_exit,
        }

    @property
    def input_mode(self) -> InputMode:
        return self._mode

    def should_exit(self) -> bool:
        return self._exit

    def handle_key(self, key: KeyInput) -> ConsoleResult:
        with telemetry.span(
            name=f"console::{self._mode.value}",
            component=True,
            metadata={"key": key.token, "mode": self._mode.value},
            logger_name=CONSOLE_LOGGER,
        ):
            if self._mode is InputMode.EDITING:
                return self.process_editing(key)
            return self.process_controls(key)

    def process_editing(self, key: KeyInput) -> ConsoleResult:
        signal = self.input.process_key(key)
        if signal is None:
            return ConsoleResult(consumed=True)
        if isinstance(signal, Commit):
            return self._commit(signal)
        return self._cancel(signal)

    def process_controls(self, key: KeyInput) -> ConsoleResult:
        command = self._controls.get(key.key)
        if command is None or key.modifiers:
            return ConsoleResult(consumed=False)
        return command()

    def switch_mode(self, mode: InputMode) -> None:
        if mode is self._mode:
            return
        self._mode = mode
        telemetry.record_event(
            "mode.switch", data={"mode": mode.value}, logger_name=CONSOLE_LOGGER
        )

    def _commit(self, signal: Commit) -> ConsoleResult:
        text = signal.text.strip()
        if not text:
            self.switch_mode(InputMode.CONTROL)
            return ConsoleResult(consumed=True, status="commit", signal=signal)

        try:
            zone = parse_zone(text)
        except ZoneParseError as exc:
            self.logger.warning(f"console::bad_zone text={text!r} {exc}")
            return ConsoleResult(
                consumed=True, status="error", message=str(exc), signal=signal
            )

        self.zones.add(zone)
        telemetry.record_event(
            "zone.add",
            data={
                "high": zone.high.value,
                "low": zone.low.value,
                "priority": zone.priority.value,
            },
            logger_name=CONSOLE_LOGGER,
        )
        save_error = self._persist()
        self.switch_mode(InputMode.CONTROL)
        if save_error is not None:
            return ConsoleResult(
                consumed=True, status="error", message=save_error, signal=signal
            )
        return ConsoleResult(
            consumed=True,
            status="commit",
            message=f"Added zone {zone.describe()}",
            signal=signal,
        )

    def _cancel(self, signal: Cancel) -> ConsoleResult:
        self.switch_mode(InputMode.CONTROL)
        return ConsoleResult(consumed=True, status="cancel", signal=signal)

    def _enter_editing(self) -> ConsoleResult:
        self.switch_mode(InputMode.EDITING)
        return ConsoleResult(consumed=True, status="editing")

    def _save(self) -> ConsoleResult:
        if self.save_path is None:
            return ConsoleResult(consumed=True, status="error", message="No save file")
        save_error = self._persist()
        if save_error is not None:
            return ConsoleResult(consumed=True, status="error", message=save_error)
        return ConsoleResult(
            consumed=True, status="saved", message=f"Saved {self.save_path}"
        )

    def _remove_last_zone(self) -> ConsoleResult:
        zone = self.zones.pop()
        if zone is None:
            return ConsoleResult(consumed=True, status="noop", message="No zones")
        save_error = self._persist()
        if save_error is not None:
            return ConsoleResult(consumed=True, status="error", message=save_error)
        return ConsoleResult(
            consumed=True, status="removed", message=f"Removed {zone.describe()}"
        )

    def _request_exit(self) -> ConsoleResult:
        self._exit = True
        return ConsoleResult(consumed=True, status="exit")

    def _persist(self) -> Optional[str]:
        """Write the zones to ``save_path``; returns an error message on failure."""

        if self.save_path is None:
            return None
        try:
            save_data(self.save_path, self.zones.zones)
        except OSError as exc:
            self.logger.warning(f"console::save_failed path={self.save_path} {exc}")
            return f"Could not save {self.save_path}: {exc.strerror or exc}"
        return None


__all__ = ["Console", "ConsoleResult", "InputMode"]
