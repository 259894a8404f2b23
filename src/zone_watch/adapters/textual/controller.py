"""Textual-free adapter wiring the console and market bot into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from zone_watch.console import Console, ConsoleResult, InputMode
from zone_watch.input import KeyInput
from zone_watch.market import MarketBot, PricePoller


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(frozen=True, slots=True)
class InputLine:
    """Read-only view of the input engine for drawing the edit line."""

    text: str
    cursor: int
    byte_length: int
    mode: InputMode


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_input: Callable[[InputLine], None]
    update_status: Callable[[str], None] = _noop
    update_zones: Callable[[List[str]], None] = _noop
    update_price: Callable[[str], None] = _noop
    update_alerts: Callable[[List[str]], None] = _noop
    log: Callable[[str], None] = _noop


class TextualConsoleAdapter:
    """Bridges :class:`Console` and :class:`MarketBot` to a Textual surface."""

    def __init__(
        self,
        console: Console,
        hooks: TextualUIHooks,
        *,
        bot: Optional[MarketBot] = None,
        poller: Optional[PricePoller] = None,
    ) -> None:
        self.console = console
        self.hooks = hooks
        self.bot = bot
        self.poller = poller
        self._refresh_input()
        self._refresh_zones()
        self._refresh_alerts()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ConsoleResult:
        """Translate a normalized key into a :class:`KeyInput` and dispatch it."""

        normalized_modifiers = tuple(str(mod).upper() for mod in modifiers)
        self._log_state("key ->", key=key, text=text, mods=normalized_modifiers)
        result = self.console.handle_key(
            KeyInput(key=key, text=text, modifiers=normalized_modifiers)
        )
        self._after_console_result(result)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        return result

    def tick(self) -> None:
        """Feed the most recent polled price to the bot and refresh panels."""

        if self.bot is None:
            return
        price = self.poller.latest() if self.poller is not None else None
        alerts = self.bot.tick(price)
        if self.bot.live_price is not None:
            self.hooks.update_price(f"{self.bot.symbol} {self.bot.live_price}")
        if alerts:
            self.hooks.update_status(alerts[0].text())
            self._refresh_alerts()
            self._refresh_zones()

    def _after_console_result(self, result: ConsoleResult) -> None:
        if result.message:
            self.hooks.update_status(result.message)
        elif result.status not in {"ok", "noop"}:
            self.hooks.update_status(result.status)
        self._refresh_input()
        self._refresh_zones()

    def _refresh_input(self) -> None:
        engine = self.console.input
        self.hooks.update_input(
            InputLine(
                text=engine.text,
                cursor=engine.cursor_position,
                byte_length=engine.byte_length,
                mode=self.console.input_mode,
            )
        )

    def _refresh_zones(self) -> None:
        manager = self.console.zones
        lines = [zone.describe() for zone in manager.zones]
        if manager.up_closest is not None:
            lines.append(f"next up:   {manager.up_closest}")
        if manager.down_closest is not None:
            lines.append(f"next down: {manager.down_closest}")
        self.hooks.update_zones(lines)

    def _refresh_alerts(self) -> None:
        if self.bot is None:
            return
        self.hooks.update_alerts([alert.text() for alert in self.bot.alerts])

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        engine = self.console.input
        return {
            "mode": self.console.input_mode.value,
            "input": engine.text,
            "cursor": engine.cursor_position,
            "zones": len(self.console.zones.zones),
        }


__all__ = ["InputLine", "TextualConsoleAdapter", "TextualUIHooks"]
