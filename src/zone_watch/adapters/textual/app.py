"""Executable Textual app hosting the zone console."""

from __future__ import annotations

import argparse
import dataclasses
from typing import List, Optional, Sequence, Tuple

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Static

from zone_watch.console import Console, InputMode
from zone_watch.market import BinancePriceSource, MarketBot, PricePoller
from zone_watch.runtime import Settings, telemetry
from zone_watch.save import SaveFileError, load_or_create
from zone_watch.zones import ZoneManager

from .controller import InputLine, TextualConsoleAdapter, TextualUIHooks

NAMED_KEYS = {
    "backspace": "BACKSPACE",
    "delete": "DELETE",
    "left": "LEFT",
    "right": "RIGHT",
    "home": "HOME",
    "end": "END",
    "up": "UP",
    "down": "DOWN",
    "enter": "ENTER",
    "escape": "ESC",
}


NormalizedKey = Tuple[str, Optional[str], Tuple[str, ...]]


def normalize_key(
    key: str, character: Optional[str], printable: bool
) -> Optional[NormalizedKey]:
    """Map a Textual key name to ``(token, text, modifiers)``."""

    if key == "ctrl+c":
        return None
    if key in NAMED_KEYS:
        return (NAMED_KEYS[key], None, ())
    if printable and character:
        return (character, character, ())
    if "+" in key:
        *mods, base = key.split("+")
        token = NAMED_KEYS.get(base, base.upper())
        return (token, None, tuple(mod.upper() for mod in mods))
    return (key.upper(), None, ())


def render_input_line(line: InputLine) -> Text:
    """Draw the edit line with a reverse-video caret at ``line.cursor``."""

    prompt_style = "bold yellow" if line.mode is InputMode.EDITING else "dim"
    rendered = Text("> ", style=prompt_style)
    if line.mode is not InputMode.EDITING:
        rendered.append("press e to add a zone, q to quit", style="dim")
        return rendered

    before = line.text[: line.cursor]
    under = line.text[line.cursor : line.cursor + 1] or " "
    after = line.text[line.cursor + 1 :]
    rendered.append(before)
    rendered.append(under, style="reverse")
    rendered.append(after)
    return rendered


class ZoneWatchApp(App[None]):
    """Zone list, alerts and a single input line over a live price."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#price-line {
		height: 1;
		padding: 0 1;
		text-style: bold;
	}

	#panels {
		height: 1fr;
	}

	#zones-view, #alerts-view {
		width: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#input-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
    ]

    def __init__(self, settings: Settings, zones: ZoneManager) -> None:
        super().__init__()
        self.settings = settings
        self.zones = zones
        self.adapter: TextualConsoleAdapter | None = None
        self.poller: PricePoller | None = None
        self.logger = telemetry.get_logger("zone_watch.app")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static("waiting for price...", id="price-line")
        with Horizontal(id="panels"):
            yield Static("", id="zones-view")
            yield Static("", id="alerts-view")
        yield Static("", id="input-line")
        yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        self.title = f"zone-watch {self.settings.symbol}"
        zones_view = self.query_one("#zones-view", Static)
        alerts_view = self.query_one("#alerts-view", Static)
        zones_view.border_title = "Zones"
        alerts_view.border_title = "Alerts"

        source = BinancePriceSource(
            base_url=self.settings.api_url, timeout=self.settings.http_timeout
        )
        self.poller = PricePoller(
            source, self.settings.symbol, interval=self.settings.tick_interval
        )
        bot = MarketBot(
            self.settings.symbol, self.zones, update_ticks=self.settings.analyze_ticks
        )
        console = Console(self.zones, save_path=self.settings.save_file)
        hooks = TextualUIHooks(
            update_input=self._update_input,
            update_status=self._update_static("#status-line"),
            update_price=self._update_static("#price-line"),
            update_zones=self._update_lines("#zones-view"),
            update_alerts=self._update_lines("#alerts-view"),
            log=self.logger.debug,
        )
        self.adapter = TextualConsoleAdapter(
            console, hooks, bot=bot, poller=self.poller
        )
        self.poller.start()
        self.set_interval(self.settings.tick_interval, self.adapter.tick)

    def on_unmount(self) -> None:
        if self.poller is not None:
            self.poller.stop(timeout=1.0)
            self.poller = None

    async def on_key(self, event: events.Key) -> None:
        if self.adapter is None:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()
        if self.adapter.console.should_exit():
            self.exit()

    def _update_input(self, line: InputLine) -> None:
        self.query_one("#input-line", Static).update(render_input_line(line))

    def _update_static(self, selector: str):
        def update(value: str) -> None:
            self.query_one(selector, Static).update(Text(value))

        return update

    def _update_lines(self, selector: str):
        def update(lines: List[str]) -> None:
            self.query_one(selector, Static).update(Text("\n".join(lines)))

        return update

    @staticmethod
    def _normalize_key(event: events.Key) -> Optional[NormalizedKey]:
        return normalize_key(event.key, event.character, event.is_printable)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch price zones in the terminal.")
    parser.add_argument("--symbol", help="Market symbol to poll (e.g. ETHUSDT)")
    parser.add_argument("--save-file", help="Zone configuration file")
    parser.add_argument(
        "--tick-interval", type=float, help="Seconds between price samples"
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production"),
        default="production",
        help="Telemetry preset (default: production, logs to a file)",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    settings = base or Settings.from_env()
    overrides = {}
    if args.symbol:
        overrides["symbol"] = args.symbol.upper()
    if args.save_file:
        overrides["save_file"] = args.save_file
    if args.tick_interval and args.tick_interval > 0:
        overrides["tick_interval"] = args.tick_interval
    return dataclasses.replace(settings, **overrides)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    settings = build_settings(args)
    try:
        data = load_or_create(settings.save_file)
    except SaveFileError as exc:
        raise SystemExit(f"An error occurred while parsing the save file: {exc}")
    app = ZoneWatchApp(settings, ZoneManager.from_zones(data.zones))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
