from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from zone_watch.console import Console, InputMode
from zone_watch.input import Cancel, Commit, KeyInput
from zone_watch.zones import Priority, Zone, ZoneManager


def make_console(save_path: Optional[Path] = None) -> Console:
    return Console(ZoneManager(), save_path=save_path)


def type_line(console: Console, text: str) -> None:
    for char in text:
        console.handle_key(KeyInput.char(char))


def test_console_starts_in_editing_mode() -> None:
    console = make_console()

    assert console.input_mode is InputMode.EDITING
    assert console.should_exit() is False


def test_commit_adds_zone_saves_and_switches_to_control(tmp_path: Path) -> None:
    path = tmp_path / "bot_data.json"
    console = make_console(path)

    type_line(console, "2100 2050 high")
    result = console.handle_key(KeyInput.named("ENTER"))

    assert result.status == "commit"
    assert result.signal == Commit("2100 2050 high")
    assert console.zones.zones == [Zone.from_values(2100, 2050, Priority.HIGH)]
    assert console.input_mode is InputMode.CONTROL
    assert json.loads(path.read_text())["zones"][0]["priority"] == "High"


def test_invalid_commit_stays_in_editing() -> None:
    console = make_console()

    type_line(console, "hello")
    result = console.handle_key(KeyInput.named("ENTER"))

    assert result.status == "error"
    assert result.message
    assert console.zones.zones == []
    assert console.input_mode is InputMode.EDITING
    assert console.input.text == ""


def test_empty_commit_returns_to_control_without_zone() -> None:
    console = make_console()

    result = console.handle_key(KeyInput.named("ENTER"))

    assert result.signal == Commit("")
    assert console.zones.zones == []
    assert console.input_mode is InputMode.CONTROL


def test_escape_clears_then_cancels() -> None:
    console = make_console()
    type_line(console, "21")

    first = console.handle_key(KeyInput.named("ESC"))
    assert first.signal is None
    assert console.input_mode is InputMode.EDITING

    second = console.handle_key(KeyInput.named("ESC"))
    assert second.signal == Cancel()
    assert second.status == "cancel"
    assert console.input_mode is InputMode.CONTROL
    assert console.should_exit() is False


def test_control_keys() -> None:
    console = Console(
        ZoneManager.from_zones([Zone.from_values(10, 5)]),
        mode=InputMode.CONTROL,
    )

    removed = console.handle_key(KeyInput.char("d"))
    assert removed.status == "removed"
    assert console.zones.zones == []

    assert console.handle_key(KeyInput.char("x")).consumed is False

    console.handle_key(KeyInput.char("e"))
    assert console.input_mode is InputMode.EDITING

    console.handle_key(KeyInput.named("ESC"))
    console.handle_key(KeyInput.char("q"))
    assert console.should_exit() is True


def test_control_letters_are_text_while_editing() -> None:
    console = make_console()

    type_line(console, "qed")

    assert console.input.text == "qed"
    assert console.should_exit() is False


def test_save_without_path_reports_error() -> None:
    console = Console(ZoneManager(), mode=InputMode.CONTROL)

    result = console.handle_key(KeyInput.char("s"))

    assert result.status == "error"


def test_commit_with_unwritable_save_path_keeps_zone(tmp_path: Path) -> None:
    path = tmp_path / "missing" / "bot_data.json"
    console = make_console(path)

    type_line(console, "2100 2050")
    result = console.handle_key(KeyInput.named("ENTER"))

    assert result.status == "error"
    assert result.message and "Could not save" in result.message
    assert result.signal == Commit("2100 2050")
    assert console.zones.zones == [Zone.from_values(2100, 2050)]
    assert console.input_mode is InputMode.CONTROL
    assert not path.exists()


def test_save_and_remove_report_write_failures(tmp_path: Path) -> None:
    console = Console(
        ZoneManager.from_zones([Zone.from_values(10, 5)]),
        save_path=tmp_path / "missing" / "bot_data.json",
        mode=InputMode.CONTROL,
    )

    saved = console.handle_key(KeyInput.char("s"))
    assert saved.status == "error"

    removed = console.handle_key(KeyInput.char("d"))
    assert removed.status == "error"
    assert console.zones.zones == []
    assert console.should_exit() is False
