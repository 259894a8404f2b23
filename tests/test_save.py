import json
from pathlib import Path

import pytest

from zone_watch.save import (
    SaveFileError,
    load_or_create,
    load_save,
    new_save,
    save_data,
)
from zone_watch.zones import Priority, Zone


def test_save_then_load_keeps_zones(tmp_path: Path) -> None:
    path = tmp_path / "bot_data.json"
    zones = [
        Zone.from_values(2100, 2050, Priority.HIGH),
        Zone.from_values(1900, 1850, Priority.LOW),
    ]

    save_data(path, zones)

    assert load_save(path).zones == zones


def test_save_file_layout(tmp_path: Path) -> None:
    path = tmp_path / "bot_data.json"

    save_data(path, [Zone.from_values(2100, 2050, Priority.HIGH)])

    assert json.loads(path.read_text()) == {
        "zones": [{"priority": "High", "high": 2100.0, "low": 2050.0}]
    }


def test_load_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_save(tmp_path / "missing.json")


def test_load_or_create_creates_empty_save(tmp_path: Path) -> None:
    path = tmp_path / "bot_data.json"

    data = load_or_create(path)

    assert data.zones == []
    assert load_save(path).zones == []


def test_new_save_is_loadable(tmp_path: Path) -> None:
    path = tmp_path / "bot_data.json"

    new_save(path)

    assert json.loads(path.read_text()) == {"zones": []}


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[]",
        '{"zones": {}}',
        '{"zones": [{"priority": "Urgent", "high": 1, "low": 2}]}',
        '{"zones": [{"priority": "High", "high": 1}]}',
        '{"zones": [{"priority": "High", "high": -1, "low": 2}]}',
        '{"zones": [{"priority": "Low", "high": NaN, "low": 2}]}',
        '{"zones": [{"priority": "Low", "high": 0, "low": 2}]}',
        '{"zones": [{"priority": "Low", "high": "abc", "low": 2}]}',
    ],
)
def test_load_invalid_save_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "bot_data.json"
    path.write_text(content)

    with pytest.raises(SaveFileError):
        load_save(path)
