"""Load and store the zone configuration file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping

from zone_watch.runtime import telemetry

from .zones import Priority, Zone, is_valid_price

SAVE_LOGGER = "zone_watch.save"


class SaveFileError(RuntimeError):
    """The save file exists but does not hold valid zone data."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(f"{message} ({path})")
        self.path = path


@dataclass(slots=True)
class SaveData:
    zones: List[Zone] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "SaveData":
        return cls()

    def to_json(self) -> dict[str, Any]:
        return {
            "zones": [
                {
                    "priority": zone.priority.value,
                    "high": zone.high.value,
                    "low": zone.low.value,
                }
                for zone in self.zones
            ]
        }

    @classmethod
    def from_json(cls, payload: Any) -> "SaveData":
        if not isinstance(payload, Mapping) or not isinstance(
            payload.get("zones"), list
        ):
            raise ValueError("expected an object with a 'zones' list")
        return cls(zones=[_zone_from_json(entry) for entry in payload["zones"]])


def _zone_from_json(entry: Any) -> Zone:
    if not isinstance(entry, Mapping):
        raise ValueError(f"zone entry must be an object, got {entry!r}")
    try:
        priority = Priority(entry["priority"])
        high = float(entry["high"])
        low = float(entry["low"])
    except (KeyError, TypeError) as exc:
        raise ValueError(f"malformed zone entry {entry!r}") from exc
    if not (is_valid_price(high) and is_valid_price(low)):
        raise ValueError(f"zone prices must be positive, got {entry!r}")
    return Zone.from_values(high, low, priority)


def load_save(path: str | Path) -> SaveData:
    """Read ``path``; raises ``FileNotFoundError`` when it is missing."""

    target = Path(path)
    raw = target.read_bytes()
    logger = telemetry.get_logger(SAVE_LOGGER)
    logger.info(f"save::found path={target}")
    try:
        return SaveData.from_json(json.loads(raw))
    except ValueError as exc:
        raise SaveFileError(f"Invalid save data: {exc}", path=target) from exc


def save_data(path: str | Path, zones: Iterable[Zone]) -> None:
    target = Path(path)
    if not target.exists():
        telemetry.get_logger(SAVE_LOGGER).warning(
            f"save::missing path={target} recreating with in-memory zones"
        )
    data = SaveData(zones=list(zones))
    target.write_text(json.dumps(data.to_json(), indent=2), encoding="utf-8")
    telemetry.record_event(
        "save.write",
        data={"path": str(target), "zones": len(data.zones)},
        logger_name=SAVE_LOGGER,
    )


def new_save(path: str | Path) -> SaveData:
    target = Path(path)
    telemetry.get_logger(SAVE_LOGGER).info(f"save::create path={target}")
    data = SaveData.empty()
    target.write_text(json.dumps(data.to_json()), encoding="utf-8")
    return data


def load_or_create(path: str | Path) -> SaveData:
    try:
        return load_save(path)
    except FileNotFoundError:
        return new_save(path)


__all__ = [
    "SaveData",
    "SaveFileError",
    "load_or_create",
    "load_save",
    "new_save",
    "save_data",
]
