"""Price zones, the zone parser, and the closest-level tracker."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Iterable, List, Optional


class ZoneParseError(ValueError):
    """Committed text does not describe a zone."""

    def __init__(self, message: str, *, text: str = "") -> None:
        super().__init__(message)
        self.text = text


class Priority(str, Enum):
    """Credibility of a zone."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, raw: str) -> "Priority":
        key = raw.strip().lower()
        for priority, aliases in _PRIORITY_ALIASES.items():
            if key in aliases:
                return priority
        raise ZoneParseError(f"Unknown priority '{raw}'", text=raw)


_PRIORITY_ALIASES = {
    Priority.HIGH: {"high", "h", "1"},
    Priority.MEDIUM: {"medium", "med", "m", "2"},
    Priority.LOW: {"low", "l", "3"},
}


@total_ordering
@dataclass(frozen=True, slots=True)
class PriceLevel:
    value: float

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PriceLevel):
            return NotImplemented
        return self.value < other.value

    def __str__(self) -> str:
        return f"{self.value:,.2f}"


@dataclass(frozen=True, slots=True)
class Zone:
    """Resistance or support band between ``low`` and ``high``."""

    high: PriceLevel
    low: PriceLevel
    priority: Priority = Priority.MEDIUM

    def __post_init__(self) -> None:
        if self.low > self.high:
            high, low = self.low, self.high
            object.__setattr__(self, "high", high)
            object.__setattr__(self, "low", low)

    @classmethod
    def from_values(
        cls, high: float, low: float, priority: Priority = Priority.MEDIUM
    ) -> "Zone":
        return cls(PriceLevel(float(high)), PriceLevel(float(low)), priority)

    def contains(self, price: PriceLevel) -> bool:
        return self.low <= price <= self.high

    def describe(self) -> str:
        return f"[{self.priority.value:<6}] {self.low} - {self.high}"


_SEPARATORS = re.compile(r"[\s,;]+")


def is_valid_price(value: float) -> bool:
    return math.isfinite(value) and value > 0


def parse_zone(text: str) -> Zone:
    """Parse ``"<high> <low> [priority]"`` into a :class:`Zone`.

    Fields may be separated by whitespace, commas or semicolons; the two
    prices may come in either order.
    """

    parts = [part for part in _SEPARATORS.split(text.strip()) if part]
    if len(parts) not in (2, 3):
        raise ZoneParseError("Expected '<high> <low> [priority]'", text=text)

    prices: List[float] = []
    for raw in parts[:2]:
        try:
            value = float(raw)
        except ValueError:
            raise ZoneParseError(f"'{raw}' is not a price", text=text) from None
        if not is_valid_price(value):
            raise ZoneParseError(f"Price must be positive, got '{raw}'", text=text)
        prices.append(value)

    priority = Priority.parse(parts[2]) if len(parts) == 3 else Priority.MEDIUM
    return Zone.from_values(prices[0], prices[1], priority)


@dataclass
class ZoneManager:
    """Tracks configured zones and the boundaries nearest to the live price."""

    zones: List[Zone] = field(default_factory=list)
    up_closest: Optional[PriceLevel] = None
    down_closest: Optional[PriceLevel] = None
    last_price: Optional[PriceLevel] = None

    @classmethod
    def from_zones(cls, zones: Iterable[Zone]) -> "ZoneManager":
        return cls(zones=list(zones))

    def add(self, zone: Zone) -> None:
        self.zones.append(zone)
        self._refresh_closest()

    def pop(self) -> Optional[Zone]:
        if not self.zones:
            return None
        zone = self.zones.pop()
        self._refresh_closest()
        return zone

    def update(self, price: PriceLevel) -> List[Zone]:
        """Refresh the nearest boundaries and return zones holding ``price``."""

        self.last_price = price
        self._refresh_closest()
        return [zone for zone in self.zones if zone.contains(price)]

    def _refresh_closest(self) -> None:
        price = self.last_price
        if price is None:
            return
        above: Optional[PriceLevel] = None
        below: Optional[PriceLevel] = None
        for zone in self.zones:
            for level in (zone.low, zone.high):
                if level > price and (above is None or level < above):
                    above = level
                elif level < price and (below is None or level > below):
                    below = level
        self.up_closest = above
        self.down_closest = below


__all__ = [
    "PriceLevel",
    "Priority",
    "Zone",
    "ZoneManager",
    "ZoneParseError",
    "is_valid_price",
    "parse_zone",
]
