"""Alerts raised when the live price enters a configured zone."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Deque, Iterator, Optional

from .zones import PriceLevel, Zone


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True, slots=True)
class ZoneAlert:
    """Price entered ``zone``; ``side`` is the suggested position."""

    price: PriceLevel
    side: Side
    zone: Zone
    time_created: float = field(default_factory=time.monotonic)

    def elapsed_time(self, now: Optional[Callable[[], float]] = None) -> int:
        clock = now or time.monotonic
        return int(clock() - self.time_created)

    def text(self) -> str:
        return (
            f"{self.side.value} @ {self.price} "
            f"in {self.zone.describe()} ({self.elapsed_time()}s ago)"
        )


def suggest_side(previous: Optional[PriceLevel], current: PriceLevel) -> Side:
    """Falling into a zone reads as support (buy), rising into it as resistance."""

    if previous is not None and current > previous:
        return Side.SELL
    return Side.BUY


class AlertLog:
    """Bounded, newest-first history of alerts."""

    def __init__(self, capacity: int = 20) -> None:
        self._alerts: Deque[ZoneAlert] = deque(maxlen=capacity)

    def push(self, alert: ZoneAlert) -> None:
        self._alerts.appendleft(alert)

    @property
    def latest(self) -> Optional[ZoneAlert]:
        return self._alerts[0] if self._alerts else None

    def __iter__(self) -> Iterator[ZoneAlert]:
        return iter(self._alerts)

    def __len__(self) -> int:
        return len(self._alerts)


__all__ = ["AlertLog", "Side", "ZoneAlert", "suggest_side"]
