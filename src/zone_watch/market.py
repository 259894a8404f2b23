"""Market price feed, background poller, and the zone-watching bot."""

from __future__ import annotations

import queue
import threading
from typing import Any, List, Optional, Protocol

import requests

from zone_watch.runtime import telemetry

from .alerts import AlertLog, ZoneAlert, suggest_side
from .zones import PriceLevel, Zone, ZoneManager

MARKET_LOGGER = "zone_watch.market"
DEFAULT_BASE_URL = "https://api.binance.com"
DEFAULT_TIMEOUT = 10.0


class PriceFetchError(RuntimeError):
    """The price request failed or returned something unexpected."""


class PriceSource(Protocol):
    def fetch_price(self, symbol: str) -> float:
        """Return the latest traded price for ``symbol``."""
        ...


class BinancePriceSource:
    """Public Binance ``/api/v3/ticker/price`` client."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_price(self, symbol: str) -> float:
        url = f"{self.base_url}/api/v3/ticker/price"
        try:
            response = self.session.get(
                url, params={"symbol": symbol.upper()}, timeout=self.timeout
            )
            response.raise_for_status()
            payload: Any = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise PriceFetchError(f"price request for {symbol} failed: {exc}") from exc

        try:
            return float(payload["price"])
        except (KeyError, TypeError, ValueError) as exc:
            raise PriceFetchError(f"unexpected price payload {payload!r}") from exc


class PricePoller:
    """Samples a :class:`PriceSource` on a fixed interval in a daemon thread.

    Prices travel to the consumer through a single-producer/single-consumer
    queue. ``latest`` never blocks: it drains everything queued and keeps only
    the most recent value.
    """

    def __init__(
        self,
        source: PriceSource,
        symbol: str,
        *,
        interval: float = 2.0,
    ) -> None:
        self.source = source
        self.symbol = symbol
        self.interval = interval
        self.logger = telemetry.get_logger(MARKET_LOGGER)
        self._queue: "queue.Queue[PriceLevel]" = queue.Queue()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name=f"price-poller-{self.symbol}", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> Optional[PriceLevel]:
        """Fetch one sample and queue it; failures are logged and skipped."""

        try:
            price = PriceLevel(self.source.fetch_price(self.symbol))
        except PriceFetchError as exc:
            self.logger.warning(f"market::fetch_failed symbol={self.symbol} {exc}")
            return None
        self._queue.put(price)
        return price

    def latest(self) -> Optional[PriceLevel]:
        newest: Optional[PriceLevel] = None
        while True:
            try:
                newest = self._queue.get_nowait()
            except queue.Empty:
                return newest

    def _run(self) -> None:
        while True:
            self.poll_once()
            if self._stop.wait(self.interval):
                return


class MarketBot:
    """Holds the live price and checks it against the zones every few ticks."""

    UPDATE_TICKS = 5

    def __init__(
        self,
        symbol: str,
        zones: ZoneManager,
        *,
        update_ticks: int = UPDATE_TICKS,
        alerts: Optional[AlertLog] = None,
    ) -> None:
        self.symbol = symbol
        self.zones = zones
        self.update_ticks = update_ticks
        self.alerts = alerts if alerts is not None else AlertLog()
        self.live_price: Optional[PriceLevel] = None
        self.tick_count = 0
        self._analyzed_price: Optional[PriceLevel] = None
        self._inside: set[Zone] = set()

    def tick(self, price: Optional[PriceLevel]) -> List[ZoneAlert]:
        """Record ``price`` (if any) and analyze every ``update_ticks`` ticks."""

        if price is not None:
            self.live_price = price
        self.tick_count += 1
        if self.tick_count < self.update_ticks:
            return []
        self.tick_count = 0
        return self.analyze()

    def analyze(self) -> List[ZoneAlert]:
        price = self.live_price
        if price is None:
            return []

        inside = self.zones.update(price)
        entered = [zone for zone in inside if zone not in self._inside]
        side = suggest_side(self._analyzed_price, price)
        self._inside = set(inside)
        self._analyzed_price = price

        raised: List[ZoneAlert] = []
        for zone in entered:
            alert = ZoneAlert(price=price, side=side, zone=zone)
            self.alerts.push(alert)
            raised.append(alert)
            telemetry.record_event(
                "market.alert",
                level="warning",
                data={"symbol": self.symbol, "price": price.value, "side": side.value},
                logger_name=MARKET_LOGGER,
            )
        return raised


__all__ = [
    "BinancePriceSource",
    "MarketBot",
    "PriceFetchError",
    "PricePoller",
    "PriceSource",
]
