from __future__ import annotations

from typing import Any, List, Optional

import pytest
import requests

from zone_watch.alerts import Side
from zone_watch.market import (
    BinancePriceSource,
    MarketBot,
    PriceFetchError,
    PricePoller,
)
from zone_watch.zones import PriceLevel, Zone, ZoneManager


class FakeSource:
    def __init__(self, prices: List[float], fail_on: Optional[int] = None) -> None:
        self.prices = list(prices)
        self.calls = 0
        self.fail_on = fail_on

    def fetch_price(self, symbol: str) -> float:
        self.calls += 1
        if self.fail_on == self.calls:
            raise PriceFetchError("boom")
        return self.prices.pop(0)


class FakeResponse:
    def __init__(self, payload: Any, status_error: bool = False) -> None:
        self.payload = payload
        self.status_error = status_error

    def raise_for_status(self) -> None:
        if self.status_error:
            raise requests.HTTPError("500")

    def json(self) -> Any:
        return self.payload


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.requests: List[tuple[str, dict]] = []

    def get(self, url: str, params: dict, timeout: float) -> FakeResponse:
        self.requests.append((url, params))
        return self.response


def test_binance_source_parses_price() -> None:
    session = FakeSession(FakeResponse({"symbol": "ETHUSDT", "price": "2075.50"}))
    source = BinancePriceSource(base_url="https://example.test/", session=session)

    assert source.fetch_price("ethusdt") == 2075.5
    assert session.requests == [
        ("https://example.test/api/v3/ticker/price", {"symbol": "ETHUSDT"})
    ]


@pytest.mark.parametrize(
    "response",
    [FakeResponse({}, status_error=True), FakeResponse({"code": -1121})],
)
def test_binance_source_wraps_failures(response: FakeResponse) -> None:
    source = BinancePriceSource(session=FakeSession(response))

    with pytest.raises(PriceFetchError):
        source.fetch_price("ETHUSDT")


def test_poller_latest_drains_to_most_recent() -> None:
    poller = PricePoller(FakeSource([1.0, 2.0, 3.0]), "ETHUSDT")

    for _ in range(3):
        poller.poll_once()

    assert poller.latest() == PriceLevel(3.0)
    assert poller.latest() is None


def test_poller_skips_failed_samples() -> None:
    poller = PricePoller(FakeSource([5.0], fail_on=1), "ETHUSDT")

    assert poller.poll_once() is None
    assert poller.poll_once() == PriceLevel(5.0)
    assert poller.latest() == PriceLevel(5.0)


def test_poller_thread_start_and_stop() -> None:
    poller = PricePoller(FakeSource([7.0] * 100), "ETHUSDT", interval=0.01)

    poller.start()
    assert poller.running
    poller.stop(timeout=1.0)

    assert not poller.running
    assert poller.latest() == PriceLevel(7.0)


def make_bot(update_ticks: int = 1) -> MarketBot:
    zones = ZoneManager.from_zones([Zone.from_values(2100, 2050)])
    return MarketBot("ETHUSDT", zones, update_ticks=update_ticks)


def test_bot_analyzes_every_n_ticks() -> None:
    bot = make_bot(update_ticks=3)

    assert bot.tick(PriceLevel(2075)) == []
    assert bot.tick(None) == []
    alerts = bot.tick(None)

    assert len(alerts) == 1
    assert bot.tick_count == 0
    assert bot.live_price == PriceLevel(2075)


def test_bot_alerts_once_per_zone_entry() -> None:
    bot = make_bot()

    assert bot.tick(PriceLevel(2200)) == []
    entered = bot.tick(PriceLevel(2090))
    stayed = bot.tick(PriceLevel(2080))
    bot.tick(PriceLevel(2000))
    reentered = bot.tick(PriceLevel(2060))

    assert len(entered) == 1
    assert entered[0].side is Side.BUY
    assert stayed == []
    assert len(reentered) == 1
    assert reentered[0].side is Side.SELL
    assert len(bot.alerts) == 2
    assert bot.alerts.latest is reentered[0]


def test_bot_without_price_does_not_analyze() -> None:
    bot = make_bot()

    assert bot.tick(None) == []
    assert bot.zones.up_closest is None
