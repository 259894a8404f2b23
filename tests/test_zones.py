import pytest

from zone_watch.zones import (
    PriceLevel,
    Priority,
    Zone,
    ZoneManager,
    ZoneParseError,
    parse_zone,
)


def make_zone(high: float, low: float, priority: Priority = Priority.MEDIUM) -> Zone:
    return Zone.from_values(high, low, priority)


def test_parse_zone_with_priority() -> None:
    zone = parse_zone("2100 2050 high")

    assert zone == make_zone(2100, 2050, Priority.HIGH)


def test_parse_zone_defaults_to_medium_and_accepts_commas() -> None:
    zone = parse_zone(" 1850.5, 1900 ")

    assert zone.high == PriceLevel(1900.0)
    assert zone.low == PriceLevel(1850.5)
    assert zone.priority is Priority.MEDIUM


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("h", Priority.HIGH), ("LOW", Priority.LOW), ("2", Priority.MEDIUM)],
)
def test_parse_zone_priority_aliases(raw: str, expected: Priority) -> None:
    assert parse_zone(f"10 5 {raw}").priority is expected


@pytest.mark.parametrize(
    "text",
    ["", "2100", "2100 abc", "2100 -5", "1 2 3 4", "2100 2050 urgent", "nan 5"],
)
def test_parse_zone_rejects_bad_input(text: str) -> None:
    with pytest.raises(ZoneParseError):
        parse_zone(text)


def test_zone_contains_inclusive_bounds() -> None:
    zone = make_zone(2100, 2050)

    assert zone.contains(PriceLevel(2050))
    assert zone.contains(PriceLevel(2100))
    assert not zone.contains(PriceLevel(2100.01))


def test_manager_update_tracks_closest_levels() -> None:
    manager = ZoneManager.from_zones(
        [make_zone(2100, 2050), make_zone(1900, 1850), make_zone(2400, 2300)]
    )

    inside = manager.update(PriceLevel(2000))

    assert inside == []
    assert manager.up_closest == PriceLevel(2050)
    assert manager.down_closest == PriceLevel(1900)


def test_manager_update_inside_zone() -> None:
    zone = make_zone(2100, 2050)
    manager = ZoneManager.from_zones([zone])

    inside = manager.update(PriceLevel(2075))

    assert inside == [zone]
    assert manager.up_closest == PriceLevel(2100)
    assert manager.down_closest == PriceLevel(2050)


def test_manager_update_without_levels_above() -> None:
    manager = ZoneManager.from_zones([make_zone(100, 90)])

    manager.update(PriceLevel(500))

    assert manager.up_closest is None
    assert manager.down_closest == PriceLevel(100)


def test_manager_pop_returns_last_zone() -> None:
    manager = ZoneManager()
    assert manager.pop() is None

    manager.add(make_zone(10, 5))

    assert manager.pop() == make_zone(10, 5)
    assert manager.zones == []


def test_manager_pop_recomputes_closest_levels() -> None:
    manager = ZoneManager.from_zones([make_zone(1900, 1850), make_zone(2100, 2050)])
    manager.update(PriceLevel(2000))
    assert manager.up_closest == PriceLevel(2050)

    manager.pop()

    assert manager.up_closest is None
    assert manager.down_closest == PriceLevel(1900)


def test_manager_add_recomputes_closest_levels_after_a_price() -> None:
    manager = ZoneManager()
    manager.add(make_zone(10, 5))
    assert manager.up_closest is None

    manager.update(PriceLevel(20))
    manager.add(make_zone(40, 30))

    assert manager.up_closest == PriceLevel(30)
    assert manager.down_closest == PriceLevel(10)
