import pytest

from fakes import make_service

from flight_selector import FlightSelector, ToastQueue
from selector_api.registry import SelectorRegistry


class CountingFactory:
    def __init__(self):
        self.built = []

    def __call__(self, record_id):
        selector = FlightSelector(record_id, make_service(), notify=ToastQueue())
        self.built.append(selector)
        return selector


@pytest.mark.asyncio
async def test_selector_is_started_once_per_record():
    factory = CountingFactory()
    registry = SelectorRegistry(factory)

    first = await registry.get("trip-1")
    again = await registry.get("trip-1")

    assert first is again
    assert len(factory.built) == 1
    assert first.available_flights
    registry.close()


@pytest.mark.asyncio
async def test_least_recently_used_selector_is_closed_and_dropped():
    factory = CountingFactory()
    registry = SelectorRegistry(factory, max_selectors=2)

    a = await registry.get("trip-a")
    await registry.get("trip-b")
    await registry.get("trip-a")
    await registry.get("trip-c")

    assert "trip-a" in registry
    assert "trip-b" not in registry
    assert "trip-c" in registry
    assert len(registry) == 2

    evicted = factory.built[1]
    assert await evicted.trip_feed.refresh() is None
    assert await a.trip_feed.refresh() is not None
    registry.close()


def test_bound_must_be_positive():
    with pytest.raises(ValueError):
        SelectorRegistry(CountingFactory(), max_selectors=0)
