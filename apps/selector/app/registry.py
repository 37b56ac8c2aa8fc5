from __future__ import annotations

import asyncio
from collections import OrderedDict
from typing import Callable

from flight_selector import FlightSelector, SelectorConfig, ToastQueue
from shared.logging import get_logger

from .record_client import RecordToolClient

logger = get_logger(__name__)

SelectorFactory = Callable[[str], FlightSelector]

DEFAULT_MAX_SELECTORS = 1000


def record_tool_factory(base_url: str, timeout_s: float, config: SelectorConfig) -> SelectorFactory:
    client = RecordToolClient(base_url, timeout_s=timeout_s)

    def build(record_id: str) -> FlightSelector:
        return FlightSelector(record_id, client, notify=ToastQueue(config.toast_limit), config=config)

    return build


class SelectorRegistry:
    """
    One started FlightSelector per trip record, created on first use.

    At most `max_selectors` are kept; the least recently used one is closed
    and dropped when a new record would exceed the bound.
    """

    def __init__(self, factory: SelectorFactory, max_selectors: int = DEFAULT_MAX_SELECTORS):
        if max_selectors < 1:
            raise ValueError("max_selectors must be at least 1")
        self._factory = factory
        self._max = max_selectors
        self._selectors: "OrderedDict[str, FlightSelector]" = OrderedDict()
        self._lock = asyncio.Lock()

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._selectors

    def __len__(self) -> int:
        return len(self._selectors)

    async def get(self, record_id: str) -> FlightSelector:
        selector = self._selectors.get(record_id)
        if selector is not None:
            self._selectors.move_to_end(record_id)
            return selector
        async with self._lock:
            selector = self._selectors.get(record_id)
            if selector is None:
                selector = self._factory(record_id)
                await selector.start()
                await selector.wait_idle()
                self._selectors[record_id] = selector
                logger.info("selector_started record=%s", record_id)
                self._evict()
            else:
                self._selectors.move_to_end(record_id)
            return selector

    def _evict(self) -> None:
        while len(self._selectors) > self._max:
            record_id, selector = self._selectors.popitem(last=False)
            selector.close()
            logger.info("selector_evicted record=%s", record_id)

    def close(self) -> None:
        for selector in self._selectors.values():
            selector.close()
        self._selectors.clear()
