"""
Push-style data feeds.

A feed owns one query (its params) and delivers a FeedResult to every
subscriber each time the query is fetched. Only the most recently issued
fetch may deliver: a result is dropped when the params changed or another
fetch was started while it was in flight.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from shared.logging import get_logger

from .errors import error_message

logger = get_logger(__name__)

P = TypeVar("P")
T = TypeVar("T")


@dataclass(frozen=True)
class FeedResult(Generic[T]):
    data: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_message(self) -> str:
        return error_message(self.error) if self.error is not None else ""


Listener = Callable[[FeedResult[T]], None]


class Feed(Generic[P, T]):
    def __init__(self, name: str, fetch: Callable[[P], Awaitable[T]], params: Optional[P] = None):
        self.name = name
        self._fetch = fetch
        self._params = params
        self._listeners: List[Listener] = []
        self._latest: Optional[FeedResult[T]] = None
        self._closed = False
        self._seq = 0

    @property
    def params(self) -> Optional[P]:
        return self._params

    @property
    def latest(self) -> Optional[FeedResult[T]]:
        return self._latest

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_params(self, params: Optional[P]) -> bool:
        """Returns True when the params actually changed."""
        if params == self._params:
            return False
        self._params = params
        return True

    async def refresh(self) -> Optional[FeedResult[T]]:
        """
        Fetch with the current params and deliver the result.
        Returns None when nothing was delivered (no params, stale, or closed).
        """
        params = self._params
        if params is None or self._closed:
            return None
        self._seq += 1
        seq = self._seq

        try:
            result: FeedResult[T] = FeedResult(data=await self._fetch(params))
        except Exception as e:
            result = FeedResult(error=e)

        if self._closed:
            return None
        if seq != self._seq or params != self._params:
            logger.debug("feed_result_stale feed=%s seq=%s latest=%s params=%s", self.name, seq, self._seq, params)
            return None

        self._latest = result
        for listener in list(self._listeners):
            listener(result)
        return result

    def close(self) -> None:
        self._closed = True
        self._listeners.clear()
