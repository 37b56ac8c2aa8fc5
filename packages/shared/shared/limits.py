from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import redis.asyncio as redis


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    limit: int
    reset_in_seconds: int


class RedisRateLimiter:
    """
    Fixed-window rate limiter for user actions.
    Key: rl:{user}:{action}:{epoch_minute}
    """

    def __init__(self, r: redis.Redis, per_minute: int, clock: Callable[[], float] = time.time):
        self.r = r
        self.per_minute = per_minute
        self._clock = clock

    def key(self, user_key: str, action: str, epoch_minute: int) -> str:
        return f"rl:{user_key}:{action}:{epoch_minute}"

    async def check(self, user_key: str, action: str) -> RateLimitResult:
        now = int(self._clock())
        key = self.key(user_key, action, now // 60)

        count = await self.r.incr(key)
        if count == 1:
            # window plus slack so late increments in the same minute still expire
            await self.r.expire(key, 75)

        return RateLimitResult(
            allowed=count <= self.per_minute,
            remaining=max(self.per_minute - count, 0),
            limit=self.per_minute,
            reset_in_seconds=60 - (now % 60),
        )
