import pytest

from shared.limits import RedisRateLimiter


class FakeRedis:
    def __init__(self):
        self.counts = {}
        self.expiries = {}

    async def incr(self, key):
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key, seconds):
        self.expiries[key] = seconds


@pytest.mark.asyncio
async def test_allows_up_to_limit_within_a_minute():
    r = FakeRedis()
    limiter = RedisRateLimiter(r, per_minute=2, clock=lambda: 120.0 + 15)

    first = await limiter.check("sess:a", "select_flight")
    second = await limiter.check("sess:a", "select_flight")
    third = await limiter.check("sess:a", "select_flight")

    assert (first.allowed, first.remaining) == (True, 1)
    assert (second.allowed, second.remaining) == (True, 0)
    assert third.allowed is False
    assert third.reset_in_seconds == 45
    assert r.expiries == {"rl:sess:a:select_flight:2": 75}


@pytest.mark.asyncio
async def test_windows_are_per_user_and_action():
    r = FakeRedis()
    limiter = RedisRateLimiter(r, per_minute=1, clock=lambda: 60.0)

    assert (await limiter.check("sess:a", "select_flight")).allowed
    assert (await limiter.check("sess:b", "select_flight")).allowed
    assert (await limiter.check("sess:a", "clear_flight")).allowed
