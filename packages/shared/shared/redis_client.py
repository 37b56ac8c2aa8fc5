from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RedisConfig:
    url: str
    socket_timeout: float = 1.0
    socket_connect_timeout: float = 1.0
    health_check_interval: int = 15

    @classmethod
    def from_env(cls) -> "RedisConfig":
        return cls(
            url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            socket_timeout=float(os.getenv("REDIS_SOCKET_TIMEOUT_S", "1.0")),
        )


class RedisClient:
    """
    Lazily connected async Redis client shared by the selector API.
    """

    def __init__(self, cfg: RedisConfig):
        self._cfg = cfg
        self._client: Optional[redis.Redis] = None

    @classmethod
    def from_env(cls) -> "RedisClient":
        return cls(RedisConfig.from_env())

    @property
    def url(self) -> str:
        return self._cfg.url

    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(
                self._cfg.url,
                decode_responses=True,
                socket_timeout=self._cfg.socket_timeout,
                socket_connect_timeout=self._cfg.socket_connect_timeout,
                health_check_interval=self._cfg.health_check_interval,
            )
        return self._client

    async def ping(self) -> bool:
        try:
            return bool(await self.client().ping())
        except RedisError as e:
            logger.warning("redis_ping_failed url=%s err=%r", self._cfg.url, e)
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
