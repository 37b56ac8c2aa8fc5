from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class SelectorConfig:
    # wait between clearing and re-writing an assignment
    settle_seconds: float = 0.5
    timezone: str = "UTC"
    # more candidates than this switches the grid to scrollable
    scroll_threshold: int = 3
    toast_limit: int = 50

    @classmethod
    def from_env(cls) -> "SelectorConfig":
        return cls(
            settle_seconds=int(os.getenv("SELECTOR_SETTLE_MS", "500")) / 1000.0,
            timezone=os.getenv("SELECTOR_TIMEZONE", "UTC"),
            scroll_threshold=int(os.getenv("SELECTOR_SCROLL_THRESHOLD", "3")),
            toast_limit=int(os.getenv("SELECTOR_TOAST_LIMIT", "50")),
        )

    def tz(self) -> tzinfo:
        if self.timezone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.timezone)
