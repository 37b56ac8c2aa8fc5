from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from typing import Deque, List

from shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Toast:
    title: str
    message: str
    variant: str

    def to_dict(self) -> dict:
        return asdict(self)


class ToastQueue:
    """
    Notification sink that buffers toasts until the presentation layer drains them.
    Oldest toasts are dropped once `limit` is reached.
    """

    def __init__(self, limit: int = 50):
        self._toasts: Deque[Toast] = deque(maxlen=limit)

    def __call__(self, title: str, message: str, variant: str) -> None:
        logger.info("toast variant=%s title=%s message=%s", variant, title, message)
        self._toasts.append(Toast(title=title, message=message, variant=variant))

    def __len__(self) -> int:
        return len(self._toasts)

    def peek(self) -> List[Toast]:
        return list(self._toasts)

    def drain(self) -> List[Toast]:
        out = list(self._toasts)
        self._toasts.clear()
        return out
