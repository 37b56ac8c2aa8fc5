from __future__ import annotations

from typing import Optional


class SelectorError(Exception):
    """Base class for errors raised by flight selector collaborators."""

    @property
    def message(self) -> str:
        return str(self)


class RecordToolError(SelectorError):
    """A record tool call failed; `message` carries the server's explanation."""

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


def error_message(err: BaseException) -> str:
    if isinstance(err, SelectorError):
        return err.message
    return str(err) or err.__class__.__name__
