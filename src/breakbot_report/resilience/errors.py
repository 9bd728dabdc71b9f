"""Error classification for analysis service requests.

Classifies producer exceptions by category to decide:
- which failures are worth another attempt (transient/server/timeout)
- which error class a failure is logged with
"""

from __future__ import annotations

from enum import Enum

import httpx


class ErrorClass(Enum):
    TRANSIENT = "transient"  # 429, connection errors, retryable
    SERVER = "server"  # 500, 502, 503, 504, retryable
    TIMEOUT = "timeout"  # read/connect deadline exceeded, retryable
    CLIENT = "client"  # 400, 404, 422, do NOT retry
    UNKNOWN = "unknown"  # unclassified, do NOT retry


def _from_status(status_code: int) -> ErrorClass:
    if status_code == 429:
        return ErrorClass.TRANSIENT
    if 400 <= status_code < 500:
        return ErrorClass.CLIENT
    if 500 <= status_code < 600:
        return ErrorClass.SERVER
    return ErrorClass.UNKNOWN


def classify_error(error: BaseException) -> ErrorClass:
    """Classify an error to determine handling strategy.

    The producer sees two kinds of failure: httpx transport errors
    raised by the request itself, and ProducerFailure raised for a
    response that arrived with a non-200 status.
    """
    if isinstance(error, httpx.TimeoutException):
        return ErrorClass.TIMEOUT
    if isinstance(error, httpx.TransportError):
        return ErrorClass.TRANSIENT

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        return _from_status(status_code)

    return ErrorClass.UNKNOWN


_RETRYABLE = frozenset({
    ErrorClass.TRANSIENT,
    ErrorClass.SERVER,
    ErrorClass.TIMEOUT,
})


def is_retryable(error: BaseException) -> bool:
    """Return True if the error category supports retry."""
    return classify_error(error) in _RETRYABLE
