"""Custom exceptions for BreakBot report processing."""

from __future__ import annotations


class BreakbotReportError(Exception):
    """Base exception for all breakbot-report errors."""


class MalformedReport(BreakbotReportError):
    """Raised when an analysis report violates its structural contract.

    A conforming producer never triggers this; it signals an upstream
    contract breach (a module with both a delta and an error, a broken
    use whose line range is reversed, or an unparsable payload).
    """

    def __init__(self, message: str, module_id: str | None = None) -> None:
        super().__init__(message)
        self.module_id = module_id


class ProducerFailure(BreakbotReportError):
    """Raised when the analysis service could not produce a report.

    The message is human-readable and meant to be shown as-is.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
