"""Singleton logging configuration.

setup_logging() configures the root logger once and quiets the
HTTP client libraries, which log every request at INFO.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Third-party loggers to suppress to WARNING
_SUPPRESSED_LOGGERS = (
    "httpx",
    "httpcore",
)

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger and suppress noisy third-party loggers.

    Idempotent; a second call is a no-op.
    """
    global _configured  # noqa: PLW0603
    if _configured:
        return
    _configured = True

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
