"""Singleton logging configuration.

setup_logging() configures the root logger and quiets the HTTP client
loggers whose request/response chatter would bury classification
debug output. Idempotent (guarded by a module-level flag).
"""

import logging

from apperrors.config import get_settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Third-party loggers to suppress to WARNING
_SUPPRESSED_LOGGERS = (
    "httpx",
    "httpcore",
)

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configure root logger and suppress noisy transport loggers.

    ``level`` defaults to ``Settings.log_level``. Second call is a no-op.
    """
    global _configured  # noqa: PLW0603
    if _configured:
        return
    _configured = True

    if level is None:
        level = get_settings().log_level

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
