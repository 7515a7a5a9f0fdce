from __future__ import annotations

import logging
from typing import Optional


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class TruncatingFormatter(logging.Formatter):
    """Formatter that shortens very long messages.

    Query dumps and API error bodies can run to several kilobytes; keep the
    terminal readable while leaving normal log lines untouched.
    """

    def __init__(self, fmt: Optional[str] = LOG_FORMAT, max_length: int = 500) -> None:
        super().__init__(fmt)
        self.max_length = max_length

    def formatMessage(self, record: logging.LogRecord) -> str:
        if len(record.message) > self.max_length:
            record.message = record.message[: self.max_length] + "... [truncated]"
        return super().formatMessage(record)


def configure_logging(level: int | str = logging.INFO, max_length: int = 500) -> logging.Logger:
    """Install a single stream handler on the ``center_offers`` logger."""
    logger = logging.getLogger("center_offers")
    logger.setLevel(level)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = logging.StreamHandler()
    handler.setFormatter(TruncatingFormatter(max_length=max_length))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
