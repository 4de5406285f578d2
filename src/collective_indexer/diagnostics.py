"""Default diagnostics sink backed by the logging module."""

from __future__ import annotations

import logging

log = logging.getLogger(__name__)


class LoggingDiagnostics:
    """Implements the Diagnostics protocol by forwarding to a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or log

    def warning(self, message: str, **context: object) -> None:
        if context:
            details = ", ".join(f"{key}={value}" for key, value in context.items())
            self._log.warning("%s (%s)", message, details)
        else:
            self._log.warning("%s", message)
