"""Diagnostics protocol - structured warning sink injected into core components."""

from __future__ import annotations

from typing import Protocol


class Diagnostics(Protocol):
    """Receives recoverable warnings (failed reads, missing metadata)."""

    def warning(self, message: str, **context: object) -> None:
        ...
