"""EventSource protocol - delivers decoded contract events in block order."""

from __future__ import annotations

from typing import Protocol

from collective_indexer.models.events import IndexedEvent


class EventSource(Protocol):
    """Polls for new contract events from the vote contracts."""

    async def poll(self) -> list[IndexedEvent]:
        """Fetch new events since the last cursor. Returns decoded events."""
        ...

    def get_cursor(self) -> int | None:
        """Next block to fetch, for persistence across restarts."""
        ...

    def set_cursor(self, block_number: int) -> None:
        ...
