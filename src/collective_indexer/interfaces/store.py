"""IndexerStore protocol - persists entities derived from contract events."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from collective_indexer.models.records import (
    AdminEventRecord,
    BalanceRecord,
    CollectiveRecord,
    ContractRecord,
    EventRecord,
)

CollectiveUpdate = Callable[[CollectiveRecord], CollectiveRecord]


class IndexerStore(Protocol):
    """Keyed document store for Collectives, Events and their metadata."""

    # ── Lifecycle ──────────────────────────────────────────

    async def initialize(self) -> None:
        """Create tables if they don't exist."""
        ...

    async def close(self) -> None:
        ...

    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Group writes so they commit together or roll back together."""
        ...

    # ── Cursor ─────────────────────────────────────────────

    async def get_cursor(self) -> int | None:
        ...

    async def set_cursor(self, block_number: int) -> None:
        ...

    # ── Contracts ──────────────────────────────────────────

    async def get_contract(self, address: str) -> ContractRecord | None:
        ...

    async def save_contract(self, record: ContractRecord) -> None:
        ...

    # ── Balances ───────────────────────────────────────────

    async def get_balance(self, fan: str, collective: str) -> BalanceRecord | None:
        ...

    async def save_balance(self, record: BalanceRecord) -> None:
        ...

    # ── Collectives ────────────────────────────────────────

    async def get_collective(self, address: str) -> CollectiveRecord | None:
        ...

    async def upsert_collective(
        self,
        address: str,
        create: CollectiveRecord,
        update: CollectiveUpdate,
    ) -> CollectiveRecord:
        """Insert `create`, or replace the row with `update(current)`.

        `update` receives the persisted row, read in the same transaction
        as the write.
        """
        ...

    # ── Events ─────────────────────────────────────────────

    async def create_event(self, record: EventRecord) -> None:
        """Insert a new Event. Raises RecordExistsError on a duplicate id."""
        ...

    async def get_event(self, event_id: str) -> EventRecord | None:
        ...

    async def find_trade_events(self, collective: str, from_block: int) -> list[EventRecord]:
        """Buy/sell Events for a collective at or after `from_block`, oldest first."""
        ...

    async def get_events_for_collective(
        self, collective: str, limit: int = 50
    ) -> list[EventRecord]:
        ...

    # ── Admin events ───────────────────────────────────────

    async def create_admin_event(self, record: AdminEventRecord) -> None:
        ...

    async def get_admin_event(self, event_id: str) -> AdminEventRecord | None:
        ...
