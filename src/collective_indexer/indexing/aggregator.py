"""Collective aggregate state - merges on-chain reads into the stored Collective.

Each upsert is split into a read phase (block timestamp, contract
metadata, on-chain reads, prior balance, price history) and a pure merge
phase. The merge functions below take the current row and the read
results and return the new row. The store applies them inside its
read-modify-write transaction.

Repeated delivery of the same event is not idempotent: the fan count
delta and `last_event_id` are applied again. Exactly-once delivery is
the event source's responsibility.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from collective_indexer.chain.reader import OnchainReader
from collective_indexer.diagnostics import LoggingDiagnostics
from collective_indexer.indexing.change import ChangeCalculator
from collective_indexer.indexing.classifier import collective_price
from collective_indexer.interfaces.chain import BlockClock
from collective_indexer.interfaces.diagnostics import Diagnostics
from collective_indexer.interfaces.store import IndexerStore
from collective_indexer.models.events import (
    AdminCollectiveEvent,
    CollectiveWinningsDistributed,
    FanbaseSet,
    PositionVerified,
    UserEvent,
)
from collective_indexer.models.records import CollectiveRecord, OnchainSnapshot

log = logging.getLogger(__name__)


# ── Pure merge functions ───────────────────────────────────


def fan_count_delta(had_balance: bool, fan_votes: int) -> int:
    """+1 for a fan never seen in this collective, -1 for a fan left at zero.

    The prior-balance check comes first: a new fan whose resulting balance
    is zero still counts as +1.
    """
    if not had_balance:
        return 1
    if fan_votes == 0:
        return -1
    return 0


def new_trade_collective(
    event: UserEvent, price: int, percent_change: float, timestamp: int,
) -> CollectiveRecord:
    return CollectiveRecord(
        id=event.collective,
        price=price,
        fan_count=1,
        vote_count=1,
        burnt_vote_count=0,
        claimer_vote_count=0,
        treasury_value=0,
        percent_change=percent_change,
        contract_id=event.log.contract,
        created_at=timestamp,
        updated_at=timestamp,
        last_event_id=event.log.log_id,
    )


def apply_trade_update(
    current: CollectiveRecord,
    event: UserEvent,
    snapshot: OnchainSnapshot,
    price: int,
    percent_change: float,
    delta: int,
    timestamp: int,
) -> CollectiveRecord:
    return replace(
        current,
        price=price,
        fan_count=current.fan_count + delta,
        vote_count=snapshot.vote_count,
        burnt_vote_count=snapshot.burnt_vote_count,
        claimer_vote_count=snapshot.claimer_vote_count,
        treasury_value=snapshot.treasury_value,
        percent_change=percent_change,
        contract_id=event.log.contract,
        updated_at=timestamp,
        last_event_id=event.log.log_id,
    )


def resolve_position(event: AdminCollectiveEvent) -> int | None:
    """Exit round wins over round; events with neither leave position alone."""
    if isinstance(event, CollectiveWinningsDistributed):
        return event.exit_round if event.exit_round is not None else event.round
    if isinstance(event, PositionVerified):
        return event.round
    return None


def resolve_fanbase(event: AdminCollectiveEvent) -> int | None:
    if isinstance(event, FanbaseSet):
        return event.fanbase
    return None


def new_admin_collective(event: AdminCollectiveEvent, timestamp: int) -> CollectiveRecord:
    """Placeholder row for a collective first seen through an admin event."""
    return CollectiveRecord(
        id=event.collective,
        price=1,
        fan_count=1,
        vote_count=1,
        burnt_vote_count=0,
        claimer_vote_count=0,
        treasury_value=0,
        percent_change=0.0,
        contract_id=event.log.contract,
        created_at=timestamp,
        updated_at=timestamp,
        last_event_id=event.log.log_id,
    )


def apply_admin_update(
    current: CollectiveRecord,
    event: AdminCollectiveEvent,
    snapshot: OnchainSnapshot,
    timestamp: int,
) -> CollectiveRecord:
    """Refresh on-chain tallies. Price, fan count and percent change are kept."""
    position = resolve_position(event)
    fanbase = resolve_fanbase(event)
    return replace(
        current,
        vote_count=snapshot.vote_count,
        burnt_vote_count=snapshot.burnt_vote_count,
        claimer_vote_count=snapshot.claimer_vote_count,
        treasury_value=snapshot.treasury_value,
        position=position if position is not None else current.position,
        fanbase=fanbase if fanbase is not None else current.fanbase,
        updated_at=timestamp,
        last_event_id=event.log.log_id,
    )


# ── Aggregator ─────────────────────────────────────────────


class CollectiveAggregator:
    """Upserts the Collective for fan (trade path) and admin events."""

    def __init__(
        self,
        store: IndexerStore,
        reader: OnchainReader,
        change: ChangeCalculator,
        clock: BlockClock,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self._store = store
        self._reader = reader
        self._change = change
        self._clock = clock
        self._diagnostics = diagnostics or LoggingDiagnostics()

    async def read_onchain(self, contract: str, collective: str) -> OnchainSnapshot:
        """Run the three reads concurrently. Treasury stays 0 without contract metadata.

        The claimer is resolved first: a missing claimer raises before any
        read starts.
        """
        metadata = await self._store.get_contract(contract)
        if metadata is None:
            self._diagnostics.warning("Contract not found", address=contract)
        claimer = await self._reader.resolve_claimer(contract)

        async def treasury() -> int:
            if metadata is None:
                return 0
            return await self._reader.read_treasury_value(metadata.stable_coin, collective)

        votes, claimer_votes, treasury_value = await asyncio.gather(
            self._reader.read_collective_votes(contract, collective),
            self._reader.read_claimer_votes(contract, collective, claimer),
            treasury(),
        )
        return OnchainSnapshot(
            vote_count=votes.vote_count,
            burnt_vote_count=votes.burnt_vote_count,
            claimer_vote_count=claimer_votes,
            treasury_value=treasury_value,
        )

    async def upsert_trade(self, event: UserEvent) -> CollectiveRecord:
        timestamp = await self._clock.get_block_timestamp(event.log.block_number)
        snapshot = await self.read_onchain(event.log.contract, event.collective)

        price = collective_price(event)
        percent_change = await self._change.percent_change(event)
        balance = await self._store.get_balance(event.fan, event.collective)
        delta = fan_count_delta(balance is not None, event.fan_votes)

        record = await self._store.upsert_collective(
            event.collective,
            create=new_trade_collective(event, price, percent_change, timestamp),
            update=lambda current: apply_trade_update(
                current, event, snapshot, price, percent_change, delta, timestamp,
            ),
        )
        log.debug(
            "Collective %s: price=%d fans=%d votes=%d change=%.2f%%",
            record.id, record.price, record.fan_count, record.vote_count,
            record.percent_change,
        )
        return record

    async def upsert_admin(self, event: AdminCollectiveEvent) -> CollectiveRecord:
        timestamp = await self._clock.get_block_timestamp(event.log.block_number)
        snapshot = await self.read_onchain(event.log.contract, event.collective)

        record = await self._store.upsert_collective(
            event.collective,
            create=new_admin_collective(event, timestamp),
            update=lambda current: apply_admin_update(current, event, snapshot, timestamp),
        )
        log.debug(
            "Collective %s (admin %s): position=%s fanbase=%s",
            record.id, type(event).__name__, record.position, record.fanbase,
        )
        return record
