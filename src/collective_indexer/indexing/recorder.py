"""Append-only persistence of Event and AdminEvent rows."""

from __future__ import annotations

from dataclasses import asdict

from collective_indexer.indexing.classifier import classify, extract_prices
from collective_indexer.interfaces.chain import BlockClock
from collective_indexer.interfaces.store import IndexerStore
from collective_indexer.models.events import AdminEvent, AdminLog, UserEvent
from collective_indexer.models.records import AdminEventRecord, EventRecord


class EventRecorder:
    """Creates one Event row per fan event log."""

    def __init__(self, store: IndexerStore, clock: BlockClock) -> None:
        self._store = store
        self._clock = clock

    async def record(self, event: UserEvent) -> EventRecord:
        timestamp = await self._clock.get_block_timestamp(event.log.block_number)
        record = EventRecord(
            id=event.log.log_id,
            fan_id=event.fan,
            collective_id=event.collective,
            contract_id=event.log.contract,
            event_type=classify(event).value,
            vote_amount=event.vote_amount,
            fan_votes=event.fan_votes,
            supply=event.supply,
            **asdict(extract_prices(event)),
            hash=event.log.tx_hash,
            log_index=event.log.log_index,
            block_number=event.log.block_number,
            timestamp=timestamp,
        )
        await self._store.create_event(record)
        return record


class AdminEventRecorder:
    """Creates one AdminEvent audit row per admin log."""

    def __init__(self, store: IndexerStore, clock: BlockClock) -> None:
        self._store = store
        self._clock = clock

    async def record(self, event: AdminEvent) -> AdminEventRecord:
        ctx = event.log
        timestamp = await self._clock.get_block_timestamp(ctx.block_number)
        name = event.name if isinstance(event, AdminLog) else type(event).__name__
        record = AdminEventRecord(
            id=ctx.log_id,
            name=name,
            sender=ctx.tx_from,
            input=ctx.tx_input,
            contract_id=ctx.contract,
            hash=ctx.tx_hash,
            log_index=ctx.log_index,
            block_number=ctx.block_number,
            timestamp=timestamp,
        )
        await self._store.create_admin_event(record)
        return record
