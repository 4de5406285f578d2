"""Per-event handler - routes decoded events through the indexing components."""

from __future__ import annotations

import logging

from collective_indexer.errors import RecordExistsError
from collective_indexer.indexing.aggregator import CollectiveAggregator
from collective_indexer.indexing.recorder import AdminEventRecorder, EventRecorder
from collective_indexer.interfaces.store import IndexerStore
from collective_indexer.models.events import (
    AdminCollectiveEvent,
    AdminLog,
    CollectiveWinningsDistributed,
    FanbaseSet,
    FanEvent,
    IndexedEvent,
    PositionVerified,
    UserEvent,
)
from collective_indexer.models.records import BalanceRecord

log = logging.getLogger(__name__)

_COLLECTIVE_ADMIN_TYPES = (CollectiveWinningsDistributed, PositionVerified, FanbaseSet)


class EventHandler:
    """Applies one event at a time. Callers must deliver events in block order."""

    def __init__(
        self,
        store: IndexerStore,
        aggregator: CollectiveAggregator,
        recorder: EventRecorder,
        admin_recorder: AdminEventRecorder,
    ) -> None:
        self._store = store
        self._aggregator = aggregator
        self._recorder = recorder
        self._admin_recorder = admin_recorder

    async def handle(self, event: IndexedEvent) -> None:
        """Apply one event in a single store transaction.

        Either every row the event produces is written or none is, so a
        failed event can be handled again from scratch. Raises
        RecordExistsError, with no state touched, for a log that is already
        recorded.
        """
        async with self._store.transaction():
            if isinstance(event, FanEvent):
                if await self._store.get_event(event.log.log_id) is not None:
                    raise RecordExistsError("Event", event.log.log_id)
                await self._handle_fan_event(event)
            elif await self._store.get_admin_event(event.log.log_id) is not None:
                raise RecordExistsError("AdminEvent", event.log.log_id)
            elif isinstance(event, _COLLECTIVE_ADMIN_TYPES):
                await self._handle_collective_admin_event(event)
            elif isinstance(event, AdminLog):
                log.info("Admin event %s at block %d", event.name, event.log.block_number)
                await self._admin_recorder.record(event)

    async def _handle_fan_event(self, event: UserEvent) -> None:
        """Aggregate first: the collective upsert must see the prior balance
        and a trade history that excludes this event."""
        collective = await self._aggregator.upsert_trade(event)
        record = await self._recorder.record(event)
        log.info(
            "%s event: fan=%s collective=%s votes=%d price=%d",
            record.event_type, event.fan[:10], event.collective[:10],
            event.vote_amount, collective.price,
        )

        await self._store.save_balance(BalanceRecord(
            fan_id=event.fan,
            collective_id=event.collective,
            votes=event.fan_votes,
            updated_at=record.timestamp,
        ))

    async def _handle_collective_admin_event(self, event: AdminCollectiveEvent) -> None:
        log.info(
            "%s: collective=%s block=%d",
            type(event).__name__, event.collective[:10], event.log.block_number,
        )
        await self._aggregator.upsert_admin(event)
        await self._admin_recorder.record(event)
