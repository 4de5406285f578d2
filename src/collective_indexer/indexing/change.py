"""Percent price change over a trailing block window."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Protocol

from collective_indexer.indexing.classifier import trade_price
from collective_indexer.models.events import UserEvent
from collective_indexer.models.records import EventRecord

log = logging.getLogger(__name__)

# ~2s blocks: one day of blocks on the target network
ONE_DAY_OF_BLOCKS = 43_200


class TradeHistory(Protocol):
    async def find_trade_events(self, collective: str, from_block: int) -> list[EventRecord]:
        ...


class ChangeCalculator:
    """Compares an event's price with the oldest buy/sell price in the window."""

    def __init__(self, history: TradeHistory, window: int = ONE_DAY_OF_BLOCKS) -> None:
        self._history = history
        self._window = window

    async def percent_change(self, event: UserEvent) -> float:
        new_price = trade_price(event)
        if new_price is None:
            return 0.0

        block = event.log.block_number
        trades = await self._history.find_trade_events(
            event.collective, from_block=block - self._window,
        )
        if not trades:
            return 0.0

        old_price = Decimal(trades[0].price_base)
        if old_price == 0:
            log.debug("Oldest price in window is zero for %s", event.collective)
            return 0.0
        return float((Decimal(new_price) - old_price) / old_price * 100)
