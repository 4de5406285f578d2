"""Block timestamp resolver with a bounded in-memory cache."""

from __future__ import annotations

import logging
from collections import OrderedDict

from web3 import AsyncWeb3

log = logging.getLogger(__name__)


class Web3BlockClock:
    """Implements the BlockClock protocol.

    Several logs usually share a block, so resolved timestamps are cached
    (LRU, `max_entries` blocks) to avoid one `eth_getBlockByNumber` per log.
    """

    def __init__(self, w3: AsyncWeb3, max_entries: int = 1024) -> None:
        self._w3 = w3
        self._max_entries = max_entries
        self._cache: OrderedDict[int, int] = OrderedDict()

    async def get_block_timestamp(self, block_number: int) -> int:
        cached = self._cache.get(block_number)
        if cached is not None:
            self._cache.move_to_end(block_number)
            return cached

        block = await self._w3.eth.get_block(block_number)
        timestamp = int(block["timestamp"])
        self._cache[block_number] = timestamp
        if len(self._cache) > self._max_entries:
            self._cache.popitem(last=False)
        log.debug("Block %d timestamp %d", block_number, timestamp)
        return timestamp
