"""Protocol interfaces for all collective_indexer components."""

from collective_indexer.interfaces.chain import BlockClock, ContractCaller
from collective_indexer.interfaces.diagnostics import Diagnostics
from collective_indexer.interfaces.poller import EventSource
from collective_indexer.interfaces.store import CollectiveUpdate, IndexerStore

__all__ = [
    "BlockClock", "ContractCaller",
    "Diagnostics",
    "EventSource",
    "CollectiveUpdate", "IndexerStore",
]
