"""Data models for the collective indexer."""

from collective_indexer.models.events import (
    AdminCollectiveEvent,
    AdminEvent,
    AdminLog,
    CollectiveWinningsDistributed,
    EventKind,
    FanbaseSet,
    FanEvent,
    IndexedEvent,
    LogContext,
    PositionVerified,
    Price,
    UnknownFanEvent,
    UserEvent,
    VotesBought,
    VotesRedeemed,
    VotesSold,
    VotesTransferred,
)
from collective_indexer.models.records import (
    AdminEventRecord,
    BalanceRecord,
    CollectiveRecord,
    CollectiveVotes,
    ContractRecord,
    EventRecord,
    OnchainSnapshot,
    PriceBreakdown,
    balance_id,
)
from collective_indexer.models.config import IndexerConfig

__all__ = [
    "AdminCollectiveEvent", "AdminEvent", "AdminLog", "CollectiveWinningsDistributed",
    "EventKind", "FanbaseSet", "FanEvent", "IndexedEvent", "LogContext",
    "PositionVerified", "Price", "UnknownFanEvent", "UserEvent",
    "VotesBought", "VotesRedeemed", "VotesSold", "VotesTransferred",
    "AdminEventRecord", "BalanceRecord", "CollectiveRecord", "CollectiveVotes",
    "ContractRecord", "EventRecord", "OnchainSnapshot", "PriceBreakdown", "balance_id",
    "IndexerConfig",
]
