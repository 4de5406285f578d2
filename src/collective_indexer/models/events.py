"""Contract event models decoded from the Collective vote contract logs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class EventKind(str, Enum):
    """Semantic kind of a fan-facing event, as persisted on Event rows."""

    BUY = "buy"
    SELL = "sell"
    REDEEM = "redeem"
    TRANSFER = "transfer"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class LogContext:
    """Where a log came from: the log itself plus its enclosing transaction."""

    log_id: str  # "{tx_hash}-{log_index}"
    contract: str  # emitting contract address
    log_index: int
    block_number: int
    tx_hash: str
    tx_from: str = ""
    tx_input: str = ""


@dataclass(frozen=True)
class Price:
    """Price struct emitted with vote buys and sells (smallest denomination)."""

    base: int
    pool_fee: int
    protocol_fee: int
    collective_fee: int
    total_fee: int
    total: int
    per_vote: int


# ── Fan events ─────────────────────────────────────────────


@dataclass(frozen=True)
class FanEvent:
    """Arguments shared by every fan-facing vote event."""

    log: LogContext
    fan: str
    collective: str
    vote_amount: int
    fan_votes: int  # fan's vote balance after the action
    supply: int


@dataclass(frozen=True)
class VotesBought(FanEvent):
    price: Price


@dataclass(frozen=True)
class VotesSold(FanEvent):
    price: Price


@dataclass(frozen=True)
class VotesRedeemed(FanEvent):
    value: int


@dataclass(frozen=True)
class VotesTransferred(FanEvent):
    recipient: str


@dataclass(frozen=True)
class UnknownFanEvent(FanEvent):
    """A fan event whose action could not be identified or was malformed."""

    name: str = ""


UserEvent = Union[VotesBought, VotesSold, VotesRedeemed, VotesTransferred, UnknownFanEvent]


# ── Admin events ───────────────────────────────────────────


@dataclass(frozen=True)
class CollectiveWinningsDistributed:
    """Either round field may be absent from the payload."""

    log: LogContext
    collective: str
    exit_round: int | None = None
    round: int | None = None


@dataclass(frozen=True)
class PositionVerified:
    log: LogContext
    collective: str
    round: int


@dataclass(frozen=True)
class FanbaseSet:
    log: LogContext
    collective: str
    fanbase: int


@dataclass(frozen=True)
class AdminLog:
    """Any other admin-level log. Only kept as an audit record."""

    log: LogContext
    name: str


AdminCollectiveEvent = Union[CollectiveWinningsDistributed, PositionVerified, FanbaseSet]
AdminEvent = Union[CollectiveWinningsDistributed, PositionVerified, FanbaseSet, AdminLog]

IndexedEvent = Union[UserEvent, AdminEvent]
