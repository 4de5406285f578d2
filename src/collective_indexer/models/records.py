"""Persisted entity records and on-chain read results."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PriceBreakdown:
    """Normalized price fields written on every Event row."""

    price_base: int = 0
    price_pool_fee: int = 0
    price_protocol_fee: int = 0
    price_collective_fee: int = 0
    price_total_fee: int = 0
    price_total: int = 0
    price_per_vote: int = 0


@dataclass
class CollectiveVotes:
    """Result of the `collectives(address)` contract read."""

    name: str = ""
    vote_count: int = 0
    burnt_vote_count: int = 0


@dataclass
class OnchainSnapshot:
    """All on-chain values read for one aggregation call."""

    vote_count: int = 0
    burnt_vote_count: int = 0
    claimer_vote_count: int = 0
    treasury_value: int = 0


@dataclass
class CollectiveRecord:
    """Aggregate state of a Collective, keyed by its address."""

    id: str
    price: int
    fan_count: int
    vote_count: int
    burnt_vote_count: int
    claimer_vote_count: int
    treasury_value: int
    percent_change: float
    contract_id: str
    created_at: int  # block timestamp, seconds
    updated_at: int
    last_event_id: str
    position: int | None = None
    fanbase: int | None = None


@dataclass
class EventRecord:
    """A normalized fan event. Append-only."""

    id: str
    fan_id: str
    collective_id: str
    contract_id: str
    event_type: str
    vote_amount: int
    fan_votes: int
    supply: int
    price_base: int
    price_pool_fee: int
    price_protocol_fee: int
    price_collective_fee: int
    price_total_fee: int
    price_total: int
    price_per_vote: int
    hash: str
    log_index: int
    block_number: int
    timestamp: int


@dataclass
class AdminEventRecord:
    """Transaction-level audit record for an admin log. Append-only."""

    id: str
    name: str
    sender: str
    input: str
    contract_id: str
    hash: str
    log_index: int
    block_number: int
    timestamp: int


@dataclass
class ContractRecord:
    """Metadata for a deployed vote contract."""

    address: str
    stable_coin: str  # treasury token
    claimer_account: str = ""
    created_at: str = ""


@dataclass
class BalanceRecord:
    """A fan's vote balance in a Collective, keyed by `fan:collective`."""

    fan_id: str
    collective_id: str
    votes: int
    updated_at: int = 0

    @property
    def id(self) -> str:
        return balance_id(self.fan_id, self.collective_id)


def balance_id(fan: str, collective: str) -> str:
    return f"{fan}:{collective}"
