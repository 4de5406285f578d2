"""Synthetic event factories for testing."""

from __future__ import annotations

from collective_indexer.models.events import (
    AdminLog,
    CollectiveWinningsDistributed,
    FanbaseSet,
    LogContext,
    PositionVerified,
    Price,
    UnknownFanEvent,
    VotesBought,
    VotesRedeemed,
    VotesSold,
    VotesTransferred,
)
from collective_indexer.models.records import EventRecord

CONTRACT = "0x5fbdb2315678afecb367f032d93f642f64180aa3"
TOKEN = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
COLLECTIVE = "0x1111111111111111111111111111111111111111"
OTHER_COLLECTIVE = "0x2222222222222222222222222222222222222222"
FAN = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"
OTHER_FAN = "0x70997970c51812dc3a010c7d01b50e0d17dc79c8"
CLAIMER = "0x3c44cdddb6a900fa2b585dd299e03d12fa4293bc"
DEFAULT_CLAIMER = "0x90f79bf6eb2c4f870365e785982e1f101e93b906"
ADMIN = "0x15d34aaf54267db7d7c367839aaf71a00a2c6a65"


def make_log(
    block_number: int = 1_000,
    log_index: int = 0,
    contract: str = CONTRACT,
    tx_from: str = "",
    tx_input: str = "",
) -> LogContext:
    tx_hash = f"0x{block_number:032x}{log_index:032x}"
    return LogContext(
        log_id=f"{tx_hash}-{log_index}",
        contract=contract,
        log_index=log_index,
        block_number=block_number,
        tx_hash=tx_hash,
        tx_from=tx_from,
        tx_input=tx_input,
    )


def make_price(base: int = 100) -> Price:
    return Price(
        base=base,
        pool_fee=1,
        protocol_fee=2,
        collective_fee=3,
        total_fee=6,
        total=base + 6,
        per_vote=base,
    )


def _fan_args(fan, collective, vote_amount, fan_votes, supply, block_number, log_index):
    return dict(
        log=make_log(block_number, log_index),
        fan=fan,
        collective=collective,
        vote_amount=vote_amount,
        fan_votes=fan_votes,
        supply=supply,
    )


def make_buy_event(
    base: int = 100,
    fan: str = FAN,
    collective: str = COLLECTIVE,
    vote_amount: int = 1,
    fan_votes: int = 1,
    supply: int = 10,
    block_number: int = 1_000,
    log_index: int = 0,
    price: Price | None = None,
) -> VotesBought:
    return VotesBought(
        **_fan_args(fan, collective, vote_amount, fan_votes, supply, block_number, log_index),
        price=price or make_price(base),
    )


def make_sell_event(
    base: int = 100,
    fan: str = FAN,
    collective: str = COLLECTIVE,
    vote_amount: int = 1,
    fan_votes: int = 0,
    supply: int = 9,
    block_number: int = 1_000,
    log_index: int = 0,
    price: Price | None = None,
) -> VotesSold:
    return VotesSold(
        **_fan_args(fan, collective, vote_amount, fan_votes, supply, block_number, log_index),
        price=price or make_price(base),
    )


def make_redeem_event(
    value: int = 5_000,
    fan: str = FAN,
    collective: str = COLLECTIVE,
    vote_amount: int = 1,
    fan_votes: int = 0,
    supply: int = 9,
    block_number: int = 1_000,
    log_index: int = 0,
) -> VotesRedeemed:
    return VotesRedeemed(
        **_fan_args(fan, collective, vote_amount, fan_votes, supply, block_number, log_index),
        value=value,
    )


def make_transfer_event(
    recipient: str = OTHER_FAN,
    fan: str = FAN,
    collective: str = COLLECTIVE,
    vote_amount: int = 1,
    fan_votes: int = 2,
    supply: int = 10,
    block_number: int = 1_000,
    log_index: int = 0,
) -> VotesTransferred:
    return VotesTransferred(
        **_fan_args(fan, collective, vote_amount, fan_votes, supply, block_number, log_index),
        recipient=recipient,
    )


def make_unknown_event(
    name: str = "VotesMigrated",
    fan: str = FAN,
    collective: str = COLLECTIVE,
    fan_votes: int = 3,
    block_number: int = 1_000,
    log_index: int = 0,
) -> UnknownFanEvent:
    return UnknownFanEvent(
        **_fan_args(fan, collective, 1, fan_votes, 10, block_number, log_index),
        name=name,
    )


def make_distribution_event(
    exit_round: int | None = 7,
    round: int | None = 6,
    collective: str = COLLECTIVE,
    block_number: int = 2_000,
    log_index: int = 0,
) -> CollectiveWinningsDistributed:
    return CollectiveWinningsDistributed(
        log=make_log(block_number, log_index, tx_from=ADMIN, tx_input="0xdeadbeef"),
        collective=collective,
        exit_round=exit_round,
        round=round,
    )


def make_position_verified(
    round: int = 3,
    collective: str = COLLECTIVE,
    block_number: int = 2_000,
    log_index: int = 0,
) -> PositionVerified:
    return PositionVerified(
        log=make_log(block_number, log_index, tx_from=ADMIN, tx_input="0xcafe"),
        collective=collective,
        round=round,
    )


def make_fanbase_set(
    fanbase: int = 42,
    collective: str = COLLECTIVE,
    block_number: int = 2_000,
    log_index: int = 0,
) -> FanbaseSet:
    return FanbaseSet(
        log=make_log(block_number, log_index, tx_from=ADMIN, tx_input="0xbeef"),
        collective=collective,
        fanbase=fanbase,
    )


def make_admin_log(
    name: str = "ProtocolFeeUpdated",
    block_number: int = 2_000,
    log_index: int = 0,
) -> AdminLog:
    return AdminLog(
        log=make_log(block_number, log_index, tx_from=ADMIN, tx_input="0x12345678"),
        name=name,
    )


def make_trade_record(
    price_base: int,
    block_number: int,
    collective: str = COLLECTIVE,
    event_type: str = "buy",
) -> EventRecord:
    """An Event row as returned by the store's trade history."""
    log = make_log(block_number)
    return EventRecord(
        id=log.log_id,
        fan_id=FAN,
        collective_id=collective,
        contract_id=CONTRACT,
        event_type=event_type,
        vote_amount=1,
        fan_votes=1,
        supply=10,
        price_base=price_base,
        price_pool_fee=0,
        price_protocol_fee=0,
        price_collective_fee=0,
        price_total_fee=0,
        price_total=price_base,
        price_per_vote=price_base,
        hash=log.tx_hash,
        log_index=0,
        block_number=block_number,
        timestamp=0,
    )
