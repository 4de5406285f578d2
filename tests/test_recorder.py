"""Event and AdminEvent persistence."""

from __future__ import annotations

import pytest

from collective_indexer.errors import RecordExistsError
from collective_indexer.models.events import Price

from tests.factories import (
    ADMIN,
    COLLECTIVE,
    CONTRACT,
    FAN,
    make_admin_log,
    make_buy_event,
    make_fanbase_set,
    make_redeem_event,
    make_transfer_event,
)
from tests.mocks import MockBlockClock


async def test_buy_event_row(recorder, store):
    price = Price(
        base=100, pool_fee=1, protocol_fee=2, collective_fee=3,
        total_fee=6, total=106, per_vote=50,
    )
    event = make_buy_event(price=price, vote_amount=2, fan_votes=5, supply=40,
                           block_number=1_234, log_index=3)

    record = await recorder.record(event)

    assert record == await store.get_event(event.log.log_id)
    assert record.fan_id == FAN
    assert record.collective_id == COLLECTIVE
    assert record.contract_id == CONTRACT
    assert record.event_type == "buy"
    assert (record.vote_amount, record.fan_votes, record.supply) == (2, 5, 40)
    assert record.price_base == 100
    assert record.price_pool_fee == 1
    assert record.price_protocol_fee == 2
    assert record.price_collective_fee == 3
    assert record.price_total_fee == 6
    assert record.price_total == 106
    assert record.price_per_vote == 50
    assert record.hash == event.log.tx_hash
    assert record.log_index == 3
    assert record.block_number == 1_234
    assert record.timestamp == MockBlockClock.GENESIS + 2_468


async def test_redeem_event_row(recorder, store):
    event = make_redeem_event(value=9_000)

    await recorder.record(event)
    stored = await store.get_event(event.log.log_id)

    assert stored.event_type == "redeem"
    assert stored.price_base == stored.price_total == 9_000
    assert stored.price_pool_fee == stored.price_protocol_fee == 0
    assert stored.price_collective_fee == stored.price_total_fee == 0
    assert stored.price_per_vote == 0


async def test_transfer_event_row_has_no_prices(recorder):
    record = await recorder.record(make_transfer_event())

    assert record.event_type == "transfer"
    assert record.price_base == record.price_total == 0


async def test_large_amounts_survive_storage(recorder, store):
    wei = 10**30
    event = make_buy_event(base=wei, supply=wei)

    await recorder.record(event)
    stored = await store.get_event(event.log.log_id)

    assert stored.price_base == wei
    assert stored.price_total == wei + 6
    assert stored.supply == wei


async def test_events_are_never_updated(recorder, store):
    event = make_buy_event(base=100)
    await recorder.record(event)

    with pytest.raises(RecordExistsError):
        await recorder.record(event)
    assert (await store.get_event(event.log.log_id)).price_base == 100


async def test_admin_event_row(admin_recorder, store):
    event = make_fanbase_set(block_number=2_000, log_index=4)

    record = await admin_recorder.record(event)

    assert record == await store.get_admin_event(event.log.log_id)
    assert record.name == "FanbaseSet"
    assert record.sender == ADMIN
    assert record.input == "0xbeef"
    assert record.contract_id == CONTRACT
    assert record.hash == event.log.tx_hash
    assert record.log_index == 4
    assert record.block_number == 2_000
    assert record.timestamp == MockBlockClock.GENESIS + 4_000


async def test_generic_admin_log_keeps_event_name(admin_recorder):
    record = await admin_recorder.record(make_admin_log(name="ClaimerUpdated"))

    assert record.name == "ClaimerUpdated"
    assert record.input == "0x12345678"


async def test_admin_events_are_append_only(admin_recorder):
    event = make_admin_log()
    await admin_recorder.record(event)

    with pytest.raises(RecordExistsError):
        await admin_recorder.record(event)
