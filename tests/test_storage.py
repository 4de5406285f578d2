"""SQLiteStore behaviour the indexing components rely on."""

from __future__ import annotations

from dataclasses import replace

import pytest

from collective_indexer.errors import RecordExistsError
from collective_indexer.models.records import BalanceRecord, CollectiveRecord, ContractRecord

from tests.factories import CLAIMER, COLLECTIVE, CONTRACT, FAN, TOKEN, make_buy_event


def _collective(**overrides) -> CollectiveRecord:
    fields = dict(
        id=COLLECTIVE, price=1, fan_count=1, vote_count=1, burnt_vote_count=0,
        claimer_vote_count=0, treasury_value=0, percent_change=0.0,
        contract_id=CONTRACT, created_at=1, updated_at=1, last_event_id="a",
    )
    fields.update(overrides)
    return CollectiveRecord(**fields)


async def test_cursor_roundtrip(store):
    assert await store.get_cursor() is None
    await store.set_cursor(1_000)
    await store.set_cursor(1_500)
    assert await store.get_cursor() == 1_500


async def test_contract_metadata(store):
    assert await store.get_contract(CONTRACT) is None

    await store.save_contract(ContractRecord(CONTRACT, TOKEN, CLAIMER))
    record = await store.get_contract(CONTRACT)

    assert (record.stable_coin, record.claimer_account) == (TOKEN, CLAIMER)
    assert record.created_at
    assert [c.address for c in await store.get_all_contracts()] == [CONTRACT]


async def test_balance_keyed_by_fan_and_collective(store):
    await store.save_balance(BalanceRecord(FAN, COLLECTIVE, votes=10**24, updated_at=5))

    balance = await store.get_balance(FAN, COLLECTIVE)
    assert balance.id == f"{FAN}:{COLLECTIVE}"
    assert balance.votes == 10**24
    assert await store.get_balance(COLLECTIVE, FAN) is None


async def test_upsert_creates_then_updates_from_stored_row(store):
    seen: list[CollectiveRecord] = []

    def update(current: CollectiveRecord) -> CollectiveRecord:
        seen.append(current)
        return replace(current, fan_count=current.fan_count + 1, last_event_id="c")

    first = await store.upsert_collective(COLLECTIVE, _collective(), update)
    assert first.fan_count == 1
    assert seen == []

    # A stale pre-fetched copy must not leak into the update
    await store.upsert_collective(COLLECTIVE, _collective(), lambda c: replace(c, fan_count=5))
    second = await store.upsert_collective(COLLECTIVE, _collective(), update)

    assert seen[-1].fan_count == 5
    assert second.fan_count == 6
    assert (await store.get_collective(COLLECTIVE)).last_event_id == "c"


async def test_failed_update_rolls_back(store):
    await store.upsert_collective(COLLECTIVE, _collective(price=7), lambda c: c)

    def explode(current):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await store.upsert_collective(COLLECTIVE, _collective(), explode)

    assert (await store.get_collective(COLLECTIVE)).price == 7
    # The connection is usable after the rollback
    await store.set_cursor(1)


async def test_transaction_groups_writes(store):
    with pytest.raises(RuntimeError):
        async with store.transaction():
            await store.save_balance(BalanceRecord(FAN, COLLECTIVE, votes=1))
            await store.upsert_collective(COLLECTIVE, _collective(), lambda c: c)
            raise RuntimeError("boom")

    assert await store.get_balance(FAN, COLLECTIVE) is None
    assert await store.get_collective(COLLECTIVE) is None

    async with store.transaction():
        await store.save_balance(BalanceRecord(FAN, COLLECTIVE, votes=1))
        await store.upsert_collective(COLLECTIVE, _collective(), lambda c: c)

    assert (await store.get_balance(FAN, COLLECTIVE)).votes == 1
    assert (await store.get_collective(COLLECTIVE)).fan_count == 1


async def test_duplicate_event_inside_transaction_rolls_back_everything(store, recorder):
    event = make_buy_event()
    await recorder.record(event)

    with pytest.raises(RecordExistsError):
        async with store.transaction():
            await store.save_balance(BalanceRecord(FAN, COLLECTIVE, votes=9))
            await recorder.record(event)

    assert await store.get_balance(FAN, COLLECTIVE) is None
