"""Shared fixtures for collective_indexer tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from collective_indexer.chain.reader import OnchainReader
from collective_indexer.handler import EventHandler
from collective_indexer.indexing.aggregator import CollectiveAggregator
from collective_indexer.indexing.change import ONE_DAY_OF_BLOCKS, ChangeCalculator
from collective_indexer.indexing.recorder import AdminEventRecorder, EventRecorder
from collective_indexer.models.records import ContractRecord
from collective_indexer.storage.sqlite import SQLiteStore

from tests.factories import CLAIMER, CONTRACT, DEFAULT_CLAIMER, TOKEN
from tests.mocks import MockBlockClock, MockContractCaller, RecordingDiagnostics

# On-chain values served by the default mock caller
ONCHAIN_VOTES = ("Night Owls", 500, 20)
ONCHAIN_CLAIMER_VOTES = 40
ONCHAIN_TREASURY = 1_000_000


def pytest_configure(config):
    """Add indexer constants to the report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Vote Contract"] = CONTRACT
    meta["Treasury Token"] = TOKEN
    meta["Change Window (blocks)"] = ONE_DAY_OF_BLOCKS


def make_caller() -> MockContractCaller:
    """Caller answering all three reads successfully."""
    caller = MockContractCaller()
    caller.set_result("collectives", ONCHAIN_VOTES)
    caller.set_result("balanceOf", ONCHAIN_CLAIMER_VOTES, address=CONTRACT)
    caller.set_result("balanceOf", ONCHAIN_TREASURY, address=TOKEN)
    return caller


@pytest.fixture
async def store():
    """Initialized in-memory SQLiteStore."""
    s = SQLiteStore(":memory:")
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
async def registered(store):
    """Contract metadata for CONTRACT, with its own claimer."""
    record = ContractRecord(address=CONTRACT, stable_coin=TOKEN, claimer_account=CLAIMER)
    await store.save_contract(record)
    return record


@pytest.fixture
def caller():
    return make_caller()


@pytest.fixture
def clock():
    return MockBlockClock()


@pytest.fixture
def diagnostics():
    return RecordingDiagnostics()


@pytest.fixture
def reader(caller, store, diagnostics):
    return OnchainReader(caller, store, DEFAULT_CLAIMER, diagnostics)


@pytest.fixture
def change(store):
    return ChangeCalculator(store)


@pytest.fixture
def aggregator(store, reader, change, clock, diagnostics):
    return CollectiveAggregator(store, reader, change, clock, diagnostics)


@pytest.fixture
def recorder(store, clock):
    return EventRecorder(store, clock)


@pytest.fixture
def admin_recorder(store, clock):
    return AdminEventRecorder(store, clock)


@pytest.fixture
def handler(store, aggregator, recorder, admin_recorder):
    """Fully wired EventHandler with mocked chain access."""
    return EventHandler(store, aggregator, recorder, admin_recorder)
