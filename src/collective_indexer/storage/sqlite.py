"""SQLite implementation of the IndexerStore protocol."""

from __future__ import annotations

import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from collective_indexer.errors import RecordExistsError
from collective_indexer.interfaces.store import CollectiveUpdate
from collective_indexer.models.records import (
    AdminEventRecord,
    BalanceRecord,
    CollectiveRecord,
    ContractRecord,
    EventRecord,
    balance_id,
)

# uint256 amounts overflow SQLite INTEGER, so they are stored as TEXT.
SCHEMA = """
-- Block cursor for resumption
CREATE TABLE IF NOT EXISTS cursor (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    next_block INTEGER NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Vote contract metadata
CREATE TABLE IF NOT EXISTS contracts (
    address TEXT PRIMARY KEY,
    stable_coin TEXT NOT NULL,
    claimer_account TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Fan vote balances
CREATE TABLE IF NOT EXISTS balances (
    id TEXT PRIMARY KEY,
    fan_id TEXT NOT NULL,
    collective_id TEXT NOT NULL,
    votes TEXT NOT NULL,
    updated_at INTEGER NOT NULL
);

-- Collective aggregate state
CREATE TABLE IF NOT EXISTS collectives (
    id TEXT PRIMARY KEY,
    price TEXT NOT NULL,
    fan_count INTEGER NOT NULL,
    vote_count TEXT NOT NULL,
    burnt_vote_count TEXT NOT NULL,
    claimer_vote_count TEXT NOT NULL,
    treasury_value TEXT NOT NULL,
    percent_change REAL NOT NULL,
    position INTEGER,
    fanbase INTEGER,
    contract_id TEXT NOT NULL,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL,
    last_event_id TEXT NOT NULL
);

-- Fan events
CREATE TABLE IF NOT EXISTS events (
    id TEXT PRIMARY KEY,
    fan_id TEXT NOT NULL,
    collective_id TEXT NOT NULL,
    contract_id TEXT NOT NULL,
    event_type TEXT NOT NULL,
    vote_amount TEXT NOT NULL,
    fan_votes TEXT NOT NULL,
    supply TEXT NOT NULL,
    price_base TEXT NOT NULL,
    price_pool_fee TEXT NOT NULL,
    price_protocol_fee TEXT NOT NULL,
    price_collective_fee TEXT NOT NULL,
    price_total_fee TEXT NOT NULL,
    price_total TEXT NOT NULL,
    price_per_vote TEXT NOT NULL,
    hash TEXT NOT NULL,
    log_index INTEGER NOT NULL,
    block_number INTEGER NOT NULL,
    timestamp INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_events_collective_block ON events(collective_id, block_number);

-- Admin audit log
CREATE TABLE IF NOT EXISTS admin_events (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    sender TEXT NOT NULL,
    input TEXT NOT NULL,
    contract_id TEXT NOT NULL,
    hash TEXT NOT NULL,
    log_index INTEGER NOT NULL,
    block_number INTEGER NOT NULL,
    timestamp INTEGER NOT NULL
);
"""

_TRADE_EVENT_TYPES = ("buy", "sell")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteStore:
    """SQLite-backed implementation of the IndexerStore protocol."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None
        self._in_transaction = False

    async def initialize(self) -> None:
        Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        assert self._db is not None, "Store not initialized. Call initialize() first."
        return self._db

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Commit every write in the block together, or none of them.

        Nested use joins the outer transaction, so the individual write
        methods only commit when called on their own.
        """
        if self._in_transaction:
            yield
            return

        await self.db.execute("BEGIN IMMEDIATE")
        self._in_transaction = True
        try:
            yield
        except BaseException:
            await self.db.rollback()
            raise
        else:
            await self.db.commit()
        finally:
            self._in_transaction = False

    # ── Cursor ─────────────────────────────────────────────

    async def get_cursor(self) -> int | None:
        async with self.db.execute("SELECT next_block FROM cursor WHERE id=1") as cur:
            row = await cur.fetchone()
            return row["next_block"] if row else None

    async def set_cursor(self, block_number: int) -> None:
        async with self.transaction():
            await self.db.execute(
                "INSERT INTO cursor (id, next_block, updated_at) VALUES (1, ?, ?)"
                " ON CONFLICT(id) DO UPDATE SET next_block=excluded.next_block,"
                " updated_at=excluded.updated_at",
                (block_number, _now()),
            )

    # ── Contracts ──────────────────────────────────────────

    async def get_contract(self, address: str) -> ContractRecord | None:
        async with self.db.execute(
            "SELECT * FROM contracts WHERE address=?", (address,)
        ) as cur:
            row = await cur.fetchone()
            if row:
                return ContractRecord(
                    address=row["address"],
                    stable_coin=row["stable_coin"],
                    claimer_account=row["claimer_account"],
                    created_at=row["created_at"],
                )
        return None

    async def save_contract(self, record: ContractRecord) -> None:
        async with self.transaction():
            await self.db.execute(
                "INSERT OR REPLACE INTO contracts"
                " (address, stable_coin, claimer_account, created_at)"
                " VALUES (?, ?, ?, ?)",
                (record.address, record.stable_coin, record.claimer_account,
                 record.created_at or _now()),
            )

    async def get_all_contracts(self) -> list[ContractRecord]:
        async with self.db.execute("SELECT * FROM contracts ORDER BY created_at") as cur:
            return [
                ContractRecord(
                    address=row["address"],
                    stable_coin=row["stable_coin"],
                    claimer_account=row["claimer_account"],
                    created_at=row["created_at"],
                )
                async for row in cur
            ]

    # ── Balances ───────────────────────────────────────────

    async def get_balance(self, fan: str, collective: str) -> BalanceRecord | None:
        async with self.db.execute(
            "SELECT * FROM balances WHERE id=?", (balance_id(fan, collective),)
        ) as cur:
            row = await cur.fetchone()
            if row:
                return BalanceRecord(
                    fan_id=row["fan_id"],
                    collective_id=row["collective_id"],
                    votes=int(row["votes"]),
                    updated_at=row["updated_at"],
                )
        return None

    async def save_balance(self, record: BalanceRecord) -> None:
        async with self.transaction():
            await self.db.execute(
                "INSERT OR REPLACE INTO balances (id, fan_id, collective_id, votes, updated_at)"
                " VALUES (?, ?, ?, ?, ?)",
                (record.id, record.fan_id, record.collective_id, str(record.votes),
                 record.updated_at),
            )

    # ── Collectives ────────────────────────────────────────

    async def get_collective(self, address: str) -> CollectiveRecord | None:
        async with self.db.execute(
            "SELECT * FROM collectives WHERE id=?", (address,)
        ) as cur:
            row = await cur.fetchone()
            return _row_to_collective(row) if row else None

    async def get_all_collectives(self) -> list[CollectiveRecord]:
        async with self.db.execute("SELECT * FROM collectives ORDER BY created_at") as cur:
            return [_row_to_collective(row) async for row in cur]

    async def upsert_collective(
        self,
        address: str,
        create: CollectiveRecord,
        update: CollectiveUpdate,
    ) -> CollectiveRecord:
        async with self.transaction():
            current = await self.get_collective(address)
            record = create if current is None else update(current)
            await self.db.execute(
                "INSERT OR REPLACE INTO collectives"
                " (id, price, fan_count, vote_count, burnt_vote_count, claimer_vote_count,"
                "  treasury_value, percent_change, position, fanbase, contract_id,"
                "  created_at, updated_at, last_event_id)"
                " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    address, str(record.price), record.fan_count, str(record.vote_count),
                    str(record.burnt_vote_count), str(record.claimer_vote_count),
                    str(record.treasury_value), record.percent_change, record.position,
                    record.fanbase, record.contract_id, record.created_at,
                    record.updated_at, record.last_event_id,
                ),
            )
        return record

    # ── Events ─────────────────────────────────────────────

    async def create_event(self, record: EventRecord) -> None:
        try:
            async with self.transaction():
                await self.db.execute(
                    "INSERT INTO events"
                    " (id, fan_id, collective_id, contract_id, event_type, vote_amount,"
                    "  fan_votes, supply, price_base, price_pool_fee, price_protocol_fee,"
                    "  price_collective_fee, price_total_fee, price_total, price_per_vote,"
                    "  hash, log_index, block_number, timestamp)"
                    " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        record.id, record.fan_id, record.collective_id, record.contract_id,
                        record.event_type, str(record.vote_amount), str(record.fan_votes),
                        str(record.supply), str(record.price_base),
                        str(record.price_pool_fee), str(record.price_protocol_fee),
                        str(record.price_collective_fee), str(record.price_total_fee),
                        str(record.price_total), str(record.price_per_vote), record.hash,
                        record.log_index, record.block_number, record.timestamp,
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise RecordExistsError("Event", record.id) from exc

    async def get_event(self, event_id: str) -> EventRecord | None:
        async with self.db.execute("SELECT * FROM events WHERE id=?", (event_id,)) as cur:
            row = await cur.fetchone()
            return _row_to_event(row) if row else None

    async def find_trade_events(self, collective: str, from_block: int) -> list[EventRecord]:
        async with self.db.execute(
            "SELECT * FROM events WHERE collective_id=? AND block_number >= ?"
            " AND event_type IN (?, ?) ORDER BY block_number ASC, log_index ASC",
            (collective, from_block, *_TRADE_EVENT_TYPES),
        ) as cur:
            return [_row_to_event(row) async for row in cur]

    async def get_events_for_collective(
        self, collective: str, limit: int = 50
    ) -> list[EventRecord]:
        async with self.db.execute(
            "SELECT * FROM events WHERE collective_id=?"
            " ORDER BY block_number DESC, log_index DESC LIMIT ?",
            (collective, limit),
        ) as cur:
            return [_row_to_event(row) async for row in cur]

    async def count_events(self) -> int:
        async with self.db.execute("SELECT COUNT(*) as c FROM events") as cur:
            row = await cur.fetchone()
            return row["c"] if row else 0

    # ── Admin events ───────────────────────────────────────

    async def create_admin_event(self, record: AdminEventRecord) -> None:
        try:
            async with self.transaction():
                await self.db.execute(
                    "INSERT INTO admin_events"
                    " (id, name, sender, input, contract_id, hash, log_index,"
                    "  block_number, timestamp)"
                    " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        record.id, record.name, record.sender, record.input,
                        record.contract_id, record.hash, record.log_index,
                        record.block_number, record.timestamp,
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise RecordExistsError("AdminEvent", record.id) from exc

    async def get_admin_event(self, event_id: str) -> AdminEventRecord | None:
        async with self.db.execute(
            "SELECT * FROM admin_events WHERE id=?", (event_id,)
        ) as cur:
            row = await cur.fetchone()
            if row:
                return AdminEventRecord(
                    id=row["id"],
                    name=row["name"],
                    sender=row["sender"],
                    input=row["input"],
                    contract_id=row["contract_id"],
                    hash=row["hash"],
                    log_index=row["log_index"],
                    block_number=row["block_number"],
                    timestamp=row["timestamp"],
                )
        return None

    async def count_admin_events(self) -> int:
        async with self.db.execute("SELECT COUNT(*) as c FROM admin_events") as cur:
            row = await cur.fetchone()
            return row["c"] if row else 0


# ── Row converters ─────────────────────────────────────────


def _row_to_collective(row: aiosqlite.Row) -> CollectiveRecord:
    return CollectiveRecord(
        id=row["id"],
        price=int(row["price"]),
        fan_count=row["fan_count"],
        vote_count=int(row["vote_count"]),
        burnt_vote_count=int(row["burnt_vote_count"]),
        claimer_vote_count=int(row["claimer_vote_count"]),
        treasury_value=int(row["treasury_value"]),
        percent_change=row["percent_change"],
        contract_id=row["contract_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        last_event_id=row["last_event_id"],
        position=row["position"],
        fanbase=row["fanbase"],
    )


def _row_to_event(row: aiosqlite.Row) -> EventRecord:
    return EventRecord(
        id=row["id"],
        fan_id=row["fan_id"],
        collective_id=row["collective_id"],
        contract_id=row["contract_id"],
        event_type=row["event_type"],
        vote_amount=int(row["vote_amount"]),
        fan_votes=int(row["fan_votes"]),
        supply=int(row["supply"]),
        price_base=int(row["price_base"]),
        price_pool_fee=int(row["price_pool_fee"]),
        price_protocol_fee=int(row["price_protocol_fee"]),
        price_collective_fee=int(row["price_collective_fee"]),
        price_total_fee=int(row["price_total_fee"]),
        price_total=int(row["price_total"]),
        price_per_vote=int(row["price_per_vote"]),
        hash=row["hash"],
        log_index=row["log_index"],
        block_number=row["block_number"],
        timestamp=row["timestamp"],
    )
