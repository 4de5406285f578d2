"""Main indexer loop - wires all components together."""

from __future__ import annotations

import asyncio
import logging
import signal

from web3 import AsyncHTTPProvider, AsyncWeb3

from collective_indexer.chain.abis import load_abi
from collective_indexer.chain.blocks import Web3BlockClock
from collective_indexer.chain.client import Web3ContractCaller
from collective_indexer.chain.poller import Web3LogPoller
from collective_indexer.chain.reader import OnchainReader
from collective_indexer.diagnostics import LoggingDiagnostics
from collective_indexer.errors import ConfigurationError, RecordExistsError
from collective_indexer.handler import EventHandler
from collective_indexer.indexing.aggregator import CollectiveAggregator
from collective_indexer.indexing.change import ChangeCalculator
from collective_indexer.indexing.recorder import AdminEventRecorder, EventRecorder
from collective_indexer.interfaces.poller import EventSource
from collective_indexer.models.config import IndexerConfig
from collective_indexer.models.events import IndexedEvent
from collective_indexer.storage.sqlite import SQLiteStore

log = logging.getLogger(__name__)


class IndexerDaemon:
    """Polls the vote contracts and applies each event to the store.

    Events are handled strictly one at a time in delivery order, which is
    what the Collective upserts rely on.
    """

    def __init__(self, cfg: IndexerConfig) -> None:
        if not cfg.rpc_url:
            raise ConfigurationError("No RPC URL configured")
        if not cfg.contracts:
            raise ConfigurationError("No vote contracts configured")

        self._cfg = cfg
        self._running = False

        w3 = AsyncWeb3(AsyncHTTPProvider(cfg.rpc_url))
        abi = load_abi(cfg.abi_path)
        diagnostics = LoggingDiagnostics()

        self.store = SQLiteStore(cfg.db_path)
        self.clock = Web3BlockClock(w3)
        self.poller: EventSource = Web3LogPoller(
            w3, cfg.contracts, abi=abi, start_block=cfg.start_block,
            batch_size=cfg.batch_size,
        )
        self.reader = OnchainReader(
            Web3ContractCaller(w3), self.store, cfg.default_claimer, diagnostics,
            vote_abi=abi,
        )
        self.handler = EventHandler(
            store=self.store,
            aggregator=CollectiveAggregator(
                self.store, self.reader, ChangeCalculator(self.store), self.clock,
                diagnostics,
            ),
            recorder=EventRecorder(self.store, self.clock),
            admin_recorder=AdminEventRecorder(self.store, self.clock),
        )

    async def start(self) -> None:
        """Initialize the store, restore the cursor and run the main loop."""
        log.info("Starting collective indexer")
        log.info("  Contracts: %s", ", ".join(self._cfg.contracts))
        log.info("  RPC: %s", self._cfg.rpc_url)
        log.info("  Database: %s", self._cfg.db_path)

        await self.store.initialize()

        saved_block = await self.store.get_cursor()
        if saved_block is not None:
            self.poller.set_cursor(saved_block)
            log.info("Restored cursor: block %d", saved_block)

        self._running = True
        try:
            await self._main_loop()
        finally:
            await self.store.close()
            log.info("Indexer shut down cleanly")

    async def stop(self) -> None:
        """Signal the indexer to stop after the current batch."""
        log.info("Stop requested")
        self._running = False

    async def _main_loop(self) -> None:
        """Poll, apply, persist the cursor.

        Events of a polled batch stay pending until applied, so a failure
        retries the failing event instead of replaying the batch: the
        Collective upserts are not idempotent.
        """
        pending: list[IndexedEvent] = []
        while self._running:
            try:
                # 1. Poll for new events
                if not pending:
                    pending = await self.poller.poll()
                    if not pending:
                        await self._save_cursor()
                        await asyncio.sleep(self._cfg.poll_interval)
                        continue

                # 2. Apply them in delivery order
                while pending and self._running:
                    try:
                        await self.handler.handle(pending[0])
                    except RecordExistsError as exc:
                        log.warning("Skipping re-delivered event: %s", exc)
                    pending.pop(0)

                # 3. Save cursor once the whole batch is applied
                if not pending:
                    await self._save_cursor()

            except asyncio.CancelledError:
                log.info("Main loop cancelled")
                break
            except ConfigurationError:
                raise
            except Exception as exc:
                log.error("Main loop error: %s", exc, exc_info=True)
                await asyncio.sleep(self._cfg.error_backoff)

    async def _save_cursor(self) -> None:
        cursor = self.poller.get_cursor()
        if cursor is not None:
            await self.store.set_cursor(cursor)


async def run_daemon(cfg: IndexerConfig) -> None:
    """Entry point for running the indexer."""
    daemon = IndexerDaemon(cfg)

    loop = asyncio.get_running_loop()

    def _signal_handler():
        asyncio.ensure_future(daemon.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    await daemon.start()
