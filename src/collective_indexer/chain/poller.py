"""Log poller - pulls vote contract logs over eth_getLogs and decodes them."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from web3 import AsyncWeb3, Web3

from collective_indexer.chain.abis import VOTE_CONTRACT_ABI
from collective_indexer.chain.decoding import normalize_address, parse_event
from collective_indexer.models.events import FanEvent, IndexedEvent, LogContext

log = logging.getLogger(__name__)


def _abi_type(param: dict) -> str:
    """Canonical type string for an ABI parameter, expanding tuples."""
    typ = param["type"]
    if typ.startswith("tuple"):
        inner = ",".join(_abi_type(c) for c in param["components"])
        return f"({inner}){typ[len('tuple'):]}"
    return typ


def event_topic(entry: dict) -> bytes:
    """keccak256 of the event signature, i.e. topic[0] of its logs."""
    signature = f"{entry['name']}({','.join(_abi_type(p) for p in entry['inputs'])})"
    return bytes(Web3.keccak(text=signature))


def _hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    text = str(value)
    return text if text.startswith("0x") else "0x" + text


class Web3LogPoller:
    """Polls vote contracts for logs in block order.

    Fetches at most `batch_size` blocks per poll, from the cursor up to the
    chain head. Logs come back ordered by (block, log index) and are
    delivered in that order. Reorg handling is left to the node's finality.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        contracts: list[str],
        abi: list[dict] | None = None,
        start_block: int | None = None,
        batch_size: int = 2_000,
    ) -> None:
        self._w3 = w3
        self._contracts = [Web3.to_checksum_address(c) for c in contracts]
        self._abi = abi or VOTE_CONTRACT_ABI
        self._next_block: int | None = start_block
        self._batch_size = batch_size
        self._contract = w3.eth.contract(abi=self._abi)
        self._topics = {
            event_topic(entry): entry["name"]
            for entry in self._abi
            if entry.get("type") == "event"
        }

    def get_cursor(self) -> int | None:
        return self._next_block

    def set_cursor(self, block_number: int) -> None:
        """Restore cursor from persisted state."""
        self._next_block = block_number

    async def poll(self) -> list[IndexedEvent]:
        latest = await self._w3.eth.block_number
        if self._next_block is None:
            self._next_block = latest
            log.info("No cursor, starting from latest block %d", latest)
        if self._next_block > latest:
            return []

        from_block = self._next_block
        to_block = min(latest, from_block + self._batch_size - 1)
        try:
            raw_logs = await self._w3.eth.get_logs({
                "address": self._contracts,
                "fromBlock": from_block,
                "toBlock": to_block,
            })
        except Exception as exc:
            log.error("Log poll %d-%d failed: %s", from_block, to_block, exc)
            raise

        events: list[IndexedEvent] = []
        for raw in raw_logs:
            parsed = await self._decode(raw)
            if parsed is not None:
                events.append(parsed)
                log.debug("Parsed %s at block %d", type(parsed).__name__, raw["blockNumber"])

        self._next_block = to_block + 1
        if events:
            log.info("Polled %d events from blocks %d-%d", len(events), from_block, to_block)
        return events

    async def _decode(self, raw: Any) -> IndexedEvent | None:
        if raw.get("removed"):
            return None
        topics = raw.get("topics") or []
        if not topics:
            return None
        name = self._topics.get(bytes(topics[0]))
        if name is None:
            log.debug("Ignoring log with unknown topic %s", _hex(topics[0]))
            return None

        try:
            decoded = getattr(self._contract.events, name)().process_log(raw)
        except Exception as exc:
            log.warning("Could not decode %s log at block %s: %s", name, raw.get("blockNumber"), exc)
            return None

        tx_hash = _hex(raw["transactionHash"])
        log_index = int(raw["logIndex"])
        ctx = LogContext(
            log_id=f"{tx_hash}-{log_index}",
            contract=normalize_address(raw["address"]),
            log_index=log_index,
            block_number=int(raw["blockNumber"]),
            tx_hash=tx_hash,
        )
        event = parse_event(name, dict(decoded["args"]), ctx)
        if event is None or isinstance(event, FanEvent):
            return event

        # Admin events are audited with their transaction's sender and calldata.
        tx = await self._w3.eth.get_transaction(raw["transactionHash"])
        ctx = replace(ctx, tx_from=normalize_address(tx["from"]), tx_input=_hex(tx["input"]))
        return replace(event, log=ctx)
