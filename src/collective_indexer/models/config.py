"""Configuration models for the indexer."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class IndexerConfig:
    """Complete indexer configuration."""

    # Indexer
    poll_interval: int = 5  # seconds
    error_backoff: int = 30  # seconds
    batch_size: int = 2_000  # blocks per eth_getLogs request
    log_level: str = "info"

    # Chain
    rpc_url: str = ""
    contracts: list[str] = field(default_factory=list)  # vote contract addresses
    start_block: int | None = None  # None: start at the chain head
    abi_path: str | None = None  # JSON ABI overriding the bundled fragments
    default_claimer: str = ""  # loaded from env var DEFAULT_CLAIMER

    # Storage
    db_path: str = "~/.collective_indexer/state.db"
