"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from collective_indexer.errors import ConfigurationError
from collective_indexer.models.config import IndexerConfig


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "COLLECTIVE_INDEXER_",
) -> IndexerConfig:
    """Load indexer configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (DEFAULT_CLAIMER, COLLECTIVE_INDEXER_RPC_URL, etc.)
        2. TOML config file
        3. Defaults from IndexerConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = IndexerConfig()

    # ── Indexer section ────────────────────────────────────
    indexer = raw.get("indexer", {})
    if v := indexer.get("poll_interval"):
        cfg.poll_interval = int(v)
    if v := indexer.get("error_backoff"):
        cfg.error_backoff = int(v)
    if v := indexer.get("batch_size"):
        cfg.batch_size = int(v)
    if v := indexer.get("log_level"):
        cfg.log_level = str(v)

    # ── Chain section ──────────────────────────────────────
    chain = raw.get("chain", {})
    if v := chain.get("rpc_url"):
        cfg.rpc_url = str(v)
    if v := chain.get("contracts"):
        cfg.contracts = [str(c).lower() for c in v]
    if (v := chain.get("start_block")) is not None:
        cfg.start_block = int(v)
    if v := chain.get("abi_path"):
        cfg.abi_path = str(v)
    if v := chain.get("default_claimer"):
        cfg.default_claimer = str(v).lower()

    # ── Storage section ────────────────────────────────────
    storage = raw.get("storage", {})
    if v := storage.get("db_path"):
        cfg.db_path = str(v)

    # ── Environment variable overrides (highest priority) ──
    if rpc := os.environ.get(f"{env_prefix}RPC_URL"):
        cfg.rpc_url = rpc
    if contracts := os.environ.get(f"{env_prefix}CONTRACTS"):
        cfg.contracts = [c.strip().lower() for c in contracts.split(",") if c.strip()]
    if start := os.environ.get(f"{env_prefix}START_BLOCK"):
        try:
            cfg.start_block = int(start)
        except ValueError:
            raise ConfigurationError(f"{env_prefix}START_BLOCK must be an integer, got {start!r}") from None
    if db_path := os.environ.get(f"{env_prefix}DB_PATH"):
        cfg.db_path = db_path
    if claimer := os.environ.get(f"{env_prefix}DEFAULT_CLAIMER") or os.environ.get("DEFAULT_CLAIMER"):
        cfg.default_claimer = claimer.lower()

    # Expand ~ in paths
    if cfg.db_path != ":memory:":
        cfg.db_path = str(Path(cfg.db_path).expanduser())

    return cfg
