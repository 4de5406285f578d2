"""collective_indexer - aggregate state indexer for Collective vote contracts."""

__version__ = "0.1.0"
