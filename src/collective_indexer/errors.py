"""Exceptions raised by the indexer."""

from __future__ import annotations


class IndexerError(Exception):
    """Base class for indexer errors."""


class ConfigurationError(IndexerError):
    """The deployment is misconfigured. Processing must stop."""


class RecordExistsError(IndexerError):
    """An append-only record was created twice under the same id."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} {record_id} already exists")
        self.kind = kind
        self.record_id = record_id
