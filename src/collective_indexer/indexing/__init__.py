"""Event classification and Collective state derivation."""

from collective_indexer.indexing.aggregator import CollectiveAggregator
from collective_indexer.indexing.change import ONE_DAY_OF_BLOCKS, ChangeCalculator
from collective_indexer.indexing.classifier import classify, extract_prices
from collective_indexer.indexing.recorder import AdminEventRecorder, EventRecorder

__all__ = [
    "CollectiveAggregator",
    "ChangeCalculator", "ONE_DAY_OF_BLOCKS",
    "classify", "extract_prices",
    "AdminEventRecorder", "EventRecorder",
]
