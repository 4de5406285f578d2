"""EVM chain integration components."""

from collective_indexer.chain.blocks import Web3BlockClock
from collective_indexer.chain.client import Web3ContractCaller
from collective_indexer.chain.poller import Web3LogPoller
from collective_indexer.chain.reader import OnchainReader

__all__ = ["Web3BlockClock", "Web3ContractCaller", "Web3LogPoller", "OnchainReader"]
