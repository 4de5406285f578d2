"""ABI fragments for the calls and logs the indexer consumes.

The vote contract fragments cover only what the indexer reads. A full
ABI of the deployed contract can be supplied via `chain.abi_path`.
"""

from __future__ import annotations

import json
from pathlib import Path


def _address(name: str, indexed: bool = False) -> dict:
    return {"name": name, "type": "address", "indexed": indexed}


def _uint(name: str, indexed: bool = False) -> dict:
    return {"name": name, "type": "uint256", "indexed": indexed}


_PRICE_STRUCT = {
    "name": "price",
    "type": "tuple",
    "indexed": False,
    "components": [
        {"name": "base", "type": "uint256"},
        {"name": "poolFee", "type": "uint256"},
        {"name": "protocolFee", "type": "uint256"},
        {"name": "collectiveFee", "type": "uint256"},
        {"name": "totalFee", "type": "uint256"},
        {"name": "total", "type": "uint256"},
        {"name": "perVote", "type": "uint256"},
    ],
}

_FAN_ARGS = [
    _address("fan", indexed=True),
    _address("collective", indexed=True),
    _uint("voteAmount"),
    _uint("fanVotes"),
    _uint("supply"),
]


def _event(name: str, inputs: list[dict]) -> dict:
    return {"type": "event", "name": name, "anonymous": False, "inputs": inputs}


ERC20_ABI: list[dict] = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

VOTE_CONTRACT_ABI: list[dict] = [
    # ── Views ──────────────────────────────────────────────
    {
        "type": "function",
        "name": "collectives",
        "stateMutability": "view",
        "inputs": [{"name": "collective", "type": "address"}],
        "outputs": [
            {"name": "name", "type": "string"},
            {"name": "voteCount", "type": "uint256"},
            {"name": "burntVoteCount", "type": "uint256"},
        ],
    },
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [
            {"name": "account", "type": "address"},
            {"name": "collective", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    # ── Fan events ─────────────────────────────────────────
    _event("VotesBought", [*_FAN_ARGS, _PRICE_STRUCT]),
    _event("VotesSold", [*_FAN_ARGS, _PRICE_STRUCT]),
    _event("VotesRedeemed", [*_FAN_ARGS, _uint("value")]),
    _event("VotesTransferred", [*_FAN_ARGS, _address("to")]),
    # ── Admin events ───────────────────────────────────────
    _event("DistributeCollectiveWinnings", [
        _address("collective", indexed=True), _uint("exitRound"), _uint("round"),
    ]),
    _event("OraclewinPositionVerified", [_address("collective", indexed=True), _uint("round")]),
    _event("SetCollectiveFanbase", [_address("collective", indexed=True), _uint("fanbase")]),
    _event("ProtocolFeeUpdated", [_uint("protocolFee")]),
    _event("ClaimerUpdated", [_address("claimer")]),
    _event("OwnershipTransferred", [
        _address("previousOwner", indexed=True), _address("newOwner", indexed=True),
    ]),
]


def load_abi(path: str | Path | None) -> list[dict]:
    """Load a JSON ABI (a bare list or a Hardhat/Foundry artifact), or the bundled one."""
    if path is None:
        return VOTE_CONTRACT_ABI
    with open(Path(path).expanduser()) as f:
        data = json.load(f)
    if isinstance(data, dict):
        return data["abi"]
    return data
