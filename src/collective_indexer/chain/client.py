"""Read-only contract calls through web3's async client."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from web3 import AsyncWeb3, Web3

log = logging.getLogger(__name__)


def _checksum_args(args: Sequence[Any]) -> list[Any]:
    """Checksum any address-shaped string arguments, as web3 requires."""
    out: list[Any] = []
    for arg in args:
        if isinstance(arg, str) and Web3.is_address(arg):
            out.append(Web3.to_checksum_address(arg))
        else:
            out.append(arg)
    return out


class Web3ContractCaller:
    """Implements the ContractCaller protocol with `eth_call` at the latest block.

    Any failure (revert, undecodable output from an address without code,
    transport error) is logged and reported as None. Callers decide the
    fallback value.
    """

    def __init__(self, w3: AsyncWeb3) -> None:
        self._w3 = w3

    async def read_contract(
        self,
        abi: list[dict],
        address: str,
        function_name: str,
        args: Sequence[Any],
    ) -> Any | None:
        try:
            contract = self._w3.eth.contract(
                address=Web3.to_checksum_address(address), abi=abi,
            )
            fn = contract.functions[function_name]
            return await fn(*_checksum_args(args)).call()
        except Exception as exc:
            log.debug("%s(%s) at %s failed: %s", function_name, args, address, exc)
            return None
