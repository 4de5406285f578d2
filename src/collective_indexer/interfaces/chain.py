"""Chain access protocols - read-only contract calls and block timestamps."""

from __future__ import annotations

from typing import Any, Protocol, Sequence


class ContractCaller(Protocol):
    """Read-only contract call client."""

    async def read_contract(
        self,
        abi: list[dict],
        address: str,
        function_name: str,
        args: Sequence[Any],
    ) -> Any | None:
        """Return the decoded result, or None if the call failed."""
        ...


class BlockClock(Protocol):
    """Resolves block numbers to block timestamps."""

    async def get_block_timestamp(self, block_number: int) -> int:
        ...
