"""On-chain reads backing the Collective aggregate, with zero-valued fallbacks."""

from __future__ import annotations

from collective_indexer.chain.abis import ERC20_ABI, VOTE_CONTRACT_ABI
from collective_indexer.diagnostics import LoggingDiagnostics
from collective_indexer.errors import ConfigurationError
from collective_indexer.interfaces.chain import ContractCaller
from collective_indexer.interfaces.diagnostics import Diagnostics
from collective_indexer.interfaces.store import IndexerStore
from collective_indexer.models.records import CollectiveVotes


class OnchainReader:
    """Wraps the three contract reads the aggregator needs.

    A failed read (revert, null result, no code at the target) is reported
    to the diagnostics sink and replaced by its fallback, so a transient
    RPC gap never blocks aggregation. Only an unresolvable claimer address
    raises, because that is a deployment error.
    """

    def __init__(
        self,
        caller: ContractCaller,
        store: IndexerStore,
        default_claimer: str = "",
        diagnostics: Diagnostics | None = None,
        vote_abi: list[dict] | None = None,
    ) -> None:
        self._caller = caller
        self._store = store
        self._default_claimer = default_claimer
        self._diagnostics = diagnostics or LoggingDiagnostics()
        self._vote_abi = vote_abi or VOTE_CONTRACT_ABI

    async def read_collective_votes(self, contract: str, collective: str) -> CollectiveVotes:
        """Fallback: CollectiveVotes("", 0, 0)."""
        result = await self._caller.read_contract(
            self._vote_abi, contract, "collectives", [collective],
        )
        if result is None or len(result) < 3:
            self._failed("collectives", contract=contract, args=[collective])
            return CollectiveVotes()

        return CollectiveVotes(
            name=result[0],
            vote_count=int(result[1]),
            burnt_vote_count=int(result[2]),
        )

    async def read_claimer_votes(
        self, contract: str, collective: str, claimer: str | None = None,
    ) -> int:
        """Vote balance of the contract's claimer account. Fallback: 0.

        `claimer` skips resolution when the caller already resolved it.
        """
        if claimer is None:
            claimer = await self.resolve_claimer(contract)
        result = await self._caller.read_contract(
            self._vote_abi, contract, "balanceOf", [claimer, collective],
        )
        if result is None:
            self._failed("balanceOf", contract=contract, args=[claimer, collective])
            return 0
        return int(result)

    async def read_treasury_value(self, token: str, collective: str) -> int:
        """Treasury token balance held by the collective. Fallback: 0."""
        result = await self._caller.read_contract(
            ERC20_ABI, token, "balanceOf", [collective],
        )
        if result is None:
            self._failed("balanceOf", token=token, args=[collective])
            return 0
        return int(result)

    async def resolve_claimer(self, contract: str) -> str:
        """Stored contract metadata wins; the configured default applies only
        when no metadata exists for the contract at all."""
        record = await self._store.get_contract(contract)
        claimer = record.claimer_account if record is not None else self._default_claimer
        if not claimer:
            raise ConfigurationError(
                f"No claimer account for contract {contract}: register the contract"
                " with a claimer or set DEFAULT_CLAIMER"
            )
        return claimer

    def _failed(self, function: str, **context: object) -> None:
        self._diagnostics.warning(f"Function call '{function}' failed", **context)
