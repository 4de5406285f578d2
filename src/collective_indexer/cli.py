"""CLI entry point for the collective indexer."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from web3 import Web3

from collective_indexer.config import load_config
from collective_indexer.daemon import run_daemon
from collective_indexer.errors import ConfigurationError
from collective_indexer.models.records import ContractRecord
from collective_indexer.storage.sqlite import SQLiteStore


def _require_chain(cfg):
    """Exit with error if no RPC URL or contracts are configured."""
    if not cfg.rpc_url:
        click.echo("Error: No RPC URL configured.", err=True)
        click.echo("Set COLLECTIVE_INDEXER_RPC_URL or chain.rpc_url in config.", err=True)
        sys.exit(1)
    if not cfg.contracts:
        click.echo("Error: No vote contracts configured.", err=True)
        click.echo("Set COLLECTIVE_INDEXER_CONTRACTS or chain.contracts in config.", err=True)
        sys.exit(1)


def _address(value: str) -> str:
    if not Web3.is_address(value):
        raise click.BadParameter(f"not an address: {value}")
    return value.lower()


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """collective-indexer - Collective vote contract indexer."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Indexer ────────────────────────────────────────────


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Start the indexer."""
    cfg = load_config(ctx.obj["config_path"])
    _require_chain(cfg)

    click.echo(f"Starting collective indexer ({len(cfg.contracts)} contracts)")
    try:
        asyncio.run(run_daemon(cfg))
    except ConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show indexer configuration and progress."""
    cfg = load_config(ctx.obj["config_path"])
    click.echo(f"RPC URL:    {cfg.rpc_url or '(not set)'}")
    click.echo(f"Contracts:  {', '.join(cfg.contracts) or '(not set)'}")
    click.echo(f"Start:      {cfg.start_block if cfg.start_block is not None else 'chain head'}")
    click.echo(f"Claimer:    {cfg.default_claimer or '(not set)'}")
    click.echo(f"DB path:    {cfg.db_path}")

    async def _status():
        store = SQLiteStore(cfg.db_path)
        await store.initialize()
        try:
            cursor = await store.get_cursor()
            click.echo(f"Next block: {cursor if cursor is not None else '(not started)'}")
            click.echo(f"Events:     {await store.count_events()}")
            click.echo(f"Admin logs: {await store.count_admin_events()}")
            click.echo(f"Collectives: {len(await store.get_all_collectives())}")
        finally:
            await store.close()

    asyncio.run(_status())


# ── Contract metadata ──────────────────────────────────


@cli.command("register-contract")
@click.argument("address")
@click.option("--stable-coin", required=True, help="Treasury token address")
@click.option("--claimer", default="", help="Claimer account (defaults to DEFAULT_CLAIMER)")
@click.pass_context
def register_contract(ctx: click.Context, address: str, stable_coin: str, claimer: str) -> None:
    """Store metadata for a vote contract."""
    cfg = load_config(ctx.obj["config_path"])
    record = ContractRecord(
        address=_address(address),
        stable_coin=_address(stable_coin),
        claimer_account=_address(claimer) if claimer else cfg.default_claimer,
    )

    async def _register():
        store = SQLiteStore(cfg.db_path)
        await store.initialize()
        try:
            await store.save_contract(record)
        finally:
            await store.close()

    asyncio.run(_register())
    click.echo(f"Registered {record.address}")
    click.echo(f"  Stable coin: {record.stable_coin}")
    click.echo(f"  Claimer:     {record.claimer_account or '(not set)'}")


# ── Queries ────────────────────────────────────────────


@cli.command()
@click.argument("address")
@click.pass_context
def collective(ctx: click.Context, address: str) -> None:
    """Show the aggregate state of a collective."""
    cfg = load_config(ctx.obj["config_path"])

    async def _collective():
        store = SQLiteStore(cfg.db_path)
        await store.initialize()
        try:
            c = await store.get_collective(_address(address))
            if c is None:
                click.echo("Collective not indexed.")
                return
            click.echo(f"Collective:     {c.id}")
            click.echo(f"  Contract:       {c.contract_id}")
            click.echo(f"  Price:          {c.price}")
            click.echo(f"  Change (24h):   {c.percent_change:+.2f}%")
            click.echo(f"  Fans:           {c.fan_count}")
            click.echo(f"  Votes:          {c.vote_count}")
            click.echo(f"  Burnt votes:    {c.burnt_vote_count}")
            click.echo(f"  Claimer votes:  {c.claimer_vote_count}")
            click.echo(f"  Treasury:       {c.treasury_value}")
            if c.position is not None:
                click.echo(f"  Position:       {c.position}")
            if c.fanbase is not None:
                click.echo(f"  Fanbase:        {c.fanbase}")
            click.echo(f"  Last event:     {c.last_event_id}")
        finally:
            await store.close()

    asyncio.run(_collective())


@cli.command()
@click.argument("address")
@click.option("--limit", "-n", type=int, default=20, help="Number of events to show")
@click.pass_context
def events(ctx: click.Context, address: str, limit: int) -> None:
    """Show the most recent events of a collective."""
    cfg = load_config(ctx.obj["config_path"])

    async def _events():
        store = SQLiteStore(cfg.db_path)
        await store.initialize()
        try:
            rows = await store.get_events_for_collective(_address(address), limit)
            if not rows:
                click.echo("No events.")
                return
            for e in rows:
                click.echo(
                    f"  block={e.block_number} {e.event_type:<8} fan={e.fan_id[:10]} "
                    f"votes={e.vote_amount} fan_votes={e.fan_votes} "
                    f"base={e.price_base} total={e.price_total}"
                )
        finally:
            await store.close()

    asyncio.run(_events())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
