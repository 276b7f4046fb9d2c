"""Data subcommand: stats, transactions, chain, discovered."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

import typer

from bridgedash.aggregation import asset_totals, chain_series
from bridgedash.config import UnknownTimeframeError
from bridgedash.config.settings import Settings
from bridgedash.pipeline import BridgeDataService, DashboardSnapshot

app = typer.Typer(help="Fetch bridge activity and print stats")


def load_snapshot(settings: Settings, timeframe: str, chain: str | None) -> tuple[DashboardSnapshot, BridgeDataService]:
    """Run one dashboard read; exits with code 2 on an unknown timeframe."""

    async def _run() -> tuple[DashboardSnapshot, BridgeDataService]:
        async with BridgeDataService.from_settings(settings) as service:
            return await service.load(timeframe, chain), service

    try:
        return asyncio.run(_run())
    except UnknownTimeframeError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(2)


def _chain_option(settings: Settings, chain: str | None) -> str | None:
    if chain is None:
        return settings.default_chain
    return None if chain.lower() == "all" else chain


def _day(ts_ms: int) -> str:
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d")


def _echo_status(snap: DashboardSnapshot) -> None:
    if snap.status.used_fallback:
        typer.echo(f"[synthetic data] {snap.status.error}", err=True)
    elif not snap.status.ok:
        typer.echo(f"[partial data] {snap.status.error}", err=True)


@app.command("stats")
def stats(
    ctx: typer.Context,
    timeframe: str = typer.Option(None, "--timeframe", "-t", help="24h, 7d, 30d, ... (default from config)"),
    chain: str | None = typer.Option(None, "--chain", "-c", help="Chain name/id, or 'all'"),
    as_json: bool = typer.Option(False, "--json", help="Print BridgeStats as JSON"),
) -> None:
    """Totals, per-chain summaries and per-asset values."""
    settings = ctx.obj["settings"]
    snap, _ = load_snapshot(settings, timeframe or settings.default_timeframe, _chain_option(settings, chain))
    if as_json:
        typer.echo(snap.stats.model_dump_json(by_alias=True, indent=2))
        return
    _echo_status(snap)
    s = snap.stats
    typer.echo(f"Total value bridged: ${s.total_value_locked:,.2f}")
    typer.echo(f"Total transfers:     {s.total_transactions}")
    typer.echo(f"Unique assets:       {s.unique_assets}")
    typer.echo(f"Active chains:       {s.active_chains}")
    typer.echo("By chain:")
    for c in s.chain_stats:
        typer.echo(f"  {c.chain_name:<14} {c.total_transactions:>6}  ${c.total_value:>14,.2f}  {', '.join(c.active_assets)}")
    typer.echo("By asset:")
    for asset, value in asset_totals(snap.transactions).items():
        typer.echo(f"  {asset:<10} ${value:>14,.2f}")


@app.command("transactions")
def transactions(
    ctx: typer.Context,
    timeframe: str = typer.Option(None, "--timeframe", "-t"),
    chain: str | None = typer.Option(None, "--chain", "-c"),
    limit: int = typer.Option(20, "--limit", "-n", help="Max rows to print"),
    as_json: bool = typer.Option(False, "--json"),
) -> None:
    """Latest normalized transfers."""
    settings = ctx.obj["settings"]
    snap, _ = load_snapshot(settings, timeframe or settings.default_timeframe, _chain_option(settings, chain))
    rows = snap.transactions[:limit]
    if as_json:
        typer.echo(json.dumps([tx.model_dump(by_alias=True) for tx in rows], indent=2))
        return
    _echo_status(snap)
    for tx in rows:
        typer.echo(
            f"  {_day(tx.timestamp)}  {tx.source_chain:>12} -> {tx.destination_chain:<12}"
            f"  {tx.amount:>14} {tx.asset:<8} ${tx.usd_value:>12,.2f}  {tx.tx_hash[:18]}"
        )
    typer.echo(f"Showing {len(rows)} of {len(snap.transactions)} transfers")


@app.command("chain")
def chain_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Chain name or id, e.g. Solana or 1399811149"),
    timeframe: str = typer.Option(None, "--timeframe", "-t"),
) -> None:
    """Daily per-asset USD series for one chain."""
    settings = ctx.obj["settings"]
    snap, _ = load_snapshot(settings, timeframe or settings.default_timeframe, name)
    _echo_status(snap)
    points = chain_series(snap.transactions, snap.chain or name)
    for p in points:
        typer.echo(f"  {_day(p.timestamp)}  {p.asset:<10} ${p.value:>14,.2f}")
    typer.echo(f"{len(points)} points for {snap.chain or name}")


@app.command("discovered")
def discovered(
    ctx: typer.Context,
    timeframe: str = typer.Option(None, "--timeframe", "-t"),
) -> None:
    """Fetch once, then list every asset symbol and chain name seen."""
    settings = ctx.obj["settings"]
    _, service = load_snapshot(settings, timeframe or settings.default_timeframe, None)
    typer.echo("Assets: " + ", ".join(service.discovered_assets()))
    typer.echo("Chains: " + ", ".join(service.discovered_chains()))
