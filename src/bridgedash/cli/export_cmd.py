"""Export command: normalized transfers to Parquet or CSV."""

from __future__ import annotations

import typer

from bridgedash.cli.data import load_snapshot
from bridgedash.storage.export import FORMATS, export_transactions

app = typer.Typer(help="Export normalized transfers")


@app.callback(invoke_without_command=True)
def export(
    ctx: typer.Context,
    output: str = typer.Option("transfers.parquet", "--output", "-o", help="Output path"),
    fmt: str = typer.Option("parquet", "--format", "-f", help="parquet or csv"),
    timeframe: str = typer.Option(None, "--timeframe", "-t"),
    chain: str | None = typer.Option(None, "--chain", "-c", help="Chain name/id, or 'all'"),
) -> None:
    """Fetch once and write the transfers to a file."""
    if ctx.invoked_subcommand is not None:
        return
    if fmt.lower() not in FORMATS:
        typer.echo(f"Unsupported format {fmt!r} (expected parquet or csv)", err=True)
        raise typer.Exit(2)
    settings = ctx.obj["settings"]
    if chain is None:
        chain = settings.default_chain
    elif chain.lower() == "all":
        chain = None
    snap, _ = load_snapshot(settings, timeframe or settings.default_timeframe, chain)
    if snap.status.used_fallback:
        typer.echo("Live data unavailable; refusing to export synthetic transfers.", err=True)
        raise typer.Exit(1)
    count = export_transactions(snap.transactions, output, fmt=fmt)
    typer.echo(f"Exported {count} transfers to {output}")
