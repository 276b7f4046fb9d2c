"""TUI dashboard command."""

import typer

from bridgedash.tui.app import run_tui

app = typer.Typer(help="Launch TUI dashboard")


@app.callback(invoke_without_command=True)
def tui(
    ctx: typer.Context,
    timeframe: str = typer.Option(None, "--timeframe", "-t", help="Initial timeframe"),
    chain: str | None = typer.Option(None, "--chain", "-c", help="Chain name/id, or 'all'"),
) -> None:
    """Launch the Textual TUI dashboard (summary, chains, assets)."""
    if ctx.invoked_subcommand is not None:
        return
    settings = ctx.obj["settings"]
    run_tui(settings, timeframe=timeframe, chain=chain)
