"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from bridgedash.config import get_settings
from bridgedash.config.settings import configure_logging

app = typer.Typer(
    name="bridgedash",
    help="Bridge dashboard - Hyperlane/deBridge transfer activity, stats, API and TUI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile}


# Subcommands registered from other modules
from bridgedash.cli import api_cmd, data, export_cmd, tui_cmd  # noqa: E402

app.add_typer(data.app, name="data")
app.add_typer(export_cmd.app, name="export")
app.add_typer(api_cmd.app, name="api")
app.add_typer(tui_cmd.app, name="tui")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
