"""Textual TUI dashboard - summary, per-chain table, per-asset totals."""

from __future__ import annotations

import asyncio
from typing import Any

from textual.app import App, ComposeResult
from textual.reactive import reactive
from textual.widgets import DataTable, Footer, Header, Static

from bridgedash.aggregation import asset_totals
from bridgedash.pipeline import BridgeDataService, DashboardSnapshot

TIMEFRAME_CYCLE = ["24h", "7d", "30d", "all"]


class SummaryPanel(Static):
    """Headline totals and data-source status."""

    timeframe = reactive("24h")
    status = reactive("Loading...")
    total_value = reactive(0.0)
    transfers = reactive(0)
    assets = reactive(0)
    chains = reactive(0)

    def render(self) -> str:
        return (
            f"[bold]{self.timeframe}[/]  |  {self.status}\n"
            f"Value bridged: ${self.total_value:,.0f}  |  "
            f"Transfers: {self.transfers}  |  "
            f"Assets: {self.assets}  |  "
            f"Chains: {self.chains}"
        )


class ChainTable(DataTable):
    """Per-chain transfers, value and assets."""

    COLUMNS = ("Chain", "Transfers", "Value (USD)", "Assets")

    def on_mount(self) -> None:
        self.add_columns(*self.COLUMNS)

    def show(self, snap: DashboardSnapshot) -> None:
        self.clear()
        for c in snap.stats.chain_stats:
            self.add_row(c.chain_name, str(c.total_transactions), f"{c.total_value:,.2f}", ", ".join(c.active_assets))


class AssetTable(DataTable):
    """USD value per asset over the window."""

    COLUMNS = ("Asset", "Value (USD)")

    def on_mount(self) -> None:
        self.add_columns(*self.COLUMNS)

    def show(self, snap: DashboardSnapshot) -> None:
        self.clear()
        for asset, value in asset_totals(snap.transactions).items():
            self.add_row(asset, f"{value:,.2f}")


class BridgeDashTUI(App[None]):
    """Bridge dashboard TUI - refreshes on an interval."""

    TITLE = "Bridge Dashboard"
    BINDINGS = [("q", "quit", "Quit"), ("t", "cycle_timeframe", "Timeframe"), ("r", "reload", "Refresh")]

    def __init__(
        self,
        service: BridgeDataService,
        timeframe: str = "24h",
        chain: str | None = None,
        refresh_interval_sec: float = 30.0,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._service = service
        self._timeframe = timeframe
        self._chain = chain
        self._refresh_interval = refresh_interval_sec
        self._load_task: asyncio.Task[None] | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield SummaryPanel(id="summary")
        yield ChainTable(id="chains")
        yield AssetTable(id="assets")
        yield Footer()

    def on_mount(self) -> None:
        self.action_reload()
        self.set_interval(self._refresh_interval, self.action_reload)

    def action_reload(self) -> None:
        if self._load_task is not None and not self._load_task.done():
            return
        self._load_task = asyncio.create_task(self._load())

    def action_cycle_timeframe(self) -> None:
        idx = TIMEFRAME_CYCLE.index(self._timeframe) if self._timeframe in TIMEFRAME_CYCLE else -1
        self._timeframe = TIMEFRAME_CYCLE[(idx + 1) % len(TIMEFRAME_CYCLE)]
        self.query_one(SummaryPanel).status = "Loading..."
        self.action_reload()

    async def _load(self) -> None:
        snap = await self._service.load(self._timeframe, self._chain)
        panel = self.query_one(SummaryPanel)
        panel.timeframe = snap.timeframe
        if snap.status.used_fallback:
            panel.status = "[yellow]Synthetic data[/] (live data unavailable)"
        elif not snap.status.ok:
            panel.status = f"[yellow]Partial[/] ({len(snap.status.failures)} failed queries)"
        else:
            panel.status = "[green]Live[/]"
        panel.total_value = snap.stats.total_value_locked
        panel.transfers = snap.stats.total_transactions
        panel.assets = snap.stats.unique_assets
        panel.chains = snap.stats.active_chains
        self.query_one(ChainTable).show(snap)
        self.query_one(AssetTable).show(snap)

    async def on_unmount(self) -> None:
        if self._load_task and not self._load_task.done():
            self._load_task.cancel()
        await self._service.aclose()


def run_tui(settings: Any, timeframe: str | None = None, chain: str | None = None) -> None:
    """Entry point: build the service from settings and run the TUI."""
    from bridgedash.config import UnknownTimeframeError, timeframe_ms

    tf = timeframe or settings.default_timeframe
    try:
        timeframe_ms(tf)
    except UnknownTimeframeError as e:
        raise SystemExit(str(e))
    if chain is None:
        chain = settings.default_chain
    elif chain.lower() == "all":
        chain = None
    app = BridgeDashTUI(
        BridgeDataService.from_settings(settings),
        timeframe=tf,
        chain=chain,
        refresh_interval_sec=settings.refresh_interval_sec,
    )
    app.run()
