"""Market data refresh command."""

import asyncio

import typer
from rich.console import Console

from ...core.config import get_config
from ...core.models import ANCHOR_CURRENCY, BaseCurrency
from ...core.refresh import RefreshCoordinator
from ...data.repositories.positions_repo import PositionsRepository
from ...data.repositories.settings_repo import SettingsRepository
from ...external.factory import get_market_data_source

console = Console()


def refresh():
    """Refresh the FX rate and the price of every position."""
    coordinator = RefreshCoordinator(
        get_market_data_source(),
        PositionsRepository(),
        SettingsRepository(),
        fallback_rate=get_config().fallback_rate,
    )
    with console.status("Refreshing market data..."):
        result = asyncio.run(coordinator.refresh_all())
    if result is None:
        console.print("[yellow]A refresh is already running[/yellow]")
        return

    rate_note = " [yellow](fallback)[/yellow]" if result.rate_is_fallback else ""
    console.print(f"  1 {ANCHOR_CURRENCY} ≈ {result.rate:.2f} {BaseCurrency.TWD.value}{rate_note}")
    if result.updated:
        console.print(f"  [green]Updated:[/green] {', '.join(result.updated)}")
    if result.failed:
        console.print(f"  [red]Refresh failed for:[/red] {', '.join(result.failed)}")
    if result.is_stale:
        console.print("  [dim]Some figures are stale; showing the last known values[/dim]")
    for url in result.source_urls[:3]:
        console.print(f"  [dim]source: {url}[/dim]")
