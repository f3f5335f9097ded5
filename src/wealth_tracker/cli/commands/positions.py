"""Position management commands."""

import asyncio
from datetime import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.exceptions import PositionNotFoundError, UnknownFieldError
from ...core.refresh import RefreshCoordinator
from ...data.repositories.positions_repo import PositionsRepository
from ...data.repositories.settings_repo import SettingsRepository
from ...external.factory import get_market_data_source
from ..formatting import format_money, format_pct, format_signed_money, relative_time
from ..state import load_snapshot

app = typer.Typer(help="Manage investment positions")
console = Console()
repo = PositionsRepository()
settings_repo = SettingsRepository()


def _lookup(symbol: str):
    """Fetch a quote for one symbol; returns (quote or None, source)."""
    source = get_market_data_source()
    coordinator = RefreshCoordinator(source, repo, settings_repo)
    with console.status(f"Looking up {symbol}..."):
        quote = asyncio.run(coordinator.lookup(symbol))
    return quote, source


def _print_sources(urls: list[str]):
    for url in urls[:3]:
        console.print(f"  [dim]source: {url}[/dim]")


@app.command("add")
def add(
    symbol: str = typer.Argument(..., help="Ticker (e.g. VOO or 2800.HK)"),
    shares: Optional[float] = typer.Option(None, "--shares", "-s", help="Shares held"),
    cost: Optional[float] = typer.Option(None, "--cost", "-c", help="Average purchase price"),
    target: Optional[float] = typer.Option(None, "--target", "-t", help="Target allocation %"),
    rate: Optional[float] = typer.Option(
        None, "--rate", "-r", help="FX rate to HKD (default 1 for .HK, else 7.82)"
    ),
    lookup: bool = typer.Option(True, "--lookup/--no-lookup", help="Fetch price and name now"),
):
    """Add a new position."""
    symbol = symbol.strip().upper()
    if not symbol:
        console.print("[red]Symbol is required[/red]")
        raise typer.Exit(1)

    quote, source = _lookup(symbol) if lookup else (None, None)
    if lookup and quote is None:
        console.print(f"[yellow]No market data for {symbol}; price stays at 0 until refreshed[/yellow]")

    p = repo.create(
        symbol,
        display_name=quote.name if quote else symbol,
        quote_currency=quote.currency if quote else None,
        current_price=quote.price if quote else None,
        fx_to_anchor=rate,
        share_count=shares,
        cost_basis_price=cost,
        target_allocation_pct=target,
        last_updated_at=datetime.now() if quote else None,
        price_source_label=source.source_label if quote else "",
    )
    console.print(f"[green]Added {p.symbol} ({p.display_name}), ID: {p.id}[/green]")
    if quote:
        _print_sources(quote.source_urls)


@app.command("edit")
def edit(
    position_id: int = typer.Argument(..., help="Position ID"),
    symbol: Optional[str] = typer.Option(None, "--symbol", help="New ticker"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name"),
    currency: Optional[str] = typer.Option(None, "--currency", help="Quote currency"),
    price: Optional[float] = typer.Option(None, "--price", "-p", help="Current price"),
    shares: Optional[float] = typer.Option(None, "--shares", "-s", help="Shares held"),
    cost: Optional[float] = typer.Option(None, "--cost", "-c", help="Average purchase price"),
    target: Optional[float] = typer.Option(None, "--target", "-t", help="Target allocation %"),
    rate: Optional[float] = typer.Option(None, "--rate", "-r", help="FX rate to HKD"),
    lookup: bool = typer.Option(False, "--lookup", help="Re-fetch price and name"),
):
    """Edit a position. Only the given fields change."""
    try:
        existing = repo.require(position_id)
    except PositionNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    changes = {
        key: value
        for key, value in {
            "symbol": symbol,
            "display_name": name,
            "quote_currency": currency,
            "current_price": price,
            "share_count": shares,
            "cost_basis_price": cost,
            "target_allocation_pct": target,
            "fx_to_anchor": rate,
        }.items()
        if value is not None
    }

    if lookup:
        lookup_symbol = (symbol or existing.symbol).strip().upper()
        quote, source = _lookup(lookup_symbol)
        if quote:
            changes.update({
                "current_price": quote.price,
                "display_name": quote.name,
                "quote_currency": quote.currency,
                "last_updated_at": datetime.now(),
                "price_source_label": source.source_label,
            })
        else:
            console.print(f"[yellow]No market data for {lookup_symbol}; keeping previous price[/yellow]")

    if not changes:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    try:
        p = repo.update(position_id, changes)
    except UnknownFieldError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Updated {p.symbol} (ID: {p.id})[/green]")


@app.command("remove")
def remove(
    position_id: int = typer.Argument(..., help="Position ID"),
    force: bool = typer.Option(False, "--force", "-f"),
):
    """Remove a position."""
    try:
        p = repo.require(position_id)
    except PositionNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not force:
        confirm = typer.confirm(f"Remove {p.symbol}?")
        if not confirm:
            console.print("Cancelled.")
            return

    repo.delete(position_id)
    console.print(f"[green]Removed {p.symbol}[/green]")


@app.command("list")
def list_positions():
    """List positions with value and profit in the base currency."""
    snap = load_snapshot()
    base = snap.settings.base_currency.value
    if not snap.valuations:
        console.print("[yellow]No positions. Add one with: wt positions add <SYMBOL>[/yellow]")
        return

    table = Table(title=f"Positions ({base})")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Shares", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("P&L %", justify="right")
    table.add_column("Updated", style="dim")

    for v in snap.valuations:
        p = v.position
        color = "green" if v.profit_base >= 0 else "red"
        table.add_row(
            str(p.id),
            p.symbol,
            p.display_name or "—",
            f"{p.share_count or 0:,.4f}",
            f"{p.current_price:,.2f} {p.quote_currency}",
            format_money(v.cost_base, base),
            format_money(v.value_base, base),
            f"[{color}]{format_signed_money(v.profit_base, base)}[/{color}]",
            f"[{color}]{format_pct(v.profit_pct, signed=True)}[/{color}]",
            relative_time(p.last_updated_at),
        )

    t = snap.totals
    color = "green" if t.total_profit_base >= 0 else "red"
    table.add_row(
        "", "[bold]Total[/bold]", "", "", "",
        f"[bold]{format_money(t.total_cost_base, base)}[/bold]",
        f"[bold]{format_money(t.total_invested_base, base)}[/bold]",
        f"[bold {color}]{format_signed_money(t.total_profit_base, base)}[/bold {color}]",
        f"[bold {color}]{format_pct(t.total_profit_pct, signed=True)}[/bold {color}]",
        "",
    )
    console.print(table)
