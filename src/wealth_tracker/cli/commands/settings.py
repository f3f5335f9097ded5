"""Settings commands: base currency, FX rate, monthly contribution, data source."""

import dataclasses
from decimal import Decimal

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import MARKET_DATA_SOURCES, get_config, save_config
from ...core.models import ANCHOR_CURRENCY, BaseCurrency
from ...data.repositories.settings_repo import SettingsRepository
from ..formatting import format_money

app = typer.Typer(help="Base currency, FX rate, monthly contribution and data source")
console = Console()
repo = SettingsRepository()


@app.command("show")
def show():
    """Show current settings."""
    s = repo.get()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Base currency", s.base_currency.value)
    table.add_row(
        "Exchange rate",
        f"1 {ANCHOR_CURRENCY} ≈ {s.anchor_to_base_rate:.4f} {BaseCurrency.TWD.value}",
    )
    table.add_row("Monthly contribution", format_money(s.monthly_contribution, s.base_currency.value))
    table.add_row("Market data", get_config().market_data_source)
    console.print(table)


@app.command("base-currency")
def base_currency(currency: BaseCurrency = typer.Argument(..., help="Display currency")):
    """Change the currency all totals are shown in."""
    s = repo.set_base_currency(currency)
    console.print(f"[green]Base currency set to {s.base_currency.value}[/green]")


@app.command("contribution")
def contribution(amount: float = typer.Argument(..., help="Planned monthly contribution (base currency)")):
    """Set the monthly contribution used by rebalancing advice."""
    s = repo.set_monthly_contribution(Decimal(str(amount)))
    console.print(
        f"[green]Monthly contribution set to "
        f"{format_money(s.monthly_contribution, s.base_currency.value)}[/green]"
    )


@app.command("rate")
def rate(value: float = typer.Argument(..., help=f"{BaseCurrency.TWD.value} per 1 {ANCHOR_CURRENCY}")):
    """Set the exchange rate manually (overwritten by the next refresh)."""
    s = repo.set_anchor_to_base_rate(Decimal(str(value)))
    console.print(f"[green]1 {ANCHOR_CURRENCY} ≈ {s.anchor_to_base_rate} {BaseCurrency.TWD.value}[/green]")


@app.command("source")
def source(name: str = typer.Argument(..., help="Market data source: gemini or yahoo")):
    """Choose where prices and the exchange rate come from (saved to config.json)."""
    name = name.strip().lower()
    if name not in MARKET_DATA_SOURCES:
        console.print(
            f"[red]Unknown source '{name}'. Choose one of: {', '.join(MARKET_DATA_SOURCES)}[/red]"
        )
        raise typer.Exit(1)
    save_config(dataclasses.replace(get_config(), market_data_source=name))
    console.print(f"[green]Market data source set to {name}[/green]")
