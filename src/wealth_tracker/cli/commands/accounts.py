"""Account management commands."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.exceptions import AccountNotFoundError
from ...data.repositories.accounts_repo import AccountsRepository
from ..formatting import format_money
from ..state import load_snapshot

app = typer.Typer(help="Manage cash and brokerage accounts")
console = Console()
repo = AccountsRepository()


@app.command("add")
def add(
    name: str = typer.Argument(..., help="Account name"),
    currency: str = typer.Option("HKD", "--currency", help="Account currency"),
    balance: Optional[float] = typer.Option(None, "--balance", "-b", help="Current balance"),
    rate: Optional[float] = typer.Option(None, "--rate", "-r", help="FX rate to HKD (default 1)"),
    auto: bool = typer.Option(
        False, "--auto", help="Balance mirrors the total invested value (brokerage account)"
    ),
):
    """Add a new account."""
    if auto and balance is not None:
        console.print("[yellow]--balance is ignored for auto-derived accounts[/yellow]")
    a = repo.create(name, currency=currency, fx_to_anchor=rate, balance=balance, auto_derived=auto)
    kind = " (auto from investments)" if a.auto_derived else ""
    console.print(f"[green]Added account '{a.display_name}'{kind}, ID: {a.id}[/green]")


@app.command("edit")
def edit(
    account_id: int = typer.Argument(..., help="Account ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Account name"),
    currency: Optional[str] = typer.Option(None, "--currency", help="Account currency"),
    balance: Optional[float] = typer.Option(None, "--balance", "-b", help="Current balance"),
    rate: Optional[float] = typer.Option(None, "--rate", "-r", help="FX rate to HKD"),
):
    """Edit an account. Only the given fields change."""
    try:
        existing = repo.require(account_id)
    except AccountNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if existing.auto_derived and balance is not None:
        console.print("[yellow]Balance of an auto-derived account cannot be set; ignoring --balance[/yellow]")
        balance = None

    changes = {
        key: value
        for key, value in {
            "display_name": name,
            "currency": currency,
            "balance": balance,
            "fx_to_anchor": rate,
        }.items()
        if value is not None
    }
    if not changes:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    a = repo.update(account_id, changes)
    console.print(f"[green]Updated account '{a.display_name}' (ID: {a.id})[/green]")


@app.command("remove")
def remove(
    account_id: int = typer.Argument(..., help="Account ID"),
    force: bool = typer.Option(False, "--force", "-f"),
):
    """Remove an account."""
    try:
        a = repo.require(account_id)
    except AccountNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not force:
        confirm = typer.confirm(f"Remove account '{a.display_name}'?")
        if not confirm:
            console.print("Cancelled.")
            return

    repo.delete(account_id)
    console.print(f"[green]Removed account '{a.display_name}'[/green]")


@app.command("list")
def list_accounts():
    """List accounts with their resolved balances."""
    snap = load_snapshot()
    base = snap.settings.base_currency.value
    if not snap.balances:
        console.print("[yellow]No accounts. Add one with: wt accounts add <NAME>[/yellow]")
        return

    table = Table(title=f"Accounts ({base})")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Currency")
    table.add_column("Rate", justify="right")
    table.add_column("Amount", justify="right")
    table.add_column(f"≈ {base}", justify="right")
    table.add_column("Source", style="dim")

    for b in snap.balances:
        a = b.account
        table.add_row(
            str(a.id),
            a.display_name,
            a.currency,
            f"{a.fx_to_anchor:.4f}",
            format_money(b.amount, a.currency),
            format_money(b.amount_base, base),
            "investments" if a.auto_derived else "manual",
        )

    console.print(table)
    console.print(f"  Net worth: [bold]{format_money(snap.totals.total_assets_base, base)}[/bold]\n")
