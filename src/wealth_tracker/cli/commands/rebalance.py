"""Rebalancing advice command."""

from rich.console import Console
from rich.table import Table

from ...core.models import RebalanceAction
from ..formatting import format_money, format_pct
from ..state import load_snapshot

console = Console()

_ACTION_STYLE = {
    RebalanceAction.BUY: "green",
    RebalanceAction.SELL: "red",
    RebalanceAction.HOLD: "dim",
}


def rebalance():
    """Suggest shares to buy or sell after the next monthly contribution."""
    snap = load_snapshot()
    base = snap.settings.base_currency.value
    if not snap.advice:
        console.print("[yellow]No positions to rebalance[/yellow]")
        return

    projected = snap.totals.total_invested_base + snap.settings.monthly_contribution
    console.print(
        f"\n  Invested {format_money(snap.totals.total_invested_base, base)} "
        f"+ contribution {format_money(snap.settings.monthly_contribution, base)} "
        f"= [bold]{format_money(projected, base)}[/bold]\n"
    )

    table = Table(title=f"Rebalancing advice ({base})")
    table.add_column("Symbol", style="bold")
    table.add_column("Current %", justify="right")
    table.add_column("Target %", justify="right")
    table.add_column("Target value", justify="right")
    table.add_column("Unit price", justify="right")
    table.add_column("Shares", justify="right")
    table.add_column("Amount", justify="right")

    for a in snap.advice:
        color = _ACTION_STYLE[a.action]
        if a.action == RebalanceAction.BUY:
            shares = f"+ {a.suggested_shares:,.2f}"
            amount = f"invest {format_money(a.gap_amount, base)}"
        elif a.action == RebalanceAction.SELL:
            shares = f"{a.suggested_shares:,.2f}"
            amount = f"receive {format_money(a.gap_amount, base)}"
        else:
            shares = "hold"
            amount = "—"
        table.add_row(
            a.position.symbol,
            format_pct(a.current_allocation_pct, 1),
            format_pct(a.position.target_allocation_pct, 1),
            format_money(a.target_value_base, base),
            format_money(a.unit_price_base, base, 2),
            f"[{color}]{shares}[/{color}]",
            f"[{color}]{amount}[/{color}]",
        )

    console.print(table)
