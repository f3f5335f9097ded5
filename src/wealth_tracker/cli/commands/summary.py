"""Net worth summary command."""

from rich.console import Console
from rich.table import Table

from ..formatting import format_money, format_pct, format_signed_money
from ..state import load_snapshot

console = Console()


def summary():
    """Show net worth, liquid cash, invested value and allocation by account."""
    snap = load_snapshot()
    base = snap.settings.base_currency.value
    t = snap.totals

    console.print(f"\n[bold]Net worth ({base})[/bold]\n")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("[bold]Net worth[/bold]", f"[bold]{format_money(t.total_assets_base, base)}[/bold]")
    cash_color = "green" if t.liquid_cash_base >= 0 else "red"
    table.add_row("Liquid cash", f"[{cash_color}]{format_money(t.liquid_cash_base, base)}[/{cash_color}]")
    table.add_row("Invested", format_money(t.total_invested_base, base))
    table.add_row("Cost basis", format_money(t.total_cost_base, base))
    pnl_color = "green" if t.total_profit_base >= 0 else "red"
    table.add_row(
        "Unrealized P&L",
        f"[{pnl_color}]{format_signed_money(t.total_profit_base, base)} "
        f"({format_pct(t.total_profit_pct, signed=True)})[/{pnl_color}]",
    )
    console.print(table)

    if snap.slices:
        alloc = Table(title="Allocation by account")
        alloc.add_column("Account", style="bold")
        alloc.add_column(f"Amount ({base})", justify="right")
        alloc.add_column("Share", justify="right")
        for s in snap.slices:
            alloc.add_row(s.name, format_money(s.amount_base, base), format_pct(s.share_pct, 1))
        console.print()
        console.print(alloc)
