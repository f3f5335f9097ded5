"""Portfolio-level totals and allocation slices."""

from decimal import Decimal

from ..models import AccountBalance, AllocationSlice, PortfolioTotals, PositionValuation
from .valuation import ZERO, HUNDRED, profit_pct


def portfolio_totals(
    valuations: list[PositionValuation],
    balances: list[AccountBalance],
) -> PortfolioTotals:
    """Net worth, liquid cash and the aggregate profit line.

    liquid_cash_base is not clamped; it goes negative when several
    auto-derived accounts mirror the same investments.
    """
    invested = sum((v.value_base for v in valuations), ZERO)
    assets = sum((b.amount_base for b in balances), ZERO)
    cost = sum((v.cost_base for v in valuations), ZERO)
    profit = sum((v.profit_base for v in valuations), ZERO)
    return PortfolioTotals(
        total_invested_base=invested,
        total_assets_base=assets,
        liquid_cash_base=assets - invested,
        total_cost_base=cost,
        total_profit_base=profit,
        total_profit_pct=profit_pct(profit, cost),
    )


def allocation_slices(balances: list[AccountBalance]) -> list[AllocationSlice]:
    """Share of net worth per account, positive balances only."""
    positive = [b for b in balances if b.amount_base > 0]
    total = sum((b.amount_base for b in positive), ZERO)
    slices = []
    for b in positive:
        share = b.amount_base / total * HUNDRED if total > 0 else ZERO
        slices.append(
            AllocationSlice(
                account_id=b.account.id,
                name=b.account.display_name,
                amount_base=b.amount_base,
                share_pct=share,
            )
        )
    return slices
