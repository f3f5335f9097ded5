"""Portfolio finance calculations.

Pure functions for currency conversion, position valuation, account
aggregation and totals. No database access or I/O.

Usage:
    from wealth_tracker.core.finance import CurrencyConverter, value_positions
"""

from .accounts import resolve_account, resolve_accounts
from .currency import CurrencyConverter
from .totals import allocation_slices, portfolio_totals
from .valuation import (
    profit_pct,
    total_invested_anchor,
    unit_price_anchor,
    value_position,
    value_positions,
)

__all__ = [
    "CurrencyConverter",
    "value_position",
    "value_positions",
    "profit_pct",
    "unit_price_anchor",
    "total_invested_anchor",
    "resolve_account",
    "resolve_accounts",
    "portfolio_totals",
    "allocation_slices",
]
