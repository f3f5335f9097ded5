"""Sample dataset used on first run and when saved state is unreadable."""

from decimal import Decimal

from ..core.models import Account, Position


def seed_positions() -> list[Position]:
    return [
        Position(
            id=1,
            symbol="VOO",
            display_name="S&P 500 ETF",
            quote_currency="USD",
            current_price=Decimal("512"),
            fx_to_anchor=Decimal("7.82"),
            share_count=Decimal("10"),
            cost_basis_price=Decimal("480"),
            target_allocation_pct=Decimal("60"),
        ),
        Position(
            id=2,
            symbol="2800.HK",
            display_name="Tracker Fund of Hong Kong",
            quote_currency="HKD",
            current_price=Decimal("18.5"),
            fx_to_anchor=Decimal("1"),
            share_count=Decimal("2000"),
            cost_basis_price=Decimal("17.5"),
            target_allocation_pct=Decimal("40"),
        ),
    ]


def seed_accounts() -> list[Account]:
    return [
        Account(
            id=1,
            display_name="Cash account (HKD)",
            currency="HKD",
            fx_to_anchor=Decimal("1"),
            balance=Decimal("50000"),
        ),
        Account(
            id=2,
            display_name="US brokerage account",
            currency="USD",
            fx_to_anchor=Decimal("7.82"),
            balance=None,
            auto_derived=True,
        ),
    ]
