"""Portfolio snapshot calculator.

Recomputes every derived figure from the raw records in one pass:
conversion -> valuation -> aggregation -> totals -> rebalancing advice.
Nothing is cached between calls.
"""

from .finance import (
    CurrencyConverter,
    allocation_slices,
    portfolio_totals,
    resolve_accounts,
    total_invested_anchor,
    value_positions,
)
from .models import Account, PortfolioSnapshot, Position, Settings
from .rebalancer import Rebalancer


class PortfolioCalculator:
    @staticmethod
    def snapshot(
        positions: list[Position],
        accounts: list[Account],
        settings: Settings,
    ) -> PortfolioSnapshot:
        converter = CurrencyConverter.from_settings(settings)

        valuations = value_positions(positions, converter)
        # Summed in anchor currency; base units never enter this total.
        invested_anchor = total_invested_anchor(valuations)
        balances = resolve_accounts(accounts, invested_anchor, converter)
        totals = portfolio_totals(valuations, balances)
        advice = Rebalancer(valuations, converter, settings.monthly_contribution).advise()

        return PortfolioSnapshot(
            settings=settings,
            valuations=valuations,
            balances=balances,
            totals=totals,
            slices=allocation_slices(balances),
            advice=advice,
        )
