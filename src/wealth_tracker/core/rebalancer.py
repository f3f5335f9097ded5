"""Rebalancing advisor: contribution-aware target allocation.

Each position is compared against its own target share of a projected
total: current invested value plus one planned monthly contribution.
The money gap is converted into a share quantity at today's price.

Targets are not required to sum to 100%; every position gets its gap
independently of the others.
"""

from decimal import Decimal

from .finance import CurrencyConverter, unit_price_anchor
from .models import PositionValuation, RebalanceAction, RebalanceAdvice
from .records import to_decimal

# |suggested shares| at or below this is shown as "hold".
HOLD_THRESHOLD = Decimal("0.001")


def classify(suggested_shares: Decimal) -> RebalanceAction:
    if suggested_shares > HOLD_THRESHOLD:
        return RebalanceAction.BUY
    if suggested_shares < -HOLD_THRESHOLD:
        return RebalanceAction.SELL
    return RebalanceAction.HOLD


class Rebalancer:
    def __init__(
        self,
        valuations: list[PositionValuation],
        converter: CurrencyConverter,
        monthly_contribution: Decimal = Decimal("0"),
    ):
        self.valuations = valuations
        self.converter = converter
        self.monthly_contribution = to_decimal(monthly_contribution)

    @property
    def total_invested_base(self) -> Decimal:
        return sum((v.value_base for v in self.valuations), Decimal("0"))

    @property
    def projected_total_base(self) -> Decimal:
        """Invested value after the next contribution (base currency)."""
        return self.total_invested_base + self.monthly_contribution

    def advise(self) -> list[RebalanceAdvice]:
        """One advice per position, in position order."""
        invested = self.total_invested_base
        projected = self.projected_total_base

        advice: list[RebalanceAdvice] = []
        for v in self.valuations:
            target_pct = to_decimal(v.position.target_allocation_pct)
            target_value = target_pct / 100 * projected
            gap = target_value - v.value_base
            unit_price = self.converter.to_base(unit_price_anchor(v.position))

            # Negative gaps are kept: they mean "sell".
            suggested = gap / unit_price if unit_price > 0 else Decimal("0")
            current_pct = v.value_base / invested * 100 if invested > 0 else Decimal("0")

            advice.append(
                RebalanceAdvice(
                    position=v.position,
                    current_allocation_pct=current_pct,
                    target_value_base=target_value,
                    gap_base=gap,
                    unit_price_base=unit_price,
                    suggested_shares=suggested,
                    action=classify(suggested),
                )
            )
        return advice
