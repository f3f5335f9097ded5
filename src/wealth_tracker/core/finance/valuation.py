"""Per-position valuation and profit/loss.

All functions are pure: they accept Position objects and a converter and
return derived records. Missing numeric fields count as 0 (1 for rates).
"""

from decimal import Decimal

from ..models import Position, PositionValuation
from ..records import to_decimal, to_rate
from .currency import CurrencyConverter

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def unit_price_anchor(position: Position) -> Decimal:
    """Price of one share in the anchor currency."""
    return to_decimal(position.current_price) * to_rate(position.fx_to_anchor)


def profit_pct(profit: Decimal, cost: Decimal) -> Decimal:
    """Profit as a percentage of cost; 0 when there is no cost basis."""
    if cost > 0:
        return profit / cost * HUNDRED
    return ZERO


def value_position(position: Position, converter: CurrencyConverter) -> PositionValuation:
    shares = to_decimal(position.share_count)
    rate = to_rate(position.fx_to_anchor)
    price = to_decimal(position.current_price)
    buy_price = to_decimal(position.cost_basis_price)

    value_anchor = shares * price * rate
    cost_anchor = shares * buy_price * rate
    profit_anchor = value_anchor - cost_anchor

    return PositionValuation(
        position=position,
        value_anchor=value_anchor,
        cost_anchor=cost_anchor,
        profit_anchor=profit_anchor,
        # Ratios are currency-invariant, so this is never recomputed in base.
        profit_pct=profit_pct(profit_anchor, cost_anchor),
        value_base=converter.to_base(value_anchor),
        cost_base=converter.to_base(cost_anchor),
        profit_base=converter.to_base(profit_anchor),
    )


def value_positions(
    positions: list[Position], converter: CurrencyConverter
) -> list[PositionValuation]:
    return [value_position(p, converter) for p in positions]


def total_invested_anchor(valuations: list[PositionValuation]) -> Decimal:
    return sum((v.value_anchor for v in valuations), ZERO)
