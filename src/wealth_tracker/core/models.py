"""Data models for the wealth tracker."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

# All cross-entity sums are accumulated in the anchor currency.
ANCHOR_CURRENCY = "HKD"
FALLBACK_ANCHOR_TO_BASE_RATE = Decimal("4.15")
DEFAULT_MONTHLY_CONTRIBUTION = Decimal("10000")


class BaseCurrency(str, Enum):
    HKD = "HKD"
    TWD = "TWD"


class TradeSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class RebalanceAction(str, Enum):
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


@dataclass
class Position:
    id: int
    symbol: str
    display_name: str = ""
    quote_currency: str = "USD"
    current_price: Decimal = Decimal("0")
    fx_to_anchor: Decimal = Decimal("1")
    share_count: Optional[Decimal] = None
    cost_basis_price: Optional[Decimal] = None
    target_allocation_pct: Decimal = Decimal("0")
    last_updated_at: Optional[datetime] = None
    price_source_label: str = ""


@dataclass
class Account:
    id: int
    display_name: str
    currency: str = ANCHOR_CURRENCY
    fx_to_anchor: Decimal = Decimal("1")
    balance: Optional[Decimal] = None  # None when auto_derived
    auto_derived: bool = False


@dataclass
class Settings:
    base_currency: BaseCurrency = BaseCurrency.HKD
    anchor_to_base_rate: Decimal = FALLBACK_ANCHOR_TO_BASE_RATE
    monthly_contribution: Decimal = DEFAULT_MONTHLY_CONTRIBUTION


@dataclass
class Transaction:
    """A single trade. Kept as a record only; valuation never reads it."""
    id: int
    trade_date: datetime
    symbol: str
    side: TradeSide
    price: Decimal
    shares: Decimal
    amount: Decimal
    currency: str


@dataclass
class Quote:
    """Result of a market data lookup for one symbol."""
    price: Decimal
    name: str
    currency: str
    source_urls: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PositionValuation:
    position: Position
    value_anchor: Decimal
    cost_anchor: Decimal
    profit_anchor: Decimal
    profit_pct: Decimal
    value_base: Decimal
    cost_base: Decimal
    profit_base: Decimal


@dataclass(frozen=True)
class AccountBalance:
    account: Account
    amount: Decimal  # in the account's own currency
    amount_anchor: Decimal
    amount_base: Decimal


@dataclass(frozen=True)
class PortfolioTotals:
    total_invested_base: Decimal
    total_assets_base: Decimal
    liquid_cash_base: Decimal
    total_cost_base: Decimal
    total_profit_base: Decimal
    total_profit_pct: Decimal


@dataclass(frozen=True)
class AllocationSlice:
    account_id: int
    name: str
    amount_base: Decimal
    share_pct: Decimal


@dataclass(frozen=True)
class RebalanceAdvice:
    position: Position
    current_allocation_pct: Decimal
    target_value_base: Decimal
    gap_base: Decimal
    unit_price_base: Decimal
    suggested_shares: Decimal
    action: RebalanceAction

    @property
    def gap_amount(self) -> Decimal:
        """Money to invest (buy) or expected proceeds (sell)."""
        return abs(self.gap_base)


@dataclass(frozen=True)
class PortfolioSnapshot:
    settings: Settings
    valuations: list[PositionValuation]
    balances: list[AccountBalance]
    totals: PortfolioTotals
    slices: list[AllocationSlice]
    advice: list[RebalanceAdvice]
