"""Anchor-to-base currency conversion."""

from dataclasses import dataclass
from decimal import Decimal

from ..models import ANCHOR_CURRENCY, BaseCurrency, Settings


@dataclass(frozen=True)
class CurrencyConverter:
    """Converts anchor-currency amounts into the selected base currency.

    The rate is applied as given; zero or negative rates are not rejected.
    """
    base_currency: BaseCurrency
    anchor_to_base_rate: Decimal

    @classmethod
    def from_settings(cls, settings: Settings) -> "CurrencyConverter":
        return cls(settings.base_currency, settings.anchor_to_base_rate)

    @property
    def is_identity(self) -> bool:
        return self.base_currency.value == ANCHOR_CURRENCY

    def to_base(self, amount_anchor: Decimal) -> Decimal:
        if self.is_identity:
            return amount_anchor
        return amount_anchor * self.anchor_to_base_rate
