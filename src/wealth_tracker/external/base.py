"""Market data source interface.

A source answers two questions: the latest quote for a symbol, and the
anchor-to-base exchange rate. Both return None on any failure; callers
keep their previous values.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from ..core.models import Quote


class MarketDataSource(ABC):
    source_label: str = ""

    @abstractmethod
    async def fetch_quote(self, symbol: str) -> Optional[Quote]:
        """Latest price, name and currency for symbol, or None."""

    @abstractmethod
    async def fetch_anchor_to_base_rate(self) -> Optional[Decimal]:
        """Units of the non-anchor base currency per anchor unit, or None."""
