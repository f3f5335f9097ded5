"""Repository for investment positions."""

from datetime import datetime
from typing import Any, Optional

from ...core.exceptions import PositionNotFoundError
from ...core.models import Position, Quote
from ...core.records import new_position, next_id, patch_position
from ..codec import RecordCodec
from ..seed import seed_positions
from .list_repo import RecordListRepository


class PositionsRepository(RecordListRepository[Position]):
    _key = "positions"
    _codec = RecordCodec(Position)
    _seed = seed_positions
    _not_found = PositionNotFoundError

    def get_by_symbol(self, symbol: str) -> Optional[Position]:
        symbol = symbol.strip().upper()
        return next((p for p in self.list_all() if p.symbol == symbol), None)

    def create(self, symbol: str, **fields: Any) -> Position:
        """Create a position with a fresh id. fields go to new_position()."""
        return self._append(
            lambda records: new_position(next_id(p.id for p in records), symbol, **fields)
        )

    def update(self, position_id: int, changes: dict) -> Optional[Position]:
        return self._replace(position_id, lambda p: patch_position(p, changes))

    def apply_quote(
        self,
        position_id: int,
        quote: Quote,
        source_label: str,
        fetched_at: Optional[datetime] = None,
    ) -> Optional[Position]:
        """Merge a successful lookup. The position's FX rate is left alone."""
        return self.update(position_id, {
            "current_price": quote.price,
            "display_name": quote.name,
            "quote_currency": quote.currency,
            "last_updated_at": fetched_at or datetime.now(),
            "price_source_label": source_label,
        })
