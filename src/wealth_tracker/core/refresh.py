"""Market data refresh.

A refresh fetches the FX rate once, then one quote per position, strictly
one request at a time. A failed lookup leaves that position as it was and
the batch carries on. Only one refresh may run at a time across every
process sharing the database: the run holds a claim row in the state
store, and a second call while it is held returns None without doing
anything.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..data.repositories.state_repo import StateRepository
from .exceptions import PriceFetchError
from .models import FALLBACK_ANCHOR_TO_BASE_RATE, Quote

logger = logging.getLogger(__name__)

REFRESH_CLAIM_KEY = "refresh_in_progress"
# A claim this old belongs to a run that died without releasing it.
REFRESH_CLAIM_TTL_SECONDS = 15 * 60


@dataclass
class RefreshResult:
    rate: Decimal
    rate_is_fallback: bool = False
    updated: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    source_urls: list[str] = field(default_factory=list)

    @property
    def is_stale(self) -> bool:
        return bool(self.failed) or self.rate_is_fallback


class RefreshCoordinator:
    def __init__(
        self,
        source,
        positions_repo,
        settings_repo,
        fallback_rate: Decimal = FALLBACK_ANCHOR_TO_BASE_RATE,
        state=None,
    ):
        self.source = source
        self.positions_repo = positions_repo
        self.settings_repo = settings_repo
        self.fallback_rate = fallback_rate
        self.state = state or StateRepository()
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    async def lookup(self, symbol: str) -> Optional[Quote]:
        """Single lookup; failures come back as None."""
        try:
            return await self.source.fetch_quote(symbol)
        except PriceFetchError as e:
            logger.warning("Lookup failed for %s: %s", symbol, e)
            return None

    async def refresh_all(self) -> Optional[RefreshResult]:
        if self._busy or not self.state.claim(REFRESH_CLAIM_KEY, REFRESH_CLAIM_TTL_SECONDS):
            logger.info("Refresh already in progress; ignoring request")
            return None
        self._busy = True
        try:
            return await self._run()
        finally:
            self._busy = False
            self.state.delete(REFRESH_CLAIM_KEY)

    async def _run(self) -> RefreshResult:
        rate = await self.source.fetch_anchor_to_base_rate()
        result = RefreshResult(rate=rate if rate is not None else self.fallback_rate)
        if rate is None:
            result.rate_is_fallback = True
            logger.warning("FX rate unavailable, using fallback %s", self.fallback_rate)
        self.settings_repo.set_anchor_to_base_rate(result.rate)

        positions = self.positions_repo.list_all()
        logger.info("Refreshing %d positions", len(positions))
        for position in positions:
            quote = await self.lookup(position.symbol)
            if quote is None:
                result.failed.append(position.symbol)
                continue
            updated = self.positions_repo.apply_quote(
                position.id, quote, self.source.source_label, datetime.now()
            )
            if updated is None:
                # Removed while the lookup was running.
                continue
            result.updated.append(position.symbol)
            for url in quote.source_urls:
                if url not in result.source_urls:
                    result.source_urls.append(url)

        logger.info(
            "Refresh done: %d updated, %d failed", len(result.updated), len(result.failed)
        )
        return result
