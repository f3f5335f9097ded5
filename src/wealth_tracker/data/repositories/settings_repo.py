"""Repository for user settings (base currency, FX rate, contribution)."""

import logging
from decimal import Decimal
from typing import Any, Optional

from ...core.config import get_config
from ...core.exceptions import MalformedStateError
from ...core.models import BaseCurrency, Settings
from ...core.records import to_decimal
from .state_repo import StateRepository

logger = logging.getLogger(__name__)

BASE_CURRENCY_KEY = "base_currency"
RATE_KEY = "anchor_to_base_rate"
CONTRIBUTION_KEY = "monthly_contribution"


class SettingsRepository:
    def __init__(self, state: Optional[StateRepository] = None):
        self.state = state or StateRepository()

    def _read(self, key: str) -> Any:
        try:
            return self.state.get(key)
        except MalformedStateError as e:
            logger.warning("Ignoring unreadable setting %s: %s", key, e)
            return None

    def get(self) -> Settings:
        cfg = get_config()
        raw_base = self._read(BASE_CURRENCY_KEY)
        try:
            base = BaseCurrency(raw_base) if raw_base is not None else BaseCurrency.HKD
        except ValueError:
            logger.warning("Unknown base currency %r, using HKD", raw_base)
            base = BaseCurrency.HKD
        return Settings(
            base_currency=base,
            anchor_to_base_rate=to_decimal(self._read(RATE_KEY), cfg.fallback_rate),
            monthly_contribution=to_decimal(
                self._read(CONTRIBUTION_KEY), cfg.default_monthly_contribution
            ),
        )

    def set_base_currency(self, currency: BaseCurrency) -> Settings:
        self.state.put(BASE_CURRENCY_KEY, BaseCurrency(currency).value)
        return self.get()

    def set_anchor_to_base_rate(self, rate: Decimal) -> Settings:
        self.state.put(RATE_KEY, str(to_decimal(rate)))
        return self.get()

    def set_monthly_contribution(self, amount: Decimal) -> Settings:
        self.state.put(CONTRIBUTION_KEY, str(to_decimal(amount)))
        return self.get()
