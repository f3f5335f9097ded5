"""Builds the configured market data source."""

import os

from ..core.config import AppConfig, get_config
from .base import MarketDataSource


def get_market_data_source(cfg: AppConfig | None = None) -> MarketDataSource:
    cfg = cfg or get_config()
    if cfg.market_data_source == "yahoo":
        from .yahoo_source import YahooMarketData
        return YahooMarketData()
    from .gemini_source import GeminiMarketData
    return GeminiMarketData(
        api_key=os.getenv(cfg.gemini_api_key_env, ""),
        model=cfg.gemini_model,
    )
