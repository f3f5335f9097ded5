"""Quotes and FX rates via yfinance."""

import asyncio
import logging
from decimal import Decimal
from typing import Optional

import yfinance as yf

from ..core.models import ANCHOR_CURRENCY, BaseCurrency, Quote
from ..core.records import normalize_currency
from .base import MarketDataSource

logger = logging.getLogger(__name__)

QUOTE_URL = "https://finance.yahoo.com/quote/{symbol}"


def _last_price(ticker) -> Optional[Decimal]:
    """Latest price for a yfinance Ticker. Returns None on failure."""
    # Try fast_info first
    try:
        price = getattr(ticker.fast_info, "last_price", None)
        if price is not None and price > 0:
            return Decimal(str(price))
    except Exception:
        logger.debug("fast_info unavailable for %s", getattr(ticker, "ticker", "?"))
    # Fallback to history
    try:
        hist = ticker.history(period="5d")
        if not hist.empty:
            return Decimal(str(hist["Close"].iloc[-1]))
    except Exception:
        logger.debug("history unavailable for %s", getattr(ticker, "ticker", "?"))
    return None


class YahooMarketData(MarketDataSource):
    """Fetches prices for stocks and ETFs via Yahoo Finance."""

    source_label = "Yahoo Finance"

    @staticmethod
    def _sync_fetch_quote(symbol: str) -> Optional[Quote]:
        ticker = yf.Ticker(symbol)
        price = _last_price(ticker)
        if price is None:
            return None
        currency = ""
        try:
            currency = getattr(ticker.fast_info, "currency", "") or ""
        except Exception:
            logger.debug("No currency in fast_info for %s", symbol)
        name = symbol
        try:
            info = ticker.info or {}
            name = info.get("shortName") or info.get("longName") or symbol
            currency = currency or info.get("currency", "")
        except Exception:
            logger.debug("No info for %s", symbol)
        return Quote(
            price=price,
            name=name,
            currency=normalize_currency(currency, "USD"),
            source_urls=[QUOTE_URL.format(symbol=symbol)],
        )

    @staticmethod
    def _sync_fetch_rate() -> Optional[Decimal]:
        pair = f"{ANCHOR_CURRENCY}{BaseCurrency.TWD.value}=X"
        return _last_price(yf.Ticker(pair))

    async def fetch_quote(self, symbol: str) -> Optional[Quote]:
        try:
            quote = await asyncio.to_thread(self._sync_fetch_quote, symbol)
        except Exception as e:
            logger.warning("Yahoo lookup failed for %s: %s", symbol, e)
            return None
        if quote is None:
            logger.warning("Yahoo returned no price for %s", symbol)
        return quote

    async def fetch_anchor_to_base_rate(self) -> Optional[Decimal]:
        try:
            return await asyncio.to_thread(self._sync_fetch_rate)
        except Exception as e:
            logger.warning("Yahoo FX lookup failed: %s", e)
            return None
