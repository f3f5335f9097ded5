"""Quotes and FX rates via Gemini with grounded Google Search."""

import asyncio
import json
import logging
import os
from decimal import Decimal
from typing import Any, Optional

from ..core.exceptions import PriceFetchError
from ..core.models import ANCHOR_CURRENCY, BaseCurrency, Quote
from ..core.records import normalize_currency, to_decimal
from .base import MarketDataSource

logger = logging.getLogger(__name__)

QUOTE_PROMPT = (
    'Find the current real-time stock price, official name, and trading currency '
    'for the ticker "{symbol}" from Google Finance. Return the data strictly in JSON '
    'format. For Hong Kong stocks like 2800.HK, ensure the currency is HKD. '
    "For US stocks like VOO, it's USD."
)
RATE_PROMPT = (
    "What is the current exchange rate from 1 {anchor} to {base}? Return only the number."
)


def _strip_fences(text: str) -> str:
    text = (text or "").strip()
    if text.startswith("```"):
        lines = text.split("\n")
        end = -1 if lines and lines[-1].strip().startswith("```") else len(lines)
        text = "\n".join(lines[1:end]).strip()
    return text


def _load_json(response: Any) -> dict:
    text = _strip_fences(getattr(response, "text", None) or "")
    try:
        data = json.loads(text)
    except ValueError as e:
        raise PriceFetchError(f"Response is not JSON: {text[:80]!r}") from e
    if not isinstance(data, dict):
        raise PriceFetchError("Response JSON is not an object")
    return data


def extract_source_urls(response: Any) -> list[str]:
    """Web citation URIs from the grounding metadata, deduplicated in order."""
    urls: list[str] = []
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return urls
    metadata = getattr(candidates[0], "grounding_metadata", None)
    for chunk in getattr(metadata, "grounding_chunks", None) or []:
        uri = getattr(getattr(chunk, "web", None), "uri", None)
        if uri and uri not in urls:
            urls.append(uri)
    return urls


def parse_quote_response(response: Any) -> Quote:
    data = _load_json(response)
    price = to_decimal(data.get("price"))
    name = str(data.get("name") or "").strip()
    currency = normalize_currency(data.get("currency"), "")
    if price <= 0 or not name or not currency:
        raise PriceFetchError(f"Incomplete quote data: {data}")
    return Quote(price=price, name=name, currency=currency, source_urls=extract_source_urls(response))


def parse_rate_response(response: Any) -> Decimal:
    rate = to_decimal(_load_json(response).get("rate"))
    if rate <= 0:
        raise PriceFetchError(f"Unusable exchange rate: {rate}")
    return rate


class GeminiMarketData(MarketDataSource):
    """Asks Gemini to look prices up with the Google Search tool."""

    source_label = "Google Search API"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gemini-2.0-flash",
        client: Any = None,
    ):
        self.api_key = api_key if api_key is not None else os.getenv("GEMINI_API_KEY", "")
        self.model = model
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise PriceFetchError("No Gemini API key configured")
            from google import genai
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _generate(self, prompt: str, properties: dict, required: list[str]):
        from google.genai import types

        schema = types.Schema(
            type=types.Type.OBJECT,
            properties={k: types.Schema(type=t) for k, t in properties.items()},
            required=required,
        )
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())],
            response_mime_type="application/json",
            response_schema=schema,
        )
        return self._get_client().models.generate_content(
            model=self.model, contents=prompt, config=config,
        )

    def _sync_fetch_quote(self, symbol: str) -> Quote:
        from google.genai import types

        response = self._generate(
            QUOTE_PROMPT.format(symbol=symbol),
            {
                "price": types.Type.NUMBER,
                "name": types.Type.STRING,
                "currency": types.Type.STRING,
            },
            ["price", "name", "currency"],
        )
        return parse_quote_response(response)

    def _sync_fetch_rate(self) -> Decimal:
        from google.genai import types

        response = self._generate(
            RATE_PROMPT.format(anchor=ANCHOR_CURRENCY, base=BaseCurrency.TWD.value),
            {"rate": types.Type.NUMBER},
            ["rate"],
        )
        return parse_rate_response(response)

    async def fetch_quote(self, symbol: str) -> Optional[Quote]:
        # google-genai SDK is sync; run in thread.
        try:
            return await asyncio.to_thread(self._sync_fetch_quote, symbol)
        except Exception as e:
            logger.warning("Gemini lookup failed for %s: %s", symbol, e)
            return None

    async def fetch_anchor_to_base_rate(self) -> Optional[Decimal]:
        try:
            return await asyncio.to_thread(self._sync_fetch_rate)
        except Exception as e:
            logger.warning("Gemini FX lookup failed: %s", e)
            return None
