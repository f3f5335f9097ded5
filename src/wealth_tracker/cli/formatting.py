"""Display helpers for money, percentages and timestamps."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

CURRENCY_SYMBOLS = {
    "HKD": "HK$",
    "TWD": "NT$",
    "USD": "US$",
}

# Zero amounts in these currencies usually mean "not loaded yet".
_PLACEHOLDER_CURRENCIES = ("HKD", "TWD")


def format_money(value: Decimal, currency: str = "HKD", decimals: int = 0) -> str:
    code = (currency or "HKD").strip().upper()
    if value == 0 and code in _PLACEHOLDER_CURRENCIES:
        return "$ --"
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def format_signed_money(value: Decimal, currency: str = "HKD", decimals: int = 0) -> str:
    prefix = "+" if value >= 0 else ""
    return prefix + format_money(value, currency, decimals)


def format_pct(value: Decimal, decimals: int = 2, signed: bool = False) -> str:
    prefix = "+" if signed and value >= 0 else ""
    return f"{prefix}{value:,.{decimals}f}%"


def relative_time(ts: Optional[datetime], now: Optional[datetime] = None) -> str:
    """'never', 'just now', 'N min ago', or the clock time for older updates."""
    if ts is None:
        return "never"
    now = now or datetime.now()
    minutes = int((now - ts).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} min ago"
    return ts.strftime("%H:%M:%S")
