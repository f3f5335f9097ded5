"""Record construction and patching.

Every numeric value that enters a Position or Account passes through
to_decimal() here, so the computation code can rely on real Decimals.
"""

import dataclasses
import time
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from .exceptions import UnknownFieldError
from .models import ANCHOR_CURRENCY, Account, Position

# Rate used for a new non-HK position when the user gives none.
DEFAULT_FOREIGN_FX = Decimal("7.82")
DEFAULT_QUOTE_CURRENCY = "USD"

POSITION_PATCH_FIELDS = frozenset({
    "symbol",
    "display_name",
    "quote_currency",
    "current_price",
    "fx_to_anchor",
    "share_count",
    "cost_basis_price",
    "target_allocation_pct",
    "last_updated_at",
    "price_source_label",
})

ACCOUNT_PATCH_FIELDS = frozenset({
    "display_name",
    "currency",
    "fx_to_anchor",
    "balance",
})


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Coerce value to a finite Decimal, or return default."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return default
    else:
        return default
    if not result.is_finite():
        return default
    return result


def to_rate(value: Any) -> Decimal:
    """Coerce an exchange rate. Missing, invalid and zero all mean 1."""
    rate = to_decimal(value, Decimal("1"))
    return rate if rate != 0 else Decimal("1")


def to_optional_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return to_decimal(value)


def normalize_symbol(symbol: str) -> str:
    return (symbol or "").strip().upper()


def normalize_currency(code: Optional[str], default: str = ANCHOR_CURRENCY) -> str:
    return (code or "").strip().upper() or default


def default_fx_for_symbol(symbol: str) -> Decimal:
    return Decimal("1") if normalize_symbol(symbol).endswith(".HK") else DEFAULT_FOREIGN_FX


def next_id(existing: Iterable[int]) -> int:
    """Timestamp-based id, bumped past any existing id it would collide with."""
    candidate = int(time.time() * 1000)
    ids = set(existing)
    if candidate in ids or (ids and candidate <= max(ids)):
        candidate = max(ids) + 1
    return candidate


def new_position(
    position_id: int,
    symbol: str,
    *,
    display_name: str = "",
    quote_currency: Optional[str] = None,
    current_price: Any = None,
    fx_to_anchor: Any = None,
    share_count: Any = None,
    cost_basis_price: Any = None,
    target_allocation_pct: Any = None,
    last_updated_at: Optional[datetime] = None,
    price_source_label: str = "",
) -> Position:
    symbol = normalize_symbol(symbol)
    fx = to_rate(fx_to_anchor) if fx_to_anchor not in (None, "") else default_fx_for_symbol(symbol)
    return Position(
        id=position_id,
        symbol=symbol,
        display_name=display_name or symbol,
        quote_currency=normalize_currency(quote_currency, DEFAULT_QUOTE_CURRENCY),
        current_price=to_decimal(current_price),
        fx_to_anchor=fx,
        share_count=to_decimal(share_count),
        cost_basis_price=to_decimal(cost_basis_price),
        target_allocation_pct=to_decimal(target_allocation_pct),
        last_updated_at=last_updated_at,
        price_source_label=price_source_label,
    )


def new_account(
    account_id: int,
    display_name: str,
    *,
    currency: Optional[str] = None,
    fx_to_anchor: Any = None,
    balance: Any = None,
    auto_derived: bool = False,
) -> Account:
    return Account(
        id=account_id,
        display_name=display_name,
        currency=normalize_currency(currency),
        fx_to_anchor=to_rate(fx_to_anchor),
        balance=None if auto_derived else to_decimal(balance),
        auto_derived=auto_derived,
    )


def _check_fields(changes: dict, allowed: frozenset) -> None:
    unknown = sorted(set(changes) - allowed)
    if unknown:
        raise UnknownFieldError(f"Cannot patch field(s): {', '.join(unknown)}")


def patch_position(position: Position, changes: dict) -> Position:
    """Return a copy of position with the whitelisted changes applied."""
    _check_fields(changes, POSITION_PATCH_FIELDS)
    values: dict[str, Any] = {}
    for key, value in changes.items():
        if key == "symbol":
            values[key] = normalize_symbol(value)
        elif key == "quote_currency":
            values[key] = normalize_currency(value, position.quote_currency)
        elif key in ("current_price", "target_allocation_pct"):
            values[key] = to_decimal(value)
        elif key == "fx_to_anchor":
            values[key] = to_rate(value)
        elif key in ("share_count", "cost_basis_price"):
            values[key] = to_optional_decimal(value)
        elif key in ("display_name", "price_source_label"):
            values[key] = "" if value is None else str(value)
        else:
            values[key] = value
    return dataclasses.replace(position, **values)


def patch_account(account: Account, changes: dict) -> Account:
    """Return a copy of account with the whitelisted changes applied.

    An auto-derived account keeps balance=None whatever the patch says.
    """
    _check_fields(changes, ACCOUNT_PATCH_FIELDS)
    values: dict[str, Any] = {}
    for key, value in changes.items():
        if key == "currency":
            values[key] = normalize_currency(value, account.currency)
        elif key == "fx_to_anchor":
            values[key] = to_rate(value)
        elif key == "balance":
            values[key] = to_decimal(value)
        else:
            values[key] = "" if value is None else str(value)
    if account.auto_derived:
        values["balance"] = None
    return dataclasses.replace(account, **values)
