"""Tests for record construction, coercion and patching."""

from datetime import datetime
from decimal import Decimal

import pytest

from wealth_tracker.core.exceptions import UnknownFieldError
from wealth_tracker.core.models import Account, Position
from wealth_tracker.core.records import (
    DEFAULT_FOREIGN_FX,
    new_account,
    new_position,
    next_id,
    patch_account,
    patch_position,
    to_decimal,
    to_rate,
)


class TestToDecimal:
    @pytest.mark.parametrize("raw, expected", [
        (5, Decimal("5")),
        (1.5, Decimal("1.5")),
        ("  7.82 ", Decimal("7.82")),
        (Decimal("3"), Decimal("3")),
    ])
    def test_numeric(self, raw, expected):
        assert to_decimal(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", float("nan"), float("inf"), True, [], {}])
    def test_non_numeric_falls_back(self, raw):
        assert to_decimal(raw) == Decimal("0")
        assert to_decimal(raw, Decimal("9")) == Decimal("9")

    @pytest.mark.parametrize("raw", [None, 0, "0", "x"])
    def test_rate_defaults_to_one(self, raw):
        assert to_rate(raw) == Decimal("1")

    def test_rate_keeps_real_values(self):
        assert to_rate("7.82") == Decimal("7.82")


class TestNewPosition:
    def test_hk_symbol_defaults_to_rate_one(self):
        p = new_position(1, " 2800.hk ")
        assert p.symbol == "2800.HK"
        assert p.fx_to_anchor == Decimal("1")

    def test_foreign_symbol_defaults_to_usd_rate(self):
        p = new_position(1, "voo")
        assert p.fx_to_anchor == DEFAULT_FOREIGN_FX
        assert p.quote_currency == "USD"
        assert p.display_name == "VOO"
        assert p.current_price == 0
        assert p.last_updated_at is None

    def test_explicit_values(self):
        p = new_position(
            5, "VOO", display_name="S&P 500 ETF", quote_currency="usd",
            current_price=512, fx_to_anchor=7.8, share_count="10",
            cost_basis_price=480.5, target_allocation_pct=60,
        )
        assert p.id == 5
        assert p.quote_currency == "USD"
        assert p.current_price == Decimal("512")
        assert p.fx_to_anchor == Decimal("7.8")
        assert p.share_count == Decimal("10")
        assert p.cost_basis_price == Decimal("480.5")
        assert p.target_allocation_pct == Decimal("60")

    def test_garbage_numbers_coerced(self):
        p = new_position(1, "VOO", share_count="lots", cost_basis_price=None, fx_to_anchor="?")
        assert p.share_count == 0
        assert p.cost_basis_price == 0
        assert p.fx_to_anchor == Decimal("1")


class TestNewAccount:
    def test_manual(self):
        a = new_account(1, "Cash", currency="hkd", balance="50000")
        assert a.currency == "HKD"
        assert a.balance == Decimal("50000")
        assert a.fx_to_anchor == Decimal("1")

    def test_auto_derived_has_no_balance(self):
        a = new_account(2, "Brokerage", currency="USD", fx_to_anchor=7.82, balance=999, auto_derived=True)
        assert a.balance is None
        assert a.auto_derived is True


class TestPatchPosition:
    def _position(self):
        return Position(
            id=7, symbol="VOO", display_name="S&P 500 ETF",
            current_price=Decimal("512"), fx_to_anchor=Decimal("7.82"),
            share_count=Decimal("10"), cost_basis_price=Decimal("480"),
        )

    def test_returns_new_record_without_mutating(self):
        p = self._position()
        patched = patch_position(p, {"share_count": "12", "symbol": "voo "})
        assert patched.share_count == Decimal("12")
        assert patched.symbol == "VOO"
        assert p.share_count == Decimal("10")
        assert patched.id == 7

    def test_unknown_field_rejected(self):
        with pytest.raises(UnknownFieldError):
            patch_position(self._position(), {"shares": 3})

    def test_id_not_patchable(self):
        with pytest.raises(UnknownFieldError):
            patch_position(self._position(), {"id": 99})

    def test_coerces_numbers(self):
        patched = patch_position(self._position(), {
            "current_price": "n/a",
            "fx_to_anchor": 0,
            "cost_basis_price": None,
        })
        assert patched.current_price == 0
        assert patched.fx_to_anchor == Decimal("1")
        assert patched.cost_basis_price is None

    def test_timestamp_passes_through(self):
        ts = datetime(2026, 1, 2, 3, 4, 5)
        assert patch_position(self._position(), {"last_updated_at": ts}).last_updated_at == ts

    def test_empty_currency_keeps_previous(self):
        assert patch_position(self._position(), {"quote_currency": ""}).quote_currency == "USD"


class TestPatchAccount:
    def test_manual_balance(self):
        a = Account(id=1, display_name="Cash", balance=Decimal("10"))
        assert patch_account(a, {"balance": "25"}).balance == Decimal("25")

    def test_auto_derived_balance_stays_none(self):
        a = Account(id=2, display_name="Brokerage", auto_derived=True)
        patched = patch_account(a, {"balance": 100, "display_name": "IBKR"})
        assert patched.balance is None
        assert patched.display_name == "IBKR"

    def test_auto_derived_flag_not_patchable(self):
        with pytest.raises(UnknownFieldError):
            patch_account(Account(id=1, display_name="Cash"), {"auto_derived": True})


class TestNextId:
    def test_empty(self):
        assert next_id([]) > 0

    def test_bumps_past_existing(self):
        far_future = 10 ** 15
        assert next_id([1, far_future]) == far_future + 1

    def test_unique(self):
        first = next_id([1, 2])
        assert next_id([1, 2, first]) != first
