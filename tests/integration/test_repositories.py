"""Persistence tests against a temporary SQLite database."""

import logging
from decimal import Decimal

import pytest

from wealth_tracker.core.config import AppConfig, save_config
from wealth_tracker.core.exceptions import (
    AccountNotFoundError,
    MalformedStateError,
    PositionNotFoundError,
    UnknownFieldError,
)
from wealth_tracker.core.models import BaseCurrency, Quote
from wealth_tracker.data.repositories.accounts_repo import AccountsRepository
from wealth_tracker.data.repositories.positions_repo import PositionsRepository
from wealth_tracker.data.repositories.settings_repo import SettingsRepository
from wealth_tracker.data.repositories.state_repo import StateRepository


def _write_raw(db, key, value):
    db.conn.execute("INSERT INTO app_state (key, value) VALUES (?, ?)", (key, value))
    db.conn.commit()


class TestStateRepository:
    def test_missing_key(self):
        assert StateRepository().get("nothing") is None

    def test_put_get_overwrite(self):
        state = StateRepository()
        state.put("k", {"a": 1})
        state.put("k", [1, 2])
        assert state.get("k") == [1, 2]

    def test_delete(self):
        state = StateRepository()
        state.put("k", 1)
        assert state.delete("k")
        assert not state.delete("k")

    def test_invalid_json(self, isolated_db):
        _write_raw(isolated_db, "k", "{oops")
        with pytest.raises(MalformedStateError):
            StateRepository().get("k")

    def test_claim_is_exclusive(self):
        state = StateRepository()
        assert state.claim("lock", 60)
        assert not state.claim("lock", 60)
        assert state.delete("lock")
        assert state.claim("lock", 60)

    def test_expired_claim_is_taken_over(self, isolated_db):
        isolated_db.conn.execute(
            "INSERT INTO app_state (key, value, updated_at) VALUES ('lock', '\"old\"', '2000-01-01 00:00:00')"
        )
        isolated_db.conn.commit()
        assert StateRepository().claim("lock", 60)

    def test_nested_transaction_joins_outer(self, isolated_db):
        state = StateRepository()
        with pytest.raises(RuntimeError):
            with isolated_db.transaction():
                with isolated_db.transaction():
                    state.put("k", 1)
                raise RuntimeError("abort")
        assert state.get("k") is None

    def test_transaction_rolls_back(self, isolated_db):
        state = StateRepository()
        with pytest.raises(RuntimeError):
            with isolated_db.transaction():
                state.put("k", 1)
                raise RuntimeError("abort")
        assert state.get("k") is None


class TestFirstRun:
    def test_seed_data_without_writing(self, isolated_db):
        positions = PositionsRepository().list_all()
        accounts = AccountsRepository().list_all()
        assert [p.symbol for p in positions] == ["VOO", "2800.HK"]
        assert [a.auto_derived for a in accounts] == [False, True]
        assert isolated_db.conn.execute("SELECT COUNT(*) FROM app_state").fetchone()[0] == 0

    def test_seed_positions_have_no_update_time(self):
        first = PositionsRepository().list_all()
        assert [p.last_updated_at for p in first] == [None, None]
        assert PositionsRepository().list_all() == first

    def test_settings_defaults(self):
        s = SettingsRepository().get()
        assert s.base_currency == BaseCurrency.HKD
        assert s.anchor_to_base_rate == Decimal("4.15")
        assert s.monthly_contribution == Decimal("10000")

    def test_settings_defaults_follow_config(self):
        save_config(AppConfig(
            default_monthly_contribution=Decimal("5000"), fallback_rate=Decimal("4.0")
        ))
        s = SettingsRepository().get()
        assert s.monthly_contribution == Decimal("5000")
        assert s.anchor_to_base_rate == Decimal("4.0")

    def test_empty_list_is_not_reseeded(self):
        repo = PositionsRepository()
        repo.save_all([])
        assert repo.list_all() == []


class TestMalformedState:
    def test_bad_json_falls_back_to_seed(self, isolated_db, caplog):
        _write_raw(isolated_db, "positions", "not json at all")
        with caplog.at_level(logging.WARNING):
            positions = PositionsRepository().list_all()
        assert [p.symbol for p in positions] == ["VOO", "2800.HK"]
        assert "unreadable" in caplog.text

    def test_wrong_shape_falls_back_to_seed(self, isolated_db):
        _write_raw(isolated_db, "accounts", '{"id": 1}')
        assert len(AccountsRepository().list_all()) == 2

    def test_record_missing_field_falls_back_to_seed(self, isolated_db):
        _write_raw(isolated_db, "positions", '[{"symbol": "X"}]')
        assert PositionsRepository().list_all()[0].symbol == "VOO"

    def test_bad_numbers_coerce_to_zero(self, isolated_db):
        _write_raw(
            isolated_db, "positions",
            '[{"id": 7, "symbol": "X", "current_price": "abc", "share_count": null}]',
        )
        p = PositionsRepository().list_all()[0]
        assert p.current_price == Decimal("0")
        assert p.share_count is None

    def test_unknown_base_currency(self, isolated_db, caplog):
        _write_raw(isolated_db, "base_currency", '"EUR"')
        with caplog.at_level(logging.WARNING):
            assert SettingsRepository().get().base_currency == BaseCurrency.HKD
        assert "EUR" in caplog.text

    def test_unreadable_rate(self, isolated_db):
        _write_raw(isolated_db, "anchor_to_base_rate", "{")
        assert SettingsRepository().get().anchor_to_base_rate == Decimal("4.15")


class TestPositionsRepository:
    def test_create_persists(self):
        repo = PositionsRepository()
        p = repo.create("qqq", share_count="5", cost_basis_price=400, target_allocation_pct=10)
        again = PositionsRepository().get_by_id(p.id)
        assert again == p
        assert again.symbol == "QQQ"
        assert again.fx_to_anchor == Decimal("7.82")
        assert again.share_count == Decimal("5")
        assert p.id not in (1, 2)

    def test_create_hk_symbol_defaults_fx_to_one(self):
        p = PositionsRepository().create("0005.hk")
        assert p.fx_to_anchor == Decimal("1")

    def test_update(self):
        repo = PositionsRepository()
        p = repo.update(1, {"share_count": "12", "fx_to_anchor": "7.8"})
        assert p.share_count == Decimal("12")
        assert repo.get_by_id(1).fx_to_anchor == Decimal("7.8")
        assert repo.get_by_id(2).share_count == Decimal("2000")

    def test_update_unknown_field(self):
        with pytest.raises(UnknownFieldError):
            PositionsRepository().update(1, {"id": 99})
        assert StateRepository().get("positions") is None

    def test_update_missing_id(self):
        assert PositionsRepository().update(404, {"share_count": 1}) is None

    def test_delete(self):
        repo = PositionsRepository()
        assert repo.delete(1)
        assert [p.id for p in repo.list_all()] == [2]
        assert not repo.delete(1)

    def test_require(self):
        assert PositionsRepository().require(1).symbol == "VOO"
        with pytest.raises(PositionNotFoundError, match="Position 404 not found"):
            PositionsRepository().require(404)

    def test_get_by_symbol(self):
        assert PositionsRepository().get_by_symbol(" 2800.hk ").id == 2

    def test_apply_quote_keeps_fx(self):
        repo = PositionsRepository()
        quote = Quote(price=Decimal("530"), name="Vanguard", currency="USD")
        p = repo.apply_quote(1, quote, "Yahoo Finance")
        assert p.current_price == Decimal("530")
        assert p.price_source_label == "Yahoo Finance"
        assert p.fx_to_anchor == Decimal("7.82")
        assert p.last_updated_at is not None
        assert repo.get_by_id(1).last_updated_at == p.last_updated_at


class TestAccountsRepository:
    def test_create_manual(self):
        a = AccountsRepository().create("Bank TWD", currency="twd", fx_to_anchor="0.24", balance=100000)
        again = AccountsRepository().get_by_id(a.id)
        assert again.currency == "TWD"
        assert again.balance == Decimal("100000")
        assert again.fx_to_anchor == Decimal("0.24")

    def test_create_auto_ignores_balance(self):
        a = AccountsRepository().create("Broker", currency="USD", balance=5, auto_derived=True)
        assert a.balance is None
        assert AccountsRepository().get_by_id(a.id).balance is None

    def test_auto_account_balance_stays_none(self):
        repo = AccountsRepository()
        a = repo.update(2, {"balance": 999, "display_name": "Broker"})
        assert a.balance is None
        assert repo.get_by_id(2).display_name == "Broker"

    def test_require_missing(self):
        with pytest.raises(AccountNotFoundError):
            AccountsRepository().require(404)

    def test_cannot_toggle_auto_flag(self):
        with pytest.raises(UnknownFieldError):
            AccountsRepository().update(1, {"auto_derived": True})


class TestSettingsRepository:
    def test_setters_persist(self):
        repo = SettingsRepository()
        repo.set_base_currency(BaseCurrency.TWD)
        repo.set_anchor_to_base_rate(Decimal("4.21"))
        repo.set_monthly_contribution(Decimal("20000"))
        s = SettingsRepository().get()
        assert s.base_currency == BaseCurrency.TWD
        assert s.anchor_to_base_rate == Decimal("4.21")
        assert s.monthly_contribution == Decimal("20000")

    def test_base_currency_accepts_string(self):
        assert SettingsRepository().set_base_currency("TWD").base_currency == BaseCurrency.TWD
