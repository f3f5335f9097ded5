"""Tests for Rebalancer."""

from decimal import Decimal

import pytest

from wealth_tracker.core.finance import CurrencyConverter, value_positions
from wealth_tracker.core.models import BaseCurrency, Position, RebalanceAction
from wealth_tracker.core.rebalancer import HOLD_THRESHOLD, Rebalancer, classify

HKD = CurrencyConverter(BaseCurrency.HKD, Decimal("4.15"))


def _position(id, symbol, shares, price, fx, target):
    return Position(
        id=id,
        symbol=symbol,
        current_price=Decimal(str(price)),
        fx_to_anchor=Decimal(str(fx)),
        share_count=Decimal(str(shares)),
        cost_basis_price=Decimal("0"),
        target_allocation_pct=Decimal(str(target)),
    )


def _seed_like():
    return [
        _position(1, "VOO", 10, 512, 7.82, 60),
        _position(2, "2800.HK", 2000, 18.5, 1, 40),
    ]


class TestClassify:
    @pytest.mark.parametrize("shares, action", [
        ("0.0011", RebalanceAction.BUY),
        ("-0.0011", RebalanceAction.SELL),
        ("0.001", RebalanceAction.HOLD),
        ("-0.001", RebalanceAction.HOLD),
        ("0", RebalanceAction.HOLD),
    ])
    def test_dead_zone(self, shares, action):
        assert classify(Decimal(shares)) == action

    def test_threshold_value(self):
        assert HOLD_THRESHOLD == Decimal("0.001")


class TestAdvise:
    def test_single_position_on_target_holds(self):
        vals = value_positions([_position(1, "VOO", 10, 512, 7.82, 100)], HKD)
        [a] = Rebalancer(vals, HKD, Decimal("0")).advise()
        assert a.gap_base == 0
        assert abs(a.suggested_shares) <= HOLD_THRESHOLD
        assert a.action == RebalanceAction.HOLD
        assert a.current_allocation_pct == Decimal("100")

    def test_buy_and_sell_with_contribution(self):
        vals = value_positions(_seed_like(), HKD)
        r = Rebalancer(vals, HKD, Decimal("10000"))
        assert r.projected_total_base == Decimal("87038.4")

        voo, hk = r.advise()
        assert voo.target_value_base == Decimal("52223.04")
        assert voo.gap_base == Decimal("12184.64")
        assert voo.unit_price_base == Decimal("4003.84")
        assert voo.suggested_shares == Decimal("12184.64") / Decimal("4003.84")
        assert voo.action == RebalanceAction.BUY

        assert hk.gap_base == Decimal("-2184.64")
        assert hk.suggested_shares == Decimal("-2184.64") / Decimal("18.5")
        assert hk.action == RebalanceAction.SELL
        assert hk.gap_amount == Decimal("2184.64")

    def test_current_allocation(self):
        vals = value_positions(_seed_like(), HKD)
        voo, hk = Rebalancer(vals, HKD).advise()
        assert voo.current_allocation_pct == Decimal("40038.4") / Decimal("77038.4") * 100
        assert abs(voo.current_allocation_pct + hk.current_allocation_pct - 100) < Decimal("1e-20")

    def test_targets_need_not_sum_to_100(self):
        positions = [
            _position(1, "A", 10, 10, 1, 80),
            _position(2, "B", 10, 10, 1, 80),
        ]
        a, b = Rebalancer(value_positions(positions, HKD), HKD).advise()
        # 80% of 200 = 160 each, independently
        assert a.target_value_base == b.target_value_base == Decimal("160")
        assert a.gap_base == b.gap_base == Decimal("60")

    def test_zero_price_gives_zero_shares(self):
        positions = [_position(1, "NEW", 0, 0, 1, 50)]
        [a] = Rebalancer(value_positions(positions, HKD), HKD, Decimal("1000")).advise()
        assert a.gap_base == Decimal("500")
        assert a.suggested_shares == 0
        assert a.current_allocation_pct == 0
        assert a.action == RebalanceAction.HOLD

    def test_contribution_is_in_base_currency(self):
        twd = CurrencyConverter(BaseCurrency.TWD, Decimal("4"))
        positions = [_position(1, "2800.HK", 100, 10, 1, 100)]
        [a] = Rebalancer(value_positions(positions, twd), twd, Decimal("400")).advise()
        # invested 1000 HKD = 4000 TWD; projected 4400 TWD; unit price 40 TWD
        assert a.gap_base == Decimal("400")
        assert a.unit_price_base == Decimal("40")
        assert a.suggested_shares == Decimal("10")

    def test_empty(self):
        assert Rebalancer([], HKD, Decimal("1000")).advise() == []
