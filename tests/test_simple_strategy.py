"""Unit tests for the simple rebalance strategy."""

import pytest

from rebalance_calculator import (
    AllocationData,
    RebalanceInput,
    ResolvedRebalanceOptions,
    TradeAction,
    WarningType,
)

from .helpers import FIXED_TIME, make_targets


def run(strategy, allocations, targets, **options):
    total = sum(a.market_value for a in allocations)
    return strategy.calculate(
        RebalanceInput(allocations=allocations, targets=targets, total_portfolio_value=total),
        ResolvedRebalanceOptions(**options),
    )


def by_asset(result):
    return {r.asset_class: r for r in result.recommendations}


class TestScenarios:
    """End-to-end scenarios with default options."""

    def test_buy_stocks_sell_bonds(self, strategy, stocks_bonds):
        """40/60 portfolio moving to 60/40 trades 2000 each way."""
        result = run(strategy, stocks_bonds, make_targets({"Stocks": 60, "Bonds": 40}))
        recs = by_asset(result)

        assert recs["Stocks"].action == TradeAction.BUY
        assert recs["Stocks"].delta_value == pytest.approx(2000)
        assert recs["Stocks"].delta_percent == pytest.approx(20)
        assert recs["Bonds"].action == TradeAction.SELL
        assert recs["Bonds"].delta_value == pytest.approx(-2000)

        summary = result.summary
        assert summary.total_buy_amount == pytest.approx(2000)
        assert summary.total_sell_amount == pytest.approx(2000)
        assert summary.net_cash_flow == pytest.approx(0)
        assert summary.trade_count == 2
        assert summary.is_balanced is False
        assert result.warnings == []

    def test_already_on_target_holds_everything(self, strategy, stocks_bonds):
        result = run(strategy, stocks_bonds, make_targets({"Stocks": 40, "Bonds": 60}))

        assert all(r.action == TradeAction.HOLD for r in result.recommendations)
        assert all(r.delta_value == 0 for r in result.recommendations)
        assert result.summary.is_balanced is True
        assert result.summary.trade_count == 0
        assert result.warnings == []

    def test_target_without_holding_and_holding_without_target(self, strategy):
        allocations = [AllocationData(asset_class="Cash", current=100, market_value=1000)]
        result = run(strategy, allocations, make_targets({"Stocks": 100}))
        recs = by_asset(result)

        assert [(w.type, w.asset_class) for w in result.warnings] == [
            (WarningType.TARGET_NO_ASSET, "Stocks"),
            (WarningType.ASSET_NO_TARGET, "Cash"),
        ]
        assert recs["Stocks"].action == TradeAction.BUY
        assert recs["Stocks"].current_value == 0
        assert recs["Stocks"].name == "Stocks"
        assert recs["Stocks"].delta_value == pytest.approx(1000)
        assert recs["Cash"].action == TradeAction.SELL
        assert recs["Cash"].delta_value == pytest.approx(-1000)

    def test_small_trade_is_held_with_warning(self, strategy):
        allocations = [
            AllocationData(asset_class="Stocks", current=60.3, market_value=6030),
            AllocationData(asset_class="Bonds", current=20, market_value=2000),
            AllocationData(asset_class="Cash", current=19.7, market_value=1970),
        ]
        result = run(
            strategy, allocations, make_targets({"Stocks": 60, "Bonds": 40}), minimum_trade_size=50
        )
        recs = by_asset(result)

        assert recs["Stocks"].action == TradeAction.HOLD
        assert recs["Stocks"].delta_value == 0
        assert recs["Stocks"].delta_percent == 0
        assert recs["Bonds"].action == TradeAction.BUY
        assert recs["Cash"].action == TradeAction.SELL

        small = [w for w in result.warnings if w.type == WarningType.SMALL_TRADE]
        assert len(small) == 1
        assert small[0].asset_class == "Stocks"
        assert "$30.00" in small[0].message
        assert "$50.00" in small[0].message


class TestMerge:

    def test_asset_class_join_is_case_sensitive(self, strategy):
        allocations = [AllocationData(asset_class="US Stocks", current=100, market_value=1000)]
        result = run(strategy, allocations, make_targets({"US stocks": 100}))

        assert len(result.recommendations) == 2
        assert {w.type for w in result.warnings} == {
            WarningType.TARGET_NO_ASSET,
            WarningType.ASSET_NO_TARGET,
        }

    def test_zero_value_holding_without_target_is_not_warned(self, strategy):
        allocations = [
            AllocationData(asset_class="Stocks", current=100, market_value=1000),
            AllocationData(asset_class="Empty", current=0, market_value=0),
        ]
        result = run(strategy, allocations, make_targets({"Stocks": 100}))

        assert result.warnings == []

    def test_duplicate_allocation_keys_last_wins(self, strategy):
        allocations = [
            AllocationData(asset_class="Stocks", current=30, market_value=300),
            AllocationData(asset_class="Stocks", current=70, market_value=700),
        ]
        result = run(strategy, allocations, make_targets({"Stocks": 100}))

        assert len(result.recommendations) == 1
        assert result.recommendations[0].current_value == 700

    def test_display_fields_carried_through(self, strategy, stocks_bonds):
        result = run(strategy, stocks_bonds, make_targets({"Stocks": 60, "Bonds": 40}))
        assert by_asset(result)["Stocks"].symbol == "VTI"


class TestThresholds:

    def test_tolerance_suppresses_action_and_magnitude(self, strategy):
        allocations = [
            AllocationData(asset_class="Stocks", current=42, market_value=4200),
            AllocationData(asset_class="Bonds", current=58, market_value=5800),
        ]
        result = run(strategy, allocations, make_targets({"Stocks": 40, "Bonds": 60}), tolerance_percent=5)

        for rec in result.recommendations:
            assert rec.action == TradeAction.HOLD
            assert rec.delta_value == 0
            assert rec.delta_percent == 0
            assert rec.target_value == pytest.approx(rec.target_percent * 100)
        assert result.summary.is_balanced is True

    def test_tolerance_boundary_is_inclusive(self, strategy):
        allocations = [
            AllocationData(asset_class="Stocks", current=45, market_value=4500),
            AllocationData(asset_class="Bonds", current=55, market_value=5500),
        ]
        result = run(strategy, allocations, make_targets({"Stocks": 40, "Bonds": 60}), tolerance_percent=5)

        assert all(r.action == TradeAction.HOLD for r in result.recommendations)

    def test_outside_tolerance_still_trades(self, strategy, stocks_bonds):
        result = run(strategy, stocks_bonds, make_targets({"Stocks": 60, "Bonds": 40}), tolerance_percent=5)
        assert result.summary.trade_count == 2

    def test_trade_equal_to_minimum_is_kept(self, strategy):
        allocations = [
            AllocationData(asset_class="Stocks", current=50.5, market_value=5050),
            AllocationData(asset_class="Bonds", current=49.5, market_value=4950),
        ]
        result = run(strategy, allocations, make_targets({"Stocks": 50, "Bonds": 50}), minimum_trade_size=50)

        assert result.summary.trade_count == 2
        assert not [w for w in result.warnings if w.type == WarningType.SMALL_TRADE]


class TestDegenerateInput:

    def test_zero_portfolio_value(self, strategy):
        result = run(strategy, [], make_targets({"Stocks": 100}))
        rec = result.recommendations[0]

        assert rec.target_value == 0
        assert rec.delta_value == 0
        assert rec.action == TradeAction.HOLD
        assert result.summary.trade_count == 0
        assert result.metadata.total_portfolio_value == 0

    def test_zero_value_with_holdings_sells_nothing_positive(self, strategy):
        allocations = [AllocationData(asset_class="Stocks", current=0, market_value=0)]
        result = run(strategy, allocations, make_targets({"Stocks": 50, "Bonds": 50}))

        assert all(r.delta_value <= 0 for r in result.recommendations)

    def test_empty_targets(self, strategy, stocks_bonds):
        result = run(strategy, stocks_bonds, [])

        assert len(result.warnings) == 2
        assert all(w.type == WarningType.ASSET_NO_TARGET for w in result.warnings)
        assert result.summary.total_sell_amount == pytest.approx(10000)

    def test_empty_everything(self, strategy):
        result = run(strategy, [], [])

        assert result.recommendations == []
        assert result.warnings == []
        assert result.summary.is_balanced is True
        assert result.summary.total_buy_amount == 0

    @pytest.mark.parametrize("current", [-1, 100.5])
    def test_current_percent_out_of_range_rejected(self, current):
        with pytest.raises(ValueError):
            AllocationData(asset_class="Stocks", current=current, market_value=1000)


class TestProperties:

    @pytest.fixture
    def mixed_result(self, strategy):
        allocations = [
            AllocationData(asset_class="Stocks", current=35.5, market_value=3550),
            AllocationData(asset_class="Bonds", current=30, market_value=3000),
            AllocationData(asset_class="Gold", current=4.2, market_value=420),
            AllocationData(asset_class="Cash", current=30.3, market_value=3030),
        ]
        targets = make_targets({"Stocks": 50, "Bonds": 25, "Gold": 5, "REIT": 10, "Cash": 10})
        return run(strategy, allocations, targets, minimum_trade_size=100, tolerance_percent=0.5)

    def test_conservation(self, mixed_result):
        buys = [r.delta_value for r in mixed_result.recommendations if r.action == TradeAction.BUY]
        sells = [r.delta_value for r in mixed_result.recommendations if r.action == TradeAction.SELL]

        assert sum(buys) == mixed_result.summary.total_buy_amount
        assert sum(abs(d) for d in sells) == mixed_result.summary.total_sell_amount
        assert mixed_result.summary.net_cash_flow == (
            mixed_result.summary.total_sell_amount - mixed_result.summary.total_buy_amount
        )

    def test_sorted_by_absolute_delta(self, mixed_result):
        deltas = [abs(r.delta_value) for r in mixed_result.recommendations]
        assert deltas == sorted(deltas, reverse=True)

    def test_suppressed_rows(self, mixed_result):
        recs = by_asset(mixed_result)
        # Gold is 0.8 points off (outside tolerance) but only $80 of trade
        assert recs["Gold"].action == TradeAction.HOLD
        assert recs["Gold"].delta_value == 0
        assert any(
            w.type == WarningType.SMALL_TRADE and w.asset_class == "Gold" for w in mixed_result.warnings
        )

    def test_trade_count_and_balance(self, mixed_result):
        actionable = [r for r in mixed_result.recommendations if r.action != TradeAction.HOLD]
        assert mixed_result.summary.trade_count == len(actionable)
        assert mixed_result.summary.is_balanced is (len(actionable) == 0)

    def test_idempotent(self, strategy, stocks_bonds):
        targets = make_targets({"Stocks": 60, "Bonds": 40})
        first = run(strategy, stocks_bonds, targets)
        second = run(strategy, stocks_bonds, targets)

        assert first.recommendations == second.recommendations
        assert first.summary == second.summary


def test_metadata_uses_injected_clock(strategy, stocks_bonds):
    result = run(strategy, stocks_bonds, make_targets({"Stocks": 60, "Bonds": 40}))

    assert result.metadata.calculated_at == FIXED_TIME
    assert result.metadata.strategy_used == "simple"
    assert result.metadata.base_currency == "USD"
    assert result.metadata.total_portfolio_value == 10000


def test_result_serializes_with_camel_case_keys(strategy, stocks_bonds):
    result = run(strategy, stocks_bonds, make_targets({"Stocks": 60, "Bonds": 40}))
    data = result.model_dump(by_alias=True, mode="json")

    assert abs(data["recommendations"][0]["deltaValue"]) == pytest.approx(2000)
    assert data["summary"]["isBalanced"] is False
    assert data["metadata"]["strategyUsed"] == "simple"
