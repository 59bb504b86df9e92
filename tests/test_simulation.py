"""Tests for the shared single-path recurrence."""

import math

import numpy as np
import pytest

from retirement_drawdown.calculators import simulation
from retirement_drawdown.calculators.withdrawal import Strategy
from retirement_drawdown.inputs import SimulationInputs


def _build_simple_plan(**overrides) -> SimulationInputs:
    plan = {
        "retirement_age": 65,
        "planning_age": 95,
        "starting_portfolio": 1_000_000.0,
        "expected_return": 6.0,
        "volatility": 0.0,
        "inflation_rate": 2.5,
        "social_security": 0.0,
        "ss_start_age": 67,
    }
    plan.update(overrides)
    return SimulationInputs.model_validate(plan)


def _assert_path_is_consistent(res, inputs):
    assert [y.age for y in res.years] == list(range(inputs.retirement_age, inputs.planning_age))
    assert [y.year for y in res.years] == list(range(inputs.horizon))
    first_ruin = None
    for y in res.years:
        assert y.portfolio_end >= 0
        assert y.withdrawal >= 0
        assert math.isfinite(y.portfolio_end)
        assert math.isfinite(y.withdrawal)
        if y.ruined and first_ruin is None:
            first_ruin = y.age
        if first_ruin is not None:
            assert y.ruined
    assert math.isfinite(res.final_balance)
    assert res.final_balance >= 0
    assert res.total_withdrawals == pytest.approx(sum(y.withdrawal for y in res.years))
    if res.ruined:
        assert res.ruin_age == first_ruin
    else:
        assert res.ruin_age is None


def test_generates_one_record_per_year():
    res = simulation.run(_build_simple_plan(), Strategy.CONSTANT_REAL, deterministic=True)
    assert len(res.years) == 30


def test_zero_horizon_is_empty():
    inputs = _build_simple_plan(retirement_age=65, planning_age=65)
    res = simulation.run(inputs, Strategy.CONSTANT_REAL, deterministic=True)
    assert res.years == ()
    assert res.final_balance == 1_000_000.0
    assert res.total_withdrawals == 0.0
    assert not res.ruined
    assert res.ruin_age is None


def test_planning_age_before_retirement_degrades_to_empty():
    inputs = _build_simple_plan(retirement_age=70, planning_age=65)
    res = simulation.run(inputs, Strategy.VPW, deterministic=True)
    assert res.years == ()
    assert not res.ruined


def test_conservation_with_zero_return():
    inputs = _build_simple_plan(planning_age=75, expected_return=0.0, inflation_rate=0.0)
    res = simulation.run(inputs, Strategy.CONSTANT_REAL, deterministic=True)
    assert res.total_withdrawals + res.final_balance == pytest.approx(inputs.starting_portfolio, abs=1)


def test_no_net_withdrawal_leaves_balance_unchanged():
    inputs = _build_simple_plan(
        expected_return=0.0, inflation_rate=0.0, social_security=1_000_000, ss_start_age=65
    )
    res = simulation.run(inputs, Strategy.CONSTANT_REAL, deterministic=True)
    assert res.total_withdrawals == 0.0
    assert res.final_balance == pytest.approx(inputs.starting_portfolio)


def test_depletion_records_first_ruin_age():
    inputs = _build_simple_plan(starting_portfolio=200_000, expected_return=0.0, inflation_rate=0.0)
    res = simulation.run(inputs, Strategy.CONSTANT_REAL, deterministic=True)
    assert res.ruined
    assert 85 <= res.ruin_age <= 89
    _assert_path_is_consistent(res, inputs)


def test_high_spending_depletes_quickly():
    inputs = _build_simple_plan(
        retirement_age=45, starting_portfolio=5_000_000, min_spending=1_000_000,
        expected_return=0.0, inflation_rate=3.0,
    )
    res = simulation.run(inputs, Strategy.CONSTANT_REAL, deterministic=True)
    assert res.ruined
    assert res.ruin_age < 55
    assert len(res.years) == 50


def test_empty_portfolio_is_ruined_immediately():
    inputs = _build_simple_plan(starting_portfolio=0.0)
    res = simulation.run(inputs, Strategy.CONSTANT_REAL, deterministic=True)
    assert res.final_balance == 0.0
    assert res.ruined
    assert res.ruin_age == 65


def test_negative_returns_never_go_below_zero():
    inputs = _build_simple_plan(
        starting_portfolio=100_000, min_spending=500_000, expected_return=-20, inflation_rate=3
    )
    res = simulation.run(inputs, Strategy.CONSTANT_REAL, deterministic=True)
    _assert_path_is_consistent(res, inputs)


@pytest.mark.parametrize("strategy", list(Strategy))
@pytest.mark.parametrize(
    "overrides",
    [
        {"starting_portfolio": 1e15},
        {"starting_portfolio": 0.01},
        {"volatility": 100.0},
        {"retirement_age": 18, "planning_age": 120, "volatility": 50, "inflation_rate": 10,
         "min_spending": 1_000_000, "one_time_expense": 500_000, "social_security": 100_000},
        {"min_spending": 100_000, "one_time_expense": 50_000, "volatility": 25, "expected_return": 2},
    ],
)
def test_paths_stay_consistent_under_extremes(strategy, overrides):
    inputs = _build_simple_plan(**overrides)
    rng = np.random.default_rng(2024)
    for _ in range(20):
        res = simulation.run(inputs, strategy, deterministic=False, rng=rng)
        _assert_path_is_consistent(res, inputs)


def test_deterministic_run_ignores_generator():
    rng = np.random.default_rng(9)
    before = rng.bit_generator.state
    simulation.run(_build_simple_plan(volatility=15), Strategy.RMD, deterministic=True, rng=rng)
    assert rng.bit_generator.state == before


def test_seeded_runs_repeat():
    inputs = _build_simple_plan(volatility=15)
    a = simulation.run(inputs, Strategy.GUARDRAILS, rng=np.random.default_rng(1))
    b = simulation.run(inputs, Strategy.GUARDRAILS, rng=np.random.default_rng(1))
    assert a == b


def test_return_pct_is_reported_in_percent():
    res = simulation.run_deterministic(_build_simple_plan(), "constant_real")
    assert all(y.return_pct == pytest.approx(6.0) for y in res.years)


def test_ledger_frame():
    res = simulation.run_deterministic(_build_simple_plan(planning_age=70), Strategy.GUARDRAILS)
    frame = res.to_frame()
    assert len(frame) == 5
    assert list(frame["age"]) == [65, 66, 67, 68, 69]
    assert "current_rate" in frame.columns
    assert frame["vpw_pct"].isna().all()
