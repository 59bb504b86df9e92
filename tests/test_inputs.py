"""Tests for plan validation and normalisation."""

import math

import pytest
from pydantic import ValidationError

from retirement_drawdown.inputs import SimulationInputs


def test_accepts_camel_case_plan():
    inputs = SimulationInputs.from_plan(
        {"retirementAge": 62, "planningAge": 90, "startingPortfolio": 750_000, "ssStartAge": 70}
    )
    assert inputs.retirement_age == 62
    assert inputs.horizon == 28
    assert inputs.starting_portfolio == 750_000
    assert inputs.ss_start_age == 70


def test_accepts_snake_case_plan():
    inputs = SimulationInputs(retirement_age=60, planning_age=70, inflation_rate=3.0)
    assert inputs.horizon == 10
    assert inputs.inflation_multiplier == pytest.approx(1.03)


@pytest.mark.parametrize("value", [None, -5000, math.nan])
def test_missing_or_negative_amounts_become_zero(value):
    inputs = SimulationInputs.from_plan(
        {"minSpending": value, "maxSpending": value, "startingWithdrawal": value, "socialSecurity": value}
    )
    assert inputs.min_spending == 0.0
    assert inputs.max_spending == 0.0
    assert inputs.starting_withdrawal == 0.0
    assert inputs.social_security == 0.0


def test_missing_rates_default_to_zero():
    inputs = SimulationInputs.from_plan({"expectedReturn": None, "inflationRate": None})
    assert inputs.expected_return == 0.0
    assert inputs.inflation_multiplier == 1.0


def test_negative_return_and_inflation_are_kept():
    inputs = SimulationInputs.from_plan({"expectedReturn": -4, "inflationRate": -1})
    assert inputs.expected_return == -4
    assert inputs.inflation_rate == -1


def test_horizon_never_negative():
    assert SimulationInputs(retirement_age=80, planning_age=70).horizon == 0


@pytest.mark.parametrize("given, expected", [(150, 100.0), (-10, 0.0), (None, 60.0), (40, 40.0)])
def test_stock_allocation_is_bounded(given, expected):
    assert SimulationInputs.from_plan({"stockAllocation": given}).stock_allocation == expected


def test_unknown_keys_are_ignored():
    inputs = SimulationInputs.from_plan({"strategy": "VPW", "runCount": 100, "planningAge": 90})
    assert inputs.planning_age == 90


def test_inputs_are_read_only():
    inputs = SimulationInputs()
    with pytest.raises(ValidationError):
        inputs.starting_portfolio = 5.0


def test_with_updates_returns_new_validated_copy():
    inputs = SimulationInputs(starting_portfolio=100_000)
    updated = inputs.with_updates(starting_withdrawal=-1, planning_age=80)
    assert updated.starting_withdrawal == 0.0
    assert updated.planning_age == 80
    assert inputs.planning_age == 95


def test_fractional_ages_are_floored():
    inputs = SimulationInputs.from_plan(
        {"currentAge": 40.9, "retirementAge": 65.5, "planningAge": 94.99, "ssStartAge": 67.2}
    )
    assert inputs.current_age == 40
    assert inputs.retirement_age == 65
    assert inputs.planning_age == 94
    assert inputs.ss_start_age == 67
    assert inputs.horizon == 29


def test_volatility_accepted_by_name():
    assert SimulationInputs.from_plan({"volatility": 12.5}).volatility == 12.5
    assert SimulationInputs(volatility=-3).volatility == 0.0


def test_non_numeric_age_rejected():
    with pytest.raises(ValidationError):
        SimulationInputs.from_plan({"retirementAge": "sixty"})
