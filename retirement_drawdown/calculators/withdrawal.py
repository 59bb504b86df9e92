"""Withdrawal policies.

Supports:
    - Constant real (inflation-adjusted fixed amount, 4.5 % initial rate)
    - Constant percentage (4 % of the current balance)
    - Variable Percentage Withdrawal (rate from ``actuarial.vpw_percentage``)
    - Guyton-Klinger style guardrails (5 % initial rate, ±20 % bands, 10 % steps)
    - RMD-style (balance divided by remaining life expectancy)

Every policy plugs into the same year loop in ``simulation.run``.  A policy is
created fresh for each path and keeps whatever it needs to carry between years
(for example the Guardrails base withdrawal).  Per year the loop calls
:meth:`WithdrawalPolicy.next_target` for the unclamped target, clamps it to the
inflation-indexed spending floor and ceiling, then hands the clamped amount back
through :meth:`WithdrawalPolicy.settle`, which returns the diagnostic fields
attached to that year's record.

A positive ``starting_withdrawal`` on the inputs replaces every policy's year-1
target.  The floor/ceiling clamp still applies to it.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, Type

from ..inputs import SimulationInputs
from .actuarial import life_expectancy, vpw_percentage

CONSTANT_REAL_RATE = 4.5
CONSTANT_PERCENT_RATE = 4.0

GUARDRAIL_INITIAL_RATE = 5.0
GUARDRAIL_UPPER = GUARDRAIL_INITIAL_RATE * 1.20  # rate above this triggers a cut
GUARDRAIL_LOWER = GUARDRAIL_INITIAL_RATE * 0.80  # rate below this triggers a raise
GUARDRAIL_ADJUSTMENT = 0.10


class Strategy(str, Enum):
    CONSTANT_REAL = "constant_real"
    CONSTANT_PERCENT = "constant_percent"
    VPW = "vpw"
    GUARDRAILS = "guardrails"
    RMD = "rmd"

    @classmethod
    def _missing_(cls, value: object):
        # accept "ConstantReal", "constant-percent", "VPW", ...
        if isinstance(value, str):
            key = re.sub(r"[^a-z]", "", value.lower())
            for member in cls:
                if member.value.replace("_", "") == key:
                    return member
        return None


def clamp_target(target: float, floor: float, ceiling: float) -> float:
    """Clamp ``target`` to ``[floor, ceiling]``; zero bounds are ignored.

    The ceiling is applied last, so it wins when ``floor > ceiling``.
    """
    if floor > 0 and target < floor:
        target = floor
    if ceiling > 0 and target > ceiling:
        target = ceiling
    return target


class WithdrawalPolicy:
    """Base class: one instance per simulated path."""

    strategy: Strategy

    def __init__(self, inputs: SimulationInputs) -> None:
        self.override = inputs.starting_withdrawal
        self.inflation_multiplier = inputs.inflation_multiplier

    def _first_year_override(self, year: int) -> bool:
        return year == 0 and self.override > 0

    def next_target(self, year: int, age: int, portfolio_start: float) -> float:
        """Return this year's withdrawal target before the floor/ceiling clamp."""
        raise NotImplementedError

    def settle(self, target: float) -> Dict[str, Any]:
        """Record the clamped ``target`` and return diagnostics for the year."""
        return {}


class ConstantRealPolicy(WithdrawalPolicy):
    strategy = Strategy.CONSTANT_REAL

    def __init__(self, inputs: SimulationInputs) -> None:
        super().__init__(inputs)
        if self.override > 0:
            self.base = self.override
        else:
            self.base = inputs.starting_portfolio * (CONSTANT_REAL_RATE / 100)

    def next_target(self, year: int, age: int, portfolio_start: float) -> float:
        return self.base

    def settle(self, target: float) -> Dict[str, Any]:
        self.base = target * self.inflation_multiplier
        return {"base_withdrawal": target}


class ConstantPercentPolicy(WithdrawalPolicy):
    strategy = Strategy.CONSTANT_PERCENT

    def next_target(self, year: int, age: int, portfolio_start: float) -> float:
        if self._first_year_override(year):
            return self.override
        return portfolio_start * (CONSTANT_PERCENT_RATE / 100)


class VPWPolicy(WithdrawalPolicy):
    strategy = Strategy.VPW

    def __init__(self, inputs: SimulationInputs) -> None:
        super().__init__(inputs)
        self.planning_age = inputs.planning_age
        self.stock_allocation = inputs.stock_allocation
        self.pct = 0.0

    def next_target(self, year: int, age: int, portfolio_start: float) -> float:
        self.pct = vpw_percentage(self.planning_age - age, self.stock_allocation)
        if self._first_year_override(year):
            return self.override
        return portfolio_start * (self.pct / 100)

    def settle(self, target: float) -> Dict[str, Any]:
        return {"vpw_pct": self.pct}


class GuardrailsPolicy(WithdrawalPolicy):
    """Guyton-Klinger style guardrails around a 5 % initial rate.

    The current rate is the carried base withdrawal over the year's starting
    balance.  Above the upper guardrail the base is cut 10 %; below the lower
    guardrail (with money left) it is raised 10 %.  An explicit year-1
    ``starting_withdrawal`` is taken as given: no guardrail test that year.
    """

    strategy = Strategy.GUARDRAILS

    def __init__(self, inputs: SimulationInputs) -> None:
        super().__init__(inputs)
        if self.override > 0:
            self.base = self.override
        else:
            self.base = inputs.starting_portfolio * (GUARDRAIL_INITIAL_RATE / 100)
        self.current_rate = 0.0

    def next_target(self, year: int, age: int, portfolio_start: float) -> float:
        if portfolio_start <= 0:
            # empty portfolio: no meaningful rate, leave the base alone
            self.current_rate = 0.0
            return self.base

        self.current_rate = self.base / portfolio_start * 100
        if not self._first_year_override(year):
            if self.current_rate > GUARDRAIL_UPPER:
                self.base *= 1 - GUARDRAIL_ADJUSTMENT
            elif self.current_rate < GUARDRAIL_LOWER:
                self.base *= 1 + GUARDRAIL_ADJUSTMENT
        return self.base

    def settle(self, target: float) -> Dict[str, Any]:
        self.base = target * self.inflation_multiplier
        return {"base_withdrawal": target, "current_rate": self.current_rate}


class RMDPolicy(WithdrawalPolicy):
    strategy = Strategy.RMD

    def __init__(self, inputs: SimulationInputs) -> None:
        super().__init__(inputs)
        self.life_exp = 0
        self.rmd_amount = 0.0

    def next_target(self, year: int, age: int, portfolio_start: float) -> float:
        self.life_exp = life_expectancy(age)
        self.rmd_amount = portfolio_start / self.life_exp
        if self._first_year_override(year):
            return self.override
        return self.rmd_amount

    def settle(self, target: float) -> Dict[str, Any]:
        return {"life_exp": self.life_exp, "rmd_withdrawal": self.rmd_amount}


POLICIES: Dict[Strategy, Type[WithdrawalPolicy]] = {
    Strategy.CONSTANT_REAL: ConstantRealPolicy,
    Strategy.CONSTANT_PERCENT: ConstantPercentPolicy,
    Strategy.VPW: VPWPolicy,
    Strategy.GUARDRAILS: GuardrailsPolicy,
    Strategy.RMD: RMDPolicy,
}


def make_policy(strategy: Strategy | str, inputs: SimulationInputs) -> WithdrawalPolicy:
    """Return a fresh policy instance for one path."""
    return POLICIES[Strategy(strategy)](inputs)


__all__ = [
    "Strategy",
    "WithdrawalPolicy",
    "ConstantRealPolicy",
    "ConstantPercentPolicy",
    "VPWPolicy",
    "GuardrailsPolicy",
    "RMDPolicy",
    "POLICIES",
    "clamp_target",
    "make_policy",
]
