"""Single-path drawdown simulation.

One loop serves all five withdrawal policies.  For retirement year ``i`` at
``age = retirement_age + i`` the loop:

1. asks the policy for its target withdrawal,
2. clamps it to the spending floor/ceiling, both grown by ``inflation ** i``,
3. offsets it by the COLA-adjusted Social Security benefit (never below zero)
   and adds any one-time expense falling due,
4. takes the net amount from the portfolio, clamping an overdraft to zero,
5. applies the year's return and records the year.

A path is *ruined* from the first year its balance reaches zero, whether an
overdraft or a negative return got it there, and stays ruined.  Degenerate
inputs (empty portfolio, zero horizon, planning age before retirement) produce
valid, possibly empty, results rather than errors.

Example
-------

>>> from retirement_drawdown.inputs import SimulationInputs
>>> plan = SimulationInputs(retirement_age=65, planning_age=66, starting_portfolio=1_000_000)
>>> run(plan, "constant_real", deterministic=True).years[0].withdrawal
45000.0
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from ..inputs import SimulationInputs
from ..results import SimulationResult, YearRecord
from . import returns
from .social_security import annual_benefit, one_time_expense
from .withdrawal import Strategy, clamp_target, make_policy


def run(
    inputs: SimulationInputs,
    strategy: Strategy | str,
    deterministic: bool = False,
    rng: Optional[np.random.Generator] = None,
) -> SimulationResult:
    """Simulate one retirement path under ``strategy``.

    Parameters
    ----------
    inputs : SimulationInputs
        The plan.  Not modified.
    strategy : Strategy or str
        Which withdrawal policy to apply.
    deterministic : bool, optional
        If True every year earns exactly ``expected_return`` and ``rng`` is
        never used.
    rng : numpy.random.Generator, optional
        Entropy source for stochastic returns.

    Returns
    -------
    SimulationResult
        Year records in age order plus the path summary.
    """
    n_years = inputs.horizon
    portfolio = inputs.starting_portfolio
    if n_years == 0:
        return SimulationResult(years=(), final_balance=portfolio, total_withdrawals=0.0, ruined=False)

    policy = make_policy(strategy, inputs)
    path_returns = returns.sample_path(inputs.expected_return, inputs.volatility, n_years, deterministic, rng)

    retirement_age = inputs.retirement_age
    inflation = inputs.inflation_multiplier
    min_spending = inputs.min_spending
    max_spending = inputs.max_spending
    ss_amount = inputs.social_security
    ss_start = inputs.ss_start_age
    expense_amount = inputs.one_time_expense

    records: List[YearRecord] = []
    total_withdrawals = 0.0
    ruined = False
    ruin_age: Optional[int] = None

    for i in range(n_years):
        age = retirement_age + i
        portfolio_start = portfolio
        price_level = inflation ** i

        target = policy.next_target(i, age, portfolio_start)
        target = clamp_target(target, min_spending * price_level, max_spending * price_level)
        diagnostics = policy.settle(target)

        ss = annual_benefit(ss_amount, age, ss_start, inflation)
        expense = one_time_expense(expense_amount, i, inflation)
        net_withdrawal = max(0.0, target - ss) + expense

        portfolio -= net_withdrawal
        if portfolio < 0:
            portfolio = 0.0
            if not ruined:
                ruined = True
                ruin_age = age

        rate = path_returns[i]
        portfolio *= 1 + rate
        if portfolio < 0:
            # a return below -100 % cannot leave a negative balance
            portfolio = 0.0
        if portfolio <= 0 and not ruined:
            ruined = True
            ruin_age = age

        records.append(
            YearRecord(
                year=i,
                age=age,
                portfolio_start=portfolio_start,
                return_pct=rate * 100,
                withdrawal=net_withdrawal,
                portfolio_end=portfolio,
                ruined=ruined,
                ss_received=ss,
                target_withdrawal=target,
                one_time_expense=expense,
                **diagnostics,
            )
        )
        total_withdrawals += net_withdrawal

    return SimulationResult(
        years=tuple(records),
        final_balance=portfolio,
        total_withdrawals=total_withdrawals,
        ruined=ruined,
        ruin_age=ruin_age,
    )


def run_deterministic(inputs: SimulationInputs, strategy: Strategy | str) -> SimulationResult:
    """Single-scenario projection at the expected return every year."""
    return run(inputs, strategy, deterministic=True)


__all__ = ["run", "run_deterministic"]
