"""Inflation-indexed cash flows that sit beside the withdrawal policy.

Social Security is entered as an annual amount in today's dollars that starts at
``ss_start_age``.  Once it starts it receives a cost-of-living adjustment (COLA)
equal to the plan's inflation rate, compounded from the start age.  Benefits
offset the year's withdrawal target; they never add money to the portfolio.

The plan may also carry a lump-sum expense (a new car, a roof) that recurs every
fifth retirement year, inflated from the first year of retirement.

Example
-------

>>> # $20 000/yr starting at 65, three years of 2.5 % COLA by age 68
>>> round(annual_benefit(20000, age=68, start_age=65, inflation_multiplier=1.025), 2)
21537.81
"""

from __future__ import annotations

EXPENSE_INTERVAL_YEARS = 5


def annual_benefit(
    base_amount: float,
    age: int,
    start_age: int,
    inflation_multiplier: float,
) -> float:
    """Return the Social Security benefit received at ``age``.

    Parameters
    ----------
    base_amount : float
        Annual benefit at ``start_age``.
    age : int
        Age in the year being simulated.
    start_age : int
        Age benefits begin.  Earlier ages receive nothing.
    inflation_multiplier : float
        ``1 + inflation / 100``; applied once per year since ``start_age``.

    Returns
    -------
    float
        The COLA-adjusted annual benefit, or zero before ``start_age``.
    """
    if age < start_age or base_amount <= 0:
        return 0.0
    return base_amount * inflation_multiplier ** (age - start_age)


def one_time_expense(amount: float, year_index: int, inflation_multiplier: float) -> float:
    """Return the lump-sum expense due in retirement year ``year_index`` (0-based).

    The expense falls in years 5, 10, 15, ... of retirement and is inflated by
    ``inflation_multiplier ** year_index``.
    """
    if amount <= 0 or (year_index + 1) % EXPENSE_INTERVAL_YEARS != 0:
        return 0.0
    return amount * inflation_multiplier ** year_index


__all__ = ["annual_benefit", "one_time_expense", "EXPENSE_INTERVAL_YEARS"]
