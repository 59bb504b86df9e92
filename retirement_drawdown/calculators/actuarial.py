"""Lookup tables used by the withdrawal policies.

Two fixed step functions live here:

* :func:`life_expectancy` – remaining years of life by current age.  The RMD
  policy divides the balance by this figure, so it never returns less than 2.
* :func:`vpw_percentage` – the Variable Percentage Withdrawal rate by years
  remaining in the plan and the equity share of the portfolio.

Example
-------

>>> life_expectancy(65)
25

>>> round(vpw_percentage(30, 60), 2)
4.2
"""

from __future__ import annotations

# (upper-bound-exclusive age, horizon age) pairs; remaining years = horizon - age
_LIFE_TABLE = (
    (60, 95),
    (70, 90),
    (80, 87),
    (90, 94),
)
_MIN_LIFE_EXPECTANCY = 2
_FINAL_HORIZON = 100

# (minimum years remaining, base percent, percent per point of stock allocation)
_VPW_TABLE = (
    (30, 3.0, 0.02),
    (25, 3.5, 0.02),
    (20, 4.0, 0.025),
    (15, 5.0, 0.03),
    (10, 6.5, 0.035),
    (5, 9.0, 0.04),
)


def life_expectancy(age: int) -> int:
    """Return remaining life expectancy in whole years for ``age``.

    Parameters
    ----------
    age : int
        Current age of the retiree.

    Returns
    -------
    int
        Remaining years; always at least 2.
    """
    for limit, horizon in _LIFE_TABLE:
        if age < limit:
            return horizon - age
    return max(_MIN_LIFE_EXPECTANCY, _FINAL_HORIZON - age)


def vpw_percentage(years_remaining: int, stock_allocation: float = 60) -> float:
    """Return the VPW withdrawal rate in percent.

    Parameters
    ----------
    years_remaining : int
        Years left until the planning age.
    stock_allocation : float, optional
        Percent of the portfolio held in equities (default 60).

    Returns
    -------
    float
        Withdrawal percentage, rising as ``years_remaining`` falls and capped
        at 100.
    """
    for min_years, base, slope in _VPW_TABLE:
        if years_remaining >= min_years:
            return base + slope * stock_allocation
    return min(100.0, 20.0 + 2.0 * years_remaining)


__all__ = ["life_expectancy", "vpw_percentage"]
