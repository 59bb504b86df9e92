"""Numerical core of the drawdown simulator.

The `calculators` package contains small, focused modules that each implement
one piece of the projection:

* ``returns`` – Box–Muller normal draws and annual portfolio returns.
* ``actuarial`` – life-expectancy and variable-percentage withdrawal tables.
* ``social_security`` – COLA-indexed benefits and the recurring lump-sum expense.
* ``withdrawal`` – the five withdrawal policies and the ``Strategy`` enum.
* ``simulation`` – the shared year-by-year recurrence for one path.
* ``percentiles`` – linear-interpolation percentiles and per-year bands.
* ``monte_carlo`` – batches of stochastic paths, success rate and bands.

Each module exposes a few public functions with clear parameters and returns.  See
individual docstrings for details.
"""

from . import returns, actuarial, social_security, withdrawal, simulation, percentiles, monte_carlo  # noqa: F401

__all__ = ["returns", "actuarial", "social_security", "withdrawal", "simulation", "percentiles", "monte_carlo"]
