"""Annual portfolio return generator.

Returns are drawn from a normal distribution with the plan's mean and
volatility (both in percentage points).  Normal deviates come from the
Box–Muller transform applied to two uniform draws from an explicit
``numpy.random.Generator``, so callers control the entropy source and tests can
pass a seeded generator.  Deterministic mode returns the mean and does not
touch the generator at all.

Example
-------

>>> sample(6.0, 15.0, deterministic=True)
0.06
"""

from __future__ import annotations

import math
from typing import List, Optional

import numpy as np

_TWO_PI = 2.0 * math.pi


def _uniform_open(rng: np.random.Generator) -> float:
    # Generator.random() is in [0, 1); zero would make log() blow up
    u = 0.0
    while u == 0.0:
        u = rng.random()
    return u


def standard_normal(rng: np.random.Generator) -> float:
    """Draw one N(0, 1) deviate using the Box–Muller transform."""
    u = _uniform_open(rng)
    v = _uniform_open(rng)
    return math.sqrt(-2.0 * math.log(u)) * math.cos(_TWO_PI * v)


def sample(
    mean: float,
    volatility: float,
    deterministic: bool = False,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """Return one annual return as a fraction (6 % -> 0.06).

    Parameters
    ----------
    mean : float
        Expected annual return in percent.
    volatility : float
        Standard deviation of the annual return in percent.
    deterministic : bool, optional
        If True, return ``mean / 100`` without consuming randomness.
    rng : numpy.random.Generator, optional
        Entropy source for stochastic draws.  A fresh OS-seeded generator is
        created when omitted.
    """
    if deterministic:
        return mean / 100
    if rng is None:
        rng = np.random.default_rng()
    z = standard_normal(rng)
    return (mean + z * volatility) / 100


def sample_path(
    mean: float,
    volatility: float,
    years: int,
    deterministic: bool = False,
    rng: Optional[np.random.Generator] = None,
) -> List[float]:
    """Return ``years`` independent annual returns (fractions) for one path.

    Same distribution as calling :func:`sample` ``years`` times, but the
    uniforms for the whole path are drawn in two vectorised calls.
    """
    if years <= 0:
        return []
    if deterministic:
        return [mean / 100] * years
    if rng is None:
        rng = np.random.default_rng()

    u = rng.random(years)
    v = rng.random(years)
    # redraw the (vanishingly rare) exact zeros
    while not u.all():
        zeros = u == 0.0
        u[zeros] = rng.random(int(zeros.sum()))
    while not v.all():
        zeros = v == 0.0
        v[zeros] = rng.random(int(zeros.sum()))

    z = np.sqrt(-2.0 * np.log(u)) * np.cos(_TWO_PI * v)
    return ((mean + z * volatility) / 100).tolist()


__all__ = ["standard_normal", "sample", "sample_path"]
