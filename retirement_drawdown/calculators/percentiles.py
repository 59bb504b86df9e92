"""Percentile helpers for Monte Carlo output.

:func:`percentile` is the linear-interpolation estimator (the same rule as
``numpy.percentile``'s default) applied to an already sorted sequence.  Sorting
is the caller's job.

Example
-------

>>> percentile([1, 2, 3, 4, 5, 6, 7, 8, 9, 10], 50)
5.5
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Sequence

import numpy as np


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Return the ``p``-th percentile of ascending ``sorted_values``.

    Parameters
    ----------
    sorted_values : sequence of float
        Values sorted ascending.
    p : float
        Percentile in [0, 100].

    Returns
    -------
    float
        Interpolated value, or ``0.0`` for an empty sequence.
    """
    n = len(sorted_values)
    if n == 0:
        return 0.0
    p = min(100.0, max(0.0, p))
    index = (p / 100) * (n - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    weight = index - lower
    return float(sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight)


def percentile_bands(per_run_values: np.ndarray, percentiles: Iterable[float]) -> Dict[float, List[float]]:
    """Per-column percentiles of a ``runs x years`` matrix.

    Each year's column is sorted independently, so the bands describe the
    cross-section of paths at that year rather than any single path.
    """
    values = np.asarray(per_run_values, dtype=float)
    if values.ndim != 2 or values.shape[0] == 0:
        return {float(p): [] for p in percentiles}
    by_year = np.sort(values, axis=0).T
    return {float(p): [percentile(col, p) for col in by_year] for p in percentiles}


__all__ = ["percentile", "percentile_bands"]
