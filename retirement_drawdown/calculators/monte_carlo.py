"""Monte Carlo batches of drawdown paths.

:func:`run_many` repeats :func:`simulation.run` with stochastic returns and
reduces the paths to a :class:`~retirement_drawdown.results.MonteCarloSummary`:
success rate, per-year percentile bands of the ending balance and of the net
withdrawal, and the distribution of final balances.

Paths are independent, so a batch can be spread over worker processes.  Each
worker chunk owns a child of one ``numpy.random.SeedSequence``, which keeps the
streams independent and a seeded batch repeatable for a given worker layout.
Reduction happens only after the chunks come back.

Example
-------

>>> from retirement_drawdown.inputs import SimulationInputs
>>> plan = SimulationInputs(retirement_age=65, planning_age=95, starting_portfolio=1_000_000,
...                         expected_return=6, volatility=12, inflation_rate=2.5)
>>> summary = run_many(plan, "constant_real", 200, seed=7)
>>> 0.0 <= summary.success_rate <= 100.0
True
"""

from __future__ import annotations

import multiprocessing
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

import numpy as np
from loguru import logger

from ..config import EngineSettings
from ..inputs import SimulationInputs
from ..results import MonteCarloSummary
from . import simulation
from .percentiles import percentile, percentile_bands
from .withdrawal import Strategy

_MIN_RELATIVE_TOL = 1e-6


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


class _Batch:
    """Raw per-path output collected before reduction."""

    def __init__(self) -> None:
        self.ends: List[List[float]] = []
        self.withdrawals: List[List[float]] = []
        self.finals: List[float] = []
        self.ruin_ages: List[int] = []
        self.survivors = 0

    @property
    def completed(self) -> int:
        return len(self.finals)

    def extend(self, other: "_Batch") -> None:
        self.ends.extend(other.ends)
        self.withdrawals.extend(other.withdrawals)
        self.finals.extend(other.finals)
        self.ruin_ages.extend(other.ruin_ages)
        self.survivors += other.survivors


def _run_paths(
    inputs: SimulationInputs,
    strategy: Strategy,
    count: int,
    rng: np.random.Generator,
    cancel: Optional[CancelSignal] = None,
) -> _Batch:
    batch = _Batch()
    for _ in range(count):
        if cancel is not None and cancel.is_set():
            break
        res = simulation.run(inputs, strategy, deterministic=False, rng=rng)
        batch.ends.append([y.portfolio_end for y in res.years])
        batch.withdrawals.append([y.withdrawal for y in res.years])
        batch.finals.append(res.final_balance)
        if res.ruined:
            batch.ruin_ages.append(res.ruin_age)
        else:
            batch.survivors += 1
    return batch


def _run_chunk(args: Tuple[SimulationInputs, Strategy, int, np.random.SeedSequence]) -> _Batch:
    inputs, strategy, count, seed_seq = args
    return _run_paths(inputs, strategy, count, np.random.default_rng(seed_seq))


def _chunk_sizes(total: int, chunk_size: int) -> List[int]:
    full, rest = divmod(total, chunk_size)
    return [chunk_size] * full + ([rest] if rest else [])


def _warn_on_inputs(inputs: SimulationInputs) -> None:
    if 0 < inputs.max_spending < inputs.min_spending:
        logger.warning(
            f"Maximum spending ({inputs.max_spending:,.0f}) is below minimum spending "
            f"({inputs.min_spending:,.0f}); the maximum takes precedence."
        )


def _reduce(
    batch: _Batch,
    inputs: SimulationInputs,
    strategy: Strategy,
    percentiles: Sequence[float],
    cancelled: bool,
) -> MonteCarloSummary:
    completed = batch.completed
    horizon = inputs.horizon
    ends = np.array(batch.ends, dtype=float).reshape(completed, horizon)
    withdrawals = np.array(batch.withdrawals, dtype=float).reshape(completed, horizon)
    finals = tuple(sorted(batch.finals))
    success_rate = batch.survivors / completed * 100 if completed else 0.0

    return MonteCarloSummary(
        strategy=strategy,
        run_count=completed,
        success_rate=success_rate,
        ages=tuple(range(inputs.retirement_age, inputs.retirement_age + horizon)),
        percentile_bands=percentile_bands(ends, percentiles),
        withdrawal_bands=percentile_bands(withdrawals, percentiles),
        final_balance_distribution=finals,
        median_final_balance=percentile(finals, 50),
        ruin_ages=tuple(sorted(batch.ruin_ages)),
        cancelled=cancelled,
        percentiles=tuple(float(p) for p in percentiles),
    )


def run_many(
    inputs: SimulationInputs,
    strategy: Strategy | str,
    run_count: Optional[int] = None,
    *,
    seed: Optional[int] = None,
    workers: Optional[int] = None,
    percentiles: Optional[Sequence[float]] = None,
    settings: Optional[EngineSettings] = None,
    rng: Optional[np.random.Generator] = None,
    cancel: Optional[CancelSignal] = None,
) -> MonteCarloSummary:
    """Run ``run_count`` stochastic paths and summarise them.

    Parameters
    ----------
    inputs : SimulationInputs
        The plan, shared read-only by every path.
    strategy : Strategy or str
        Withdrawal policy applied on every path.
    run_count : int, optional
        Number of paths; defaults to ``settings.run_count``.
    seed : int, optional
        Root seed.  ``None`` falls back to ``settings.seed`` and then to fresh
        OS entropy.
    workers : int, optional
        Worker processes; ``1`` (the default) runs in-process.
    percentiles : sequence of float, optional
        Percentiles reported per year; defaults to ``settings.percentiles``.
    settings : EngineSettings, optional
        Defaults for the keyword arguments above.
    rng : numpy.random.Generator, optional
        Explicit generator for in-process runs; overrides ``seed``.
    cancel : object with ``is_set()``, optional
        When set, no further paths are started.  The summary then covers the
        paths already finished and has ``cancelled=True``.

    Returns
    -------
    MonteCarloSummary
    """
    settings = settings or EngineSettings()
    strategy = Strategy(strategy)
    run_count = settings.run_count if run_count is None else run_count
    seed = settings.seed if seed is None else seed
    workers = settings.workers if workers is None else workers
    percentiles = tuple(settings.percentiles if percentiles is None else percentiles)

    _warn_on_inputs(inputs)
    batch = _Batch()
    cancelled = False

    if run_count <= 0:
        logger.warning(f"Requested {run_count} runs for {strategy.value}; returning an empty summary.")
    elif workers <= 1 or rng is not None:
        logger.debug(f"Running {run_count} {strategy.value} paths sequentially over {inputs.horizon} years.")
        rng = rng if rng is not None else np.random.default_rng(seed)
        batch = _run_paths(inputs, strategy, run_count, rng, cancel)
    else:
        sizes = _chunk_sizes(run_count, settings.chunk_size)
        children = np.random.SeedSequence(seed).spawn(len(sizes))
        tasks = [(inputs, strategy, size, child) for size, child in zip(sizes, children)]
        logger.debug(
            f"Running {run_count} {strategy.value} paths in {len(tasks)} chunks "
            f"using {workers} processes."
        )
        with multiprocessing.Pool(processes=workers) as pool:
            for chunk in pool.imap(_run_chunk, tasks):
                if cancel is not None and cancel.is_set():
                    break
                batch.extend(chunk)

    if cancel is not None and cancel.is_set() and batch.completed < run_count:
        cancelled = True
        logger.warning(f"Cancelled after {batch.completed} of {run_count} {strategy.value} paths.")

    summary = _reduce(batch, inputs, strategy, percentiles, cancelled)
    logger.info(
        f"{strategy.value}: {summary.run_count} paths, success rate {summary.success_rate:.1f}%, "
        f"median final balance {summary.median_final_balance:,.0f}"
    )
    return summary


def compare_strategies(
    inputs: SimulationInputs,
    run_count: Optional[int] = None,
    **kwargs,
) -> Dict[Strategy, MonteCarloSummary]:
    """Run every strategy on the same plan.

    With a fixed ``seed`` each strategy sees the same return paths.
    """
    return {s: run_many(inputs, s, run_count, **kwargs) for s in Strategy}


def max_sustainable_spending(
    inputs: SimulationInputs,
    strategy: Strategy | str = Strategy.CONSTANT_REAL,
    target_success: Optional[float] = None,
    run_count: Optional[int] = None,
    seed: Optional[int] = None,
    tol: float = 100.0,
    settings: Optional[EngineSettings] = None,
) -> float:
    """Largest year-1 withdrawal whose success rate meets ``target_success``.

    Bisects the ``starting_withdrawal`` override between zero and the starting
    portfolio.  Every probe reuses one seed so the probes face identical return
    paths.  ``inputs`` itself is left untouched.  ``tol`` is floored at a
    millionth of the starting portfolio.

    Returns
    -------
    float
        The sustainable amount (within ``tol``), or ``0.0`` if even the
        smallest probe misses the target.
    """
    settings = settings or EngineSettings()
    target = settings.success_target if target_success is None else target_success
    run_count = settings.run_count if run_count is None else run_count
    if seed is None:
        seed = settings.seed
    if seed is None:
        seed = int(np.random.SeedSequence().generate_state(1)[0])
    logger.info(
        f"Searching sustainable {Strategy(strategy).value} spending for {target:.1f}% success "
        f"({run_count} paths per probe, seed {seed})."
    )

    lo, hi = 0.0, inputs.starting_portfolio
    # a non-positive or NaN tolerance would never converge on floats
    min_tol = _MIN_RELATIVE_TOL * max(1.0, hi)
    if not tol > min_tol:
        tol = min_tol
    while hi - lo > tol:
        mid = (lo + hi) / 2
        probe = inputs.with_updates(starting_withdrawal=mid)
        rate = run_many(probe, strategy, run_count, seed=seed, workers=1, settings=settings).success_rate
        logger.debug(f"  probe {mid:,.0f}: success {rate:.1f}%")
        if rate >= target:
            lo = mid
        else:
            hi = mid
    return lo


__all__ = ["run_many", "compare_strategies", "max_sustainable_spending", "CancelSignal"]
