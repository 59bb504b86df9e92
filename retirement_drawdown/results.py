"""Output records produced by the drawdown engine.

``YearRecord`` and ``SimulationResult`` describe one simulated path;
``MonteCarloSummary`` describes a batch of stochastic paths.  All three are
immutable once built.  The ``to_frame``/``bands_frame`` helpers hand the data
to table and chart code as pandas DataFrames.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import pandas as pd

if TYPE_CHECKING:
    from .calculators.withdrawal import Strategy


@dataclass(frozen=True, slots=True)
class YearRecord:
    """One simulated retirement year.

    ``withdrawal`` is the net amount taken from the portfolio: the target less
    Social Security (floored at zero) plus any one-time expense.  Strategy
    diagnostics that do not apply to the policy that produced the record are
    ``None``.
    """

    year: int
    age: int
    portfolio_start: float
    return_pct: float
    withdrawal: float
    portfolio_end: float
    ruined: bool
    ss_received: float
    target_withdrawal: float
    one_time_expense: float = 0.0
    base_withdrawal: Optional[float] = None
    vpw_pct: Optional[float] = None
    life_exp: Optional[int] = None
    rmd_withdrawal: Optional[float] = None
    current_rate: Optional[float] = None


@dataclass(frozen=True)
class SimulationResult:
    years: Tuple[YearRecord, ...]
    final_balance: float
    total_withdrawals: float
    ruined: bool
    ruin_age: Optional[int] = None

    @property
    def ages(self) -> List[int]:
        return [y.age for y in self.years]

    @property
    def balances(self) -> List[float]:
        """End-of-year portfolio values, in age order."""
        return [y.portfolio_end for y in self.years]

    def to_frame(self) -> pd.DataFrame:
        """Year-by-year ledger, one row per record."""
        columns = [f.name for f in fields(YearRecord)]
        return pd.DataFrame([asdict(y) for y in self.years], columns=columns)


@dataclass(frozen=True)
class MonteCarloSummary:
    strategy: "Strategy"
    run_count: int
    success_rate: float
    ages: Tuple[int, ...]
    percentile_bands: Dict[float, List[float]]
    withdrawal_bands: Dict[float, List[float]]
    final_balance_distribution: Tuple[float, ...]
    median_final_balance: float
    ruin_ages: Tuple[int, ...] = ()
    cancelled: bool = False
    percentiles: Tuple[float, ...] = field(default=())

    @property
    def failure_count(self) -> int:
        return len(self.ruin_ages)

    def bands_frame(self, kind: str = "portfolio") -> pd.DataFrame:
        """Percentile bands as a DataFrame indexed by age.

        ``kind`` is ``"portfolio"`` for end-of-year balances or
        ``"withdrawal"`` for net withdrawals.
        """
        bands = self.withdrawal_bands if kind == "withdrawal" else self.percentile_bands
        frame = pd.DataFrame({f"p{p:g}": values for p, values in bands.items()}, index=list(self.ages))
        frame.index.name = "age"
        return frame


__all__ = ["YearRecord", "SimulationResult", "MonteCarloSummary"]
