"""Validated, read-only inputs for a drawdown projection.

A plan arrives as a plain dictionary (from a form, a saved scenario or a test
helper) and is turned into a :class:`SimulationInputs` once per run.  Optional
amounts that are missing, ``None`` or negative are normalised to ``0.0`` so the
engine can treat "0" uniformly as "no override / no constraint".  Fractional ages
are floored to whole years.

Example
-------

>>> plan = {"retirementAge": 65, "planningAge": 95, "startingPortfolio": 1_000_000}
>>> SimulationInputs.from_plan(plan).horizon
30
"""

from __future__ import annotations

import math
from typing import Any, Dict

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _alias(snake: str, camel: str) -> AliasChoices:
    return AliasChoices(snake, camel)


class SimulationInputs(BaseModel):
    """Inputs for one projection.  Percentages are percentage points."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    current_age: int = Field(65, validation_alias=_alias("current_age", "currentAge"))
    retirement_age: int = Field(65, validation_alias=_alias("retirement_age", "retirementAge"))
    planning_age: int = Field(95, validation_alias=_alias("planning_age", "planningAge"))

    starting_portfolio: float = Field(0.0, validation_alias=_alias("starting_portfolio", "startingPortfolio"))
    expected_return: float = Field(0.0, validation_alias=_alias("expected_return", "expectedReturn"))
    volatility: float = 0.0
    inflation_rate: float = Field(0.0, validation_alias=_alias("inflation_rate", "inflationRate"))

    social_security: float = Field(0.0, validation_alias=_alias("social_security", "socialSecurity"))
    ss_start_age: int = Field(67, validation_alias=_alias("ss_start_age", "ssStartAge"))
    one_time_expense: float = Field(0.0, validation_alias=_alias("one_time_expense", "oneTimeExpense"))

    min_spending: float = Field(0.0, validation_alias=_alias("min_spending", "minSpending"))
    max_spending: float = Field(0.0, validation_alias=_alias("max_spending", "maxSpending"))
    starting_withdrawal: float = Field(0.0, validation_alias=_alias("starting_withdrawal", "startingWithdrawal"))

    stock_allocation: float = Field(60.0, validation_alias=_alias("stock_allocation", "stockAllocation"))

    @field_validator(
        "starting_portfolio",
        "social_security",
        "one_time_expense",
        "min_spending",
        "max_spending",
        "starting_withdrawal",
        "volatility",
        mode="before",
    )
    @classmethod
    def _non_negative_or_zero(cls, v: Any) -> Any:
        # None / NaN / negatives all mean "absent"
        if v is None:
            return 0.0
        if isinstance(v, (int, float)):
            if math.isnan(v) or v < 0:
                return 0.0
        return v

    @field_validator("current_age", "retirement_age", "planning_age", "ss_start_age", mode="before")
    @classmethod
    def _whole_years(cls, v: Any) -> Any:
        # fractional ages count the completed years only
        if isinstance(v, float) and math.isfinite(v):
            return math.floor(v)
        return v

    @field_validator("expected_return", "inflation_rate", mode="before")
    @classmethod
    def _default_rate(cls, v: Any) -> Any:
        if v is None:
            return 0.0
        return v

    @field_validator("stock_allocation", mode="before")
    @classmethod
    def _clamp_allocation(cls, v: Any) -> Any:
        if v is None:
            return 60.0
        if isinstance(v, (int, float)):
            return max(0.0, min(100.0, float(v)))
        return v

    @property
    def horizon(self) -> int:
        """Number of simulated retirement years (never negative)."""
        return max(0, self.planning_age - self.retirement_age)

    @property
    def inflation_multiplier(self) -> float:
        return 1.0 + self.inflation_rate / 100.0

    @classmethod
    def from_plan(cls, plan: Dict[str, Any]) -> "SimulationInputs":
        """Build inputs from a plan dictionary using either naming convention."""
        return cls.model_validate(plan)

    def with_updates(self, **changes: Any) -> "SimulationInputs":
        """Return a re-validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)


__all__ = ["SimulationInputs"]
