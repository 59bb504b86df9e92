"""Retirement drawdown simulator.

Projects a retiree's portfolio under one of five withdrawal policies, either
along a single deterministic path or across many Monte Carlo paths.  The public
entry points are re-exported here; the numerical work lives in the
``calculators`` package.
"""

from .inputs import SimulationInputs
from .results import MonteCarloSummary, SimulationResult, YearRecord
from .config import ConfigurationError, EngineSettings, load_settings
from .calculators.withdrawal import Strategy
from .calculators import simulation, monte_carlo  # noqa: F401

__all__ = [
    "SimulationInputs",
    "SimulationResult",
    "YearRecord",
    "MonteCarloSummary",
    "EngineSettings",
    "ConfigurationError",
    "load_settings",
    "Strategy",
    "simulation",
    "monte_carlo",
]
