"""Engine settings and their JSON loader."""

from __future__ import annotations

import json
import os
from typing import Optional, Tuple

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

SETTINGS_ENV_VAR = "RETIREMENT_DRAWDOWN_SETTINGS"


class ConfigurationError(Exception):
    """Raised when the settings file cannot be loaded or parsed."""


class EngineSettings(BaseModel):
    """Knobs for batch simulation that are not part of a plan."""

    run_count: int = Field(1000, ge=1, description="Monte Carlo paths per batch.")
    percentiles: Tuple[float, ...] = Field(
        (10.0, 25.0, 50.0, 75.0, 90.0),
        description="Percentiles reported for each simulated year.",
    )
    seed: Optional[int] = Field(None, description="Root seed; None draws fresh OS entropy.")
    workers: int = Field(1, ge=1, description="Processes used for a batch; 1 runs in-process.")
    chunk_size: int = Field(250, ge=1, description="Runs handed to a worker at a time.")
    success_target: float = Field(85.0, ge=0.0, le=100.0)

    @field_validator("percentiles")
    @classmethod
    def check_percentiles(cls, v: Tuple[float, ...]) -> Tuple[float, ...]:
        for p in v:
            if not 0.0 <= p <= 100.0:
                raise ValueError(f"percentile {p} outside [0, 100]")
        return tuple(sorted(set(v)))


def load_settings(path: Optional[str] = None) -> EngineSettings:
    """Load settings from a JSON file.

    When ``path`` is omitted the file named by ``RETIREMENT_DRAWDOWN_SETTINGS``
    is used; when neither is given the defaults are returned.
    """
    path = path or os.environ.get(SETTINGS_ENV_VAR)
    if not path:
        return EngineSettings()

    if not os.path.exists(path):
        raise ConfigurationError(f"Settings file not found at: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Error parsing JSON file '{path}': {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Unexpected error reading settings file '{path}': {e}") from e

    try:
        settings = EngineSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in '{path}': {e}") from e

    logger.debug(f"Loaded engine settings from {path}: {settings.model_dump()}")
    return settings


__all__ = ["ConfigurationError", "EngineSettings", "load_settings", "SETTINGS_ENV_VAR"]
