"""
Runtime settings.

Defaults reproduce the journal's fixed solver parameters; every field can
be overridden from the environment (or a ``.env`` file), e.g.
``OPTIONDAX_IV_MAX_ITERATIONS=200``.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SolverSettings(BaseSettings):
    """Newton-Raphson parameters of the implied-volatility solver."""

    model_config = SettingsConfigDict(
        env_prefix="OPTIONDAX_IV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # volatility values are in percentage points
    initial_guess: float = Field(default=20.0, gt=0)
    max_iterations: int = Field(default=100, gt=0)
    tolerance: float = Field(default=0.001, gt=0)
    min_vega: float = Field(default=1e-4, gt=0)
    volatility_floor: float = Field(default=0.1, gt=0)


class AppSettings(BaseSettings):
    """Settings of the command line front end."""

    model_config = SettingsConfigDict(
        env_prefix="OPTIONDAX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    log_level: str = "WARNING"
    log_json: bool = False
    risk_free_rate: float = 2.0
