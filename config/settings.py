"""
Centralized configuration using pydantic-settings.

How it works:
- Reads environment variables automatically (e.g., TICK_MINUTES env var → Settings.TICK_MINUTES)
- Falls back to defaults defined here if env vars are not set
- Can also read from a .env file in the project root

These are the knobs of the simulator itself (tick length, sampling rate,
release cadence). The scenario being simulated (leases, timeouts, jobs)
lives in the YAML config file loaded by config/loader.py.
"""

from datetime import timedelta
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Simulation clock ────────────────────────────────────────
    TICK_MINUTES: int = 5               # virtual time advanced per engine step
    SAMPLE_INTERVAL_MINUTES: int = 30   # spacing of chart samples
    RETIME_ON_PROMOTION: bool = True    # restart duration/timeout when promoted from the wait queue

    # ── Release-triggered jobs ──────────────────────────────────
    RELEASE_INTERVAL_MIN_HOURS: int = 4
    RELEASE_INTERVAL_MAX_HOURS: int = 8
    RANDOM_SEED: Optional[int] = None   # unset → a different release train every run

    # ── Input / output ──────────────────────────────────────────
    SIMULATION_CONFIG_PATH: str = "config.yaml"
    CHART_WIDTH: int = 80

    # ── App ─────────────────────────────────────────────────────
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    @property
    def tick(self) -> timedelta:
        return timedelta(minutes=self.TICK_MINUTES)

    @property
    def sample_interval(self) -> timedelta:
        return timedelta(minutes=self.SAMPLE_INTERVAL_MINUTES)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton, import this everywhere
settings = Settings()
