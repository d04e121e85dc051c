"""
FastAPI dependency injection.

How this works:
- An endpoint declares `sim_settings: Settings = Depends(get_settings)`
- FastAPI calls get_settings() before the endpoint runs
- Tests swap it out with app.dependency_overrides[get_settings] to run
  simulations with a different tick length or a fixed seed, without
  touching environment variables
"""

from config.settings import Settings, settings


def get_settings() -> Settings:
    """Returns the process-wide settings singleton."""
    return settings
