"""
Simulation endpoint.

POST /simulations/  → Run one simulation and return the whole result

The API layer is intentionally thin:
- Validate input (Pydantic does this automatically, 422 on bad config)
- Hand the config to the Simulator
- Return the response

Simulations are pure, in-memory batch computations. Nothing is stored,
so there is no GET /simulations/{id}. Send the same config and seed again
and you get the same result back.
"""

import logging
import random

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_settings
from api.schemas.simulation import SimulationRequest, SimulationResponse
from config.settings import Settings
from scheduler.errors import SimulationInvariantError
from scheduler.simulator import Simulator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulations", tags=["simulations"])


@router.post("/", response_model=SimulationResponse)
def run_simulation(
    request: SimulationRequest,
    sim_settings: Settings = Depends(get_settings),
) -> SimulationResponse:
    """
    Run a simulation synchronously.

    Declared as a plain `def` (not async): the simulation is CPU-bound,
    so FastAPI runs it in its threadpool instead of blocking the event loop.
    """
    seed = request.seed if request.seed is not None else sim_settings.RANDOM_SEED
    simulator = Simulator(
        request.config,
        settings=sim_settings,
        start=request.start,
        rng=random.Random(seed),
    )
    try:
        result = simulator.run()
    except SimulationInvariantError as e:
        logger.error(f"Simulation aborted: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Simulation aborted: {e}")

    return SimulationResponse.from_result(result)
