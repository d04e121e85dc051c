"""
FastAPI application factory.

This file:
1. Creates the FastAPI app
2. Registers all routers (simulations, health)

There is no startup/shutdown work: the simulator holds no connections and
no state between requests.

To run:  uvicorn api.main:app --host 0.0.0.0 --port 8000 --reload
     or: leasesim-api
"""

import logging

from fastapi import FastAPI

from config.settings import settings
from api.routers import health, simulations

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    app = FastAPI(
        title="Lease Simulator",
        description="Simulates CI job lease usage: admission, FIFO waiting and timeouts over virtual time",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(simulations.router)

    return app


def serve() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    logger.info(f"Serving on {settings.API_HOST}:{settings.API_PORT}")
    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT)


# This is what uvicorn imports: `uvicorn api.main:app`
app = create_app()
