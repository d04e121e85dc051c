"""
Health check endpoint.

The simulator has no database or broker to ping, so "healthy" simply means
the process is up and serving requests. Load balancers and container
orchestrators (k8s) hit this to decide if the service can take traffic.
"""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    return {"status": "healthy"}
