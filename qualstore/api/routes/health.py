"""Health Probe — liveness endpoint for container orchestration.

Invariants:
    - GET /health/ always returns 200 if the process is up
    - Reports the number of live projects (in-memory, so no readiness dependency)
"""

import logging

from fastapi import APIRouter, Depends, status

from qualstore.api.dependencies import get_registry
from qualstore.services.project_registry import ProjectRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(registry: ProjectRegistry = Depends(get_registry)):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "qualstore-api",
        "version": "1.0.0",
        "projects": len(registry),
    }
