"""Project Lifecycle — create, list, inspect, delete, snapshot and import coding projects.

Invariants:
    - Every project owns exactly one QualitativeStore (held by the ProjectRegistry)
    - Import never mutates an existing project; it always creates a new one
    - Snapshot is a pure read of the store

Design Decisions:
    - Project ids are UUIDs (path-validated by FastAPI); entity ids inside a
      project stay the store's prefixed strings
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from qualstore.api.dependencies import get_project, get_registry
from qualstore.core.store_snapshot import store_to_snapshot
from qualstore.schemas.project import ProjectCreate, ProjectImport, ProjectResponse
from qualstore.services.project_registry import ProjectHandle, ProjectRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


def _to_response(handle: ProjectHandle) -> ProjectResponse:
    store = handle.store
    return ProjectResponse(
        id=handle.id,
        name=handle.name,
        created_at=handle.created_at,
        total_codes=len(store.codes.value),
        total_memos=len(store.memos.value),
        total_events=len(store.coding_events.value),
    )


@router.post(
    "", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED,
)
async def create_project(
    body: ProjectCreate, registry: ProjectRegistry = Depends(get_registry),
):
    """Create an empty coding project."""
    return _to_response(registry.create(body.name))


@router.post(
    "/import", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED,
)
async def import_project(
    body: ProjectImport, registry: ProjectRegistry = Depends(get_registry),
):
    """Create a project from a previously exported snapshot."""
    return _to_response(registry.import_snapshot(body.name, body.snapshot))


@router.get("", response_model=list[ProjectResponse])
async def list_projects(registry: ProjectRegistry = Depends(get_registry)):
    """List projects, newest first."""
    return [_to_response(h) for h in registry.list_projects()]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project_summary(project: ProjectHandle = Depends(get_project)):
    return _to_response(project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: UUID, registry: ProjectRegistry = Depends(get_registry),
):
    """Discard a project and its store."""
    registry.delete(project_id)


@router.get("/{project_id}/snapshot")
async def get_snapshot(project: ProjectHandle = Depends(get_project)):
    """JSON-safe dump of the store (re-importable via POST /import)."""
    return store_to_snapshot(project.store)
