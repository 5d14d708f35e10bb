"""Route Dependencies — resolve the registry, project and store for a request.

Invariants:
    - The registry and the settings always come from app.state (set by create_app);
      routes never read the process-wide get_settings() cache
    - Unknown project ids surface as ResourceNotFoundError (404 via global handler)
    - enforce() is a no-op in lenient mode; in strict mode it raises on any error dict

Design Decisions:
    - FastAPI Depends chain over module-level lookups: tests swap the registry or
      settings through app.state
"""

from uuid import UUID

from fastapi import Depends, Request

from qualstore.config import Settings
from qualstore.core.enforce_references import CODE_NOT_FOUND
from qualstore.core.errors import CodeNotFoundError, ErrorContext, InvalidReferenceError
from qualstore.core.qualitative_store import QualitativeStore
from qualstore.services.project_registry import ProjectHandle, ProjectRegistry


def get_registry(request: Request) -> ProjectRegistry:
    return request.app.state.registry


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with."""
    return request.app.state.settings


def get_project(
    project_id: UUID, registry: ProjectRegistry = Depends(get_registry),
) -> ProjectHandle:
    return registry.get(project_id)


def get_store(project: ProjectHandle = Depends(get_project)) -> QualitativeStore:
    return project.store


def enforce(
    error: dict | None, settings: Settings, project_id: UUID | None = None,
) -> None:
    """Raise the typed error for a failed reference check (strict mode only)."""
    if error is None or not settings.strict_references:
        return
    ctx = ErrorContext(
        project_id=str(project_id) if project_id else None,
        debug_info={k: v for k, v in error.items() if k not in ("status", "message")},
    )
    if error["error_code"] == CODE_NOT_FOUND:
        raise CodeNotFoundError(error["code_id"], ctx)
    raise InvalidReferenceError(error["message"], error["error_code"], ctx)
