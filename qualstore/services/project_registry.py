"""Project Registry — owns one QualitativeStore per coding project.

Invariants:
    - Each project id maps to exactly one store for the registry's lifetime
    - get() raises ResourceNotFoundError for unknown ids (never returns None)
    - Stores are created with the registry's saturation settings

Design Decisions:
    - Registry object held on app.state, not a module-level dict
    - In-memory only: projects vanish with the process (no persistence layer)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from qualstore.core.domain_types import SATURATION_THRESHOLD, SATURATION_WINDOW
from qualstore.core.errors import ErrorContext, ResourceNotFoundError
from qualstore.core.qualitative_store import QualitativeStore
from qualstore.core.store_snapshot import store_from_snapshot

logger = logging.getLogger(__name__)


@dataclass
class ProjectHandle:
    """A named store plus bookkeeping."""
    id: UUID
    name: str
    store: QualitativeStore
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ProjectRegistry:
    """In-memory map of project id -> store."""

    def __init__(
        self,
        saturation_window: int = SATURATION_WINDOW,
        saturation_threshold: int = SATURATION_THRESHOLD,
    ):
        self._projects: dict[UUID, ProjectHandle] = {}
        self._store_kwargs = {
            "saturation_window": saturation_window,
            "saturation_threshold": saturation_threshold,
        }

    def __len__(self) -> int:
        return len(self._projects)

    def create(self, name: str) -> ProjectHandle:
        handle = ProjectHandle(
            id=uuid4(), name=name, store=QualitativeStore(**self._store_kwargs),
        )
        self._projects[handle.id] = handle
        logger.info("Project created", extra={"project_id": str(handle.id)})
        return handle

    def import_snapshot(self, name: str, snapshot: dict) -> ProjectHandle:
        """Create a project whose store is rebuilt from a snapshot."""
        store = store_from_snapshot(snapshot, **self._store_kwargs)
        handle = ProjectHandle(id=uuid4(), name=name, store=store)
        self._projects[handle.id] = handle
        logger.info("Project imported", extra={"project_id": str(handle.id)})
        return handle

    def get(self, project_id: UUID) -> ProjectHandle:
        handle = self._projects.get(project_id)
        if handle is None:
            raise ResourceNotFoundError(
                "Project", str(project_id),
                ErrorContext(project_id=str(project_id)),
            )
        return handle

    def delete(self, project_id: UUID) -> None:
        self.get(project_id)
        del self._projects[project_id]
        logger.info("Project deleted", extra={"project_id": str(project_id)})

    def list_projects(self) -> list[ProjectHandle]:
        return sorted(self._projects.values(), key=lambda h: h.created_at, reverse=True)
