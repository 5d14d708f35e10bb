"""Project Schemas — creation, listing and snapshot import of coding projects.

Invariants:
    - ProjectCreate.name: 1-200 chars, stripped, non-empty
    - ProjectImport.snapshot is an opaque JSON object (decoded by core.store_snapshot)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class ProjectImport(ProjectCreate):
    snapshot: dict


class ProjectResponse(BaseModel):
    id: UUID
    name: str
    created_at: datetime
    total_codes: int
    total_memos: int
    total_events: int
