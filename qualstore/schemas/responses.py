"""Response Schemas — public shapes of store records and analytics.

Invariants:
    - Every response model reads straight from core entities (from_attributes)
    - CodeResponse.frequency is the live count, never the stored placeholder
    - Row ids keep their type (int stays int, str stays str)

Design Decisions:
    - Separate from request schemas: responses carry server-assigned ids and timestamps
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from qualstore.core.domain_types import (
    ActorRole, ActorType, CodingAction, MemoType, RelationType,
)


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CodeResponse(_Record):
    id: str
    name: str
    description: str
    color: str
    parent_id: str | None = None
    level: int
    created_at: datetime
    created_by: str | None = None
    frequency: int = 0
    actor_type: ActorType | None = None


class MemoResponse(_Record):
    id: str
    content: str
    memo_type: MemoType
    created_at: datetime
    linked_codes: list[str] = []
    linked_data_point_ids: list[int | str] = []
    tags: list[str] = []


class RelationResponse(_Record):
    id: str
    from_code: str
    to_code: str
    relation_type: RelationType
    strength: float | None = None
    notes: str | None = None


class ActorResponse(_Record):
    id: str
    name: str
    actor_type: ActorType
    role: ActorRole
    description: str | None = None


class ActorLinkResponse(_Record):
    id: str
    from_actor: str
    to_actor: str
    translation_type: str
    data_point_ids: list[int | str] = []
    notes: str | None = None


class TemporalCodeResponse(_Record):
    id: str
    code_id: str
    start_time: float
    end_time: float
    video_id: int | str


class CodingEventResponse(_Record):
    timestamp: datetime
    action: CodingAction
    code_id: str
    data_point_ids: list[int | str] = []
    coder: str | None = None
    notes: str | None = None


class AssignmentResult(BaseModel):
    """State of one code's assignment set after apply/remove."""
    code_id: str
    row_ids: list[int | str]
    frequency: int


class SaturationResponse(BaseModel):
    total_codes: int
    recent_new_codes: int
    trend: str
