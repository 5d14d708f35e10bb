"""Entities — immutable records held by the store's registries.

Invariants:
    - Records are frozen; a change is a new record (copy-on-write registries)
    - Code.frequency stored value is always 0 — the live count is materialized
      on read by analytics.codes_with_frequency
    - Collections inside records are tuples (records compare and hash by value)

Design Decisions:
    - Plain frozen dataclasses, not pydantic: core stays free of boundary validation
"""

from dataclasses import dataclass, field
from datetime import datetime

from qualstore.core.domain_types import (
    ActorId, ActorRole, ActorType, CodeId, CodeLevel, CodingAction,
    MemoId, MemoType, RelationId, RelationType, RowId,
    ActorLinkId, TemporalCodeId,
)


@dataclass(frozen=True)
class Code:
    """A hierarchical tag. Forms a forest via parent_id."""
    id: CodeId
    name: str
    description: str
    color: str
    level: CodeLevel
    created_at: datetime
    parent_id: CodeId | None = None
    created_by: str | None = None
    frequency: int = 0
    actor_type: ActorType | None = None


@dataclass(frozen=True)
class Memo:
    id: MemoId
    content: str
    memo_type: MemoType
    created_at: datetime
    linked_codes: tuple[CodeId, ...] = ()
    linked_data_point_ids: tuple[RowId, ...] = ()
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class CodeRelation:
    """Directed typed edge. No cycle or self-loop prevention."""
    id: RelationId
    from_code: CodeId
    to_code: CodeId
    relation_type: RelationType
    strength: float | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Actor:
    id: ActorId
    name: str
    actor_type: ActorType
    role: ActorRole
    description: str | None = None


@dataclass(frozen=True)
class ActorLink:
    """A typed translation between two actors, tagged with the rows involved."""
    id: ActorLinkId
    from_actor: ActorId
    to_actor: ActorId
    translation_type: str
    data_point_ids: tuple[RowId, ...] = ()
    notes: str | None = None


@dataclass(frozen=True)
class TemporalCode:
    """A code applied to a time span (seconds) of a video row."""
    id: TemporalCodeId
    code_id: CodeId
    start_time: float
    end_time: float
    video_id: RowId


@dataclass(frozen=True)
class CodingEvent:
    """One Audit Log entry. Log position is the only identity."""
    timestamp: datetime
    action: CodingAction
    code_id: CodeId
    data_point_ids: tuple[RowId, ...] = field(default_factory=tuple)
    coder: str | None = None
    notes: str | None = None
