"""Coding Schemas — Pydantic models with field-level validation for Mutation API inputs.

Invariants:
    - Row ids are StrictInt | StrictStr: 1 and "1" stay distinct, bools/floats rejected
    - CodeCreate.level in {1, 2, 3}; name stripped and non-empty when given
    - RelationCreate.strength in [0, 1]
    - TemporalCodeCreate.end_time >= start_time
    - Empty row_ids lists are valid (the store treats them as no-ops)

Design Decisions:
    - Literal for level over CodeLevel: Pydantic handles validation natively, error
      messages list the allowed values
    - field_validator for side-effect-free transforms (strip) — keeps models pure
"""

from typing import Literal

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator, model_validator

from qualstore.core.domain_types import ActorRole, ActorType, MemoType, RelationType

RowIdIn = StrictInt | StrictStr

MAX_ROW_IDS_PER_REQUEST = 10_000
COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


class CodeCreate(BaseModel):
    """Code creation — every field optional, the store fills defaults."""
    name: str | None = Field(None, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    color: str | None = Field(None, pattern=COLOR_PATTERN)
    parent_id: str | None = None
    level: Literal[1, 2, 3] | None = None
    created_by: str | None = Field(None, max_length=200)
    actor_type: ActorType | None = None
    notes: str | None = Field(None, max_length=2_000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class CodeAssignment(BaseModel):
    """Rows to apply a code to (or remove it from)."""
    row_ids: list[RowIdIn] = Field(max_length=MAX_ROW_IDS_PER_REQUEST)
    coder: str | None = Field(None, max_length=200)
    notes: str | None = Field(None, max_length=2_000)


class MemoCreate(BaseModel):
    content: str = Field(min_length=1, max_length=20_000)
    memo_type: MemoType
    linked_codes: list[str] = []
    linked_data_point_ids: list[RowIdIn] = Field([], max_length=MAX_ROW_IDS_PER_REQUEST)
    tags: list[str] = []


class RelationCreate(BaseModel):
    from_code: str = Field(min_length=1)
    to_code: str = Field(min_length=1)
    relation_type: RelationType
    strength: float | None = Field(None, ge=0.0, le=1.0)
    notes: str | None = Field(None, max_length=2_000)


class ActorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    actor_type: ActorType
    role: ActorRole
    description: str | None = Field(None, max_length=5_000)


class ActorLinkCreate(BaseModel):
    from_actor: str = Field(min_length=1)
    to_actor: str = Field(min_length=1)
    translation_type: str = Field(min_length=1, max_length=200)
    data_point_ids: list[RowIdIn] = Field([], max_length=MAX_ROW_IDS_PER_REQUEST)
    notes: str | None = Field(None, max_length=2_000)


class TemporalCodeCreate(BaseModel):
    """A code applied to [start_time, end_time] seconds of a video row."""
    code_id: str = Field(min_length=1)
    start_time: float = Field(ge=0.0)
    end_time: float = Field(ge=0.0)
    video_id: RowIdIn

    @model_validator(mode="after")
    def validate_span(self):
        if self.end_time < self.start_time:
            raise ValueError("end_time must be >= start_time")
        return self
