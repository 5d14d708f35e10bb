"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - CodeId, MemoId, RelationId, ActorId, ActorLinkId, TemporalCodeId wrap prefixed strings
    - RowId is a closed sum: int | str — never interpreted, only compared and stringified
    - All valid vocabularies encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and XML attributes without custom encoders
"""

from enum import Enum, IntEnum
from typing import NewType, Union


# ─── Identity Types ──────────────────────────────────────────────

CodeId = NewType("CodeId", str)
MemoId = NewType("MemoId", str)
RelationId = NewType("RelationId", str)
ActorId = NewType("ActorId", str)
ActorLinkId = NewType("ActorLinkId", str)
TemporalCodeId = NewType("TemporalCodeId", str)

# Row identifiers come from the external dataset's row index
RowId = Union[int, str]


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_CODE_NAME = "New Code"

CODE_PALETTE: tuple[str, ...] = (
    "#2563eb",
    "#16a34a",
    "#f97316",
    "#ef4444",
    "#8b5cf6",
    "#14b8a6",
    "#facc15",
    "#ec4899",
)

SATURATION_WINDOW = 50
SATURATION_THRESHOLD = 2

TREND_SATURATED = "Approaching saturation"
TREND_EXPLORING = "Exploring"

REFI_QDA_FILENAME = "coding.refi-qda.xml"


# ─── Enums ───────────────────────────────────────────────────────

class CodeLevel(IntEnum):
    """Advisory hierarchy depth — not checked against the parent chain."""
    THEME = 1
    CATEGORY = 2
    SUBCATEGORY = 3


class MemoType(str, Enum):
    THEORETICAL = "theoretical"
    METHODOLOGICAL = "methodological"
    OBSERVATIONAL = "observational"


class RelationType(str, Enum):
    """Directed, typed edge between two codes."""
    IS_A = "is-a"
    PART_OF = "part-of"
    CAUSES = "causes"
    CONTRADICTS = "contradicts"
    ASSOCIATES_WITH = "associates-with"


class CodingAction(str, Enum):
    """Audit log actions. merge/split are reserved vocabulary."""
    APPLY = "apply"
    REMOVE = "remove"
    CREATE = "create"
    MERGE = "merge"
    SPLIT = "split"


class ActorType(str, Enum):
    HUMAN = "human"
    NON_HUMAN = "non-human"
    HYBRID = "hybrid"


class ActorRole(str, Enum):
    """Actor-network role: intermediaries transport, mediators transform."""
    INTERMEDIARY = "intermediary"
    MEDIATOR = "mediator"
