"""Store Snapshot — serialization / deserialization for QualitativeStore.

Invariants:
    - store_to_snapshot produces a JSON-safe dict (no tuples required, no Enums, no datetimes)
    - store_from_snapshot reconstructs a store whose registries, assignment table
      and audit log equal the snapshotted ones; derived values follow automatically
    - Missing keys fall back to empty collections (forward-compatible); values of
      the wrong type and unknown versions raise SnapshotFormatError
    - Row ids keep their JSON type (int stays int, str stays str)

Design Decisions:
    - External serialization only: the store never writes snapshots anywhere itself
    - Restored inside one graph.batch(): observers see a single notification pass
"""

from datetime import datetime
from typing import Any

from qualstore.core.domain_types import (
    ActorRole, ActorType, CodeLevel, CodingAction, MemoType, RelationType,
)
from qualstore.core.entities import (
    Actor, ActorLink, Code, CodeRelation, CodingEvent, Memo, TemporalCode,
)
from qualstore.core.errors import SnapshotFormatError
from qualstore.core.qualitative_store import QualitativeStore

SNAPSHOT_VERSION = 1


# --- Encoding ------------------------------------------------------------------

def _code_to_dict(code: Code) -> dict:
    return {
        "id": code.id,
        "name": code.name,
        "description": code.description,
        "color": code.color,
        "parent_id": code.parent_id,
        "level": int(code.level),
        "created_at": code.created_at.isoformat(),
        "created_by": code.created_by,
        "actor_type": code.actor_type.value if code.actor_type else None,
    }


def _memo_to_dict(memo: Memo) -> dict:
    return {
        "id": memo.id,
        "content": memo.content,
        "memo_type": memo.memo_type.value,
        "created_at": memo.created_at.isoformat(),
        "linked_codes": list(memo.linked_codes),
        "linked_data_point_ids": list(memo.linked_data_point_ids),
        "tags": list(memo.tags),
    }


def _event_to_dict(event: CodingEvent) -> dict:
    return {
        "timestamp": event.timestamp.isoformat(),
        "action": event.action.value,
        "code_id": event.code_id,
        "data_point_ids": list(event.data_point_ids),
        "coder": event.coder,
        "notes": event.notes,
    }


def store_to_snapshot(store: QualitativeStore) -> dict:
    """Serialize the store's authoritative state. Pure, no IO."""
    return {
        "version": SNAPSHOT_VERSION,
        "codes": [_code_to_dict(c) for c in store.codes.value],
        "memos": [_memo_to_dict(m) for m in store.memos.value],
        "relations": [
            {
                "id": r.id, "from_code": r.from_code, "to_code": r.to_code,
                "relation_type": r.relation_type.value,
                "strength": r.strength, "notes": r.notes,
            }
            for r in store.relations.value
        ],
        "actors": [
            {
                "id": a.id, "name": a.name, "actor_type": a.actor_type.value,
                "role": a.role.value, "description": a.description,
            }
            for a in store.actors.value
        ],
        "actor_links": [
            {
                "id": link.id, "from_actor": link.from_actor, "to_actor": link.to_actor,
                "translation_type": link.translation_type,
                "data_point_ids": list(link.data_point_ids), "notes": link.notes,
            }
            for link in store.actor_links.value
        ],
        "temporal_codes": [
            {
                "id": t.id, "code_id": t.code_id, "start_time": t.start_time,
                "end_time": t.end_time, "video_id": t.video_id,
            }
            for t in store.temporal_codes.value
        ],
        "assignments": {
            code_id: list(rows) for code_id, rows in store.assignments.value.items()
        },
        "coding_events": [_event_to_dict(e) for e in store.coding_events.value],
    }


# --- Decoding ------------------------------------------------------------------
# Every value is type-checked before it reaches a record: a snapshot either
# decodes completely or raises SnapshotFormatError, and the store is only
# written once decoding has succeeded.

_MISSING = object()

_STR = (str,)
_NUMBER = (int, float)
_ROW_ID = (int, str)


def _check(value: Any, types: tuple[type, ...], where: str) -> Any:
    # bool is an int subclass but never a valid row id, level or time
    if isinstance(value, bool) or not isinstance(value, types):
        expected = " or ".join(t.__name__ for t in types)
        raise SnapshotFormatError(
            f"{where} must be {expected}, got {type(value).__name__}",
        )
    return value


def _field(
    d: dict,
    key: str,
    types: tuple[type, ...],
    where: str,
    *,
    default: Any = _MISSING,
    nullable: bool = False,
) -> Any:
    if key not in d:
        if default is _MISSING:
            raise SnapshotFormatError(f"{where}.{key} is missing")
        return default
    value = d[key]
    if value is None and nullable:
        return None
    return _check(value, types, f"{where}.{key}")


def _list(d: dict, key: str, where: str, item_types: tuple[type, ...]) -> tuple:
    items = _field(d, key, (list,), where, default=[])
    return tuple(
        _check(item, item_types, f"{where}.{key}[{i}]") for i, item in enumerate(items)
    )


def _records(data: dict, key: str) -> list[tuple[str, dict]]:
    items = _field(data, key, (list,), "snapshot", default=[])
    return [
        (f"{key}[{i}]", _check(item, (dict,), f"{key}[{i}]"))
        for i, item in enumerate(items)
    ]


def _timestamp(d: dict, key: str, where: str) -> datetime:
    raw = _field(d, key, _STR, where)
    try:
        return datetime.fromisoformat(raw)
    except ValueError as e:
        raise SnapshotFormatError(f"{where}.{key} is not an ISO timestamp: {raw!r}") from e


def _enum(enum_cls, d: dict, key: str, where: str, *, nullable: bool = False):
    raw = _field(d, key, _STR, where, nullable=nullable, default=None if nullable else _MISSING)
    if raw is None:
        return None
    try:
        return enum_cls(raw)
    except ValueError as e:
        raise SnapshotFormatError(f"{where}.{key} has unknown value {raw!r}") from e


def _level(d: dict, where: str) -> CodeLevel:
    raw = _field(d, "level", (int,), where, default=int(CodeLevel.THEME))
    try:
        return CodeLevel(raw)
    except ValueError as e:
        raise SnapshotFormatError(f"{where}.level must be 1, 2 or 3, got {raw}") from e


def _code_from_dict(d: dict, where: str) -> Code:
    return Code(
        id=_field(d, "id", _STR, where),
        name=_field(d, "name", _STR, where, default=""),
        description=_field(d, "description", _STR, where, default=""),
        color=_field(d, "color", _STR, where, default=""),
        parent_id=_field(d, "parent_id", _STR, where, default=None, nullable=True),
        level=_level(d, where),
        created_at=_timestamp(d, "created_at", where),
        created_by=_field(d, "created_by", _STR, where, default=None, nullable=True),
        actor_type=_enum(ActorType, d, "actor_type", where, nullable=True),
    )


def _memo_from_dict(d: dict, where: str) -> Memo:
    return Memo(
        id=_field(d, "id", _STR, where),
        content=_field(d, "content", _STR, where, default=""),
        memo_type=_enum(MemoType, d, "memo_type", where),
        created_at=_timestamp(d, "created_at", where),
        linked_codes=_list(d, "linked_codes", where, _STR),
        linked_data_point_ids=_list(d, "linked_data_point_ids", where, _ROW_ID),
        tags=_list(d, "tags", where, _STR),
    )


def _relation_from_dict(d: dict, where: str) -> CodeRelation:
    return CodeRelation(
        id=_field(d, "id", _STR, where),
        from_code=_field(d, "from_code", _STR, where),
        to_code=_field(d, "to_code", _STR, where),
        relation_type=_enum(RelationType, d, "relation_type", where),
        strength=_field(d, "strength", _NUMBER, where, default=None, nullable=True),
        notes=_field(d, "notes", _STR, where, default=None, nullable=True),
    )


def _actor_from_dict(d: dict, where: str) -> Actor:
    return Actor(
        id=_field(d, "id", _STR, where),
        name=_field(d, "name", _STR, where),
        actor_type=_enum(ActorType, d, "actor_type", where),
        role=_enum(ActorRole, d, "role", where),
        description=_field(d, "description", _STR, where, default=None, nullable=True),
    )


def _actor_link_from_dict(d: dict, where: str) -> ActorLink:
    return ActorLink(
        id=_field(d, "id", _STR, where),
        from_actor=_field(d, "from_actor", _STR, where),
        to_actor=_field(d, "to_actor", _STR, where),
        translation_type=_field(d, "translation_type", _STR, where, default=""),
        data_point_ids=_list(d, "data_point_ids", where, _ROW_ID),
        notes=_field(d, "notes", _STR, where, default=None, nullable=True),
    )


def _temporal_code_from_dict(d: dict, where: str) -> TemporalCode:
    return TemporalCode(
        id=_field(d, "id", _STR, where),
        code_id=_field(d, "code_id", _STR, where),
        start_time=_field(d, "start_time", _NUMBER, where),
        end_time=_field(d, "end_time", _NUMBER, where),
        video_id=_field(d, "video_id", _ROW_ID, where),
    )


def _event_from_dict(d: dict, where: str) -> CodingEvent:
    return CodingEvent(
        timestamp=_timestamp(d, "timestamp", where),
        action=_enum(CodingAction, d, "action", where),
        code_id=_field(d, "code_id", _STR, where),
        data_point_ids=_list(d, "data_point_ids", where, _ROW_ID),
        coder=_field(d, "coder", _STR, where, default=None, nullable=True),
        notes=_field(d, "notes", _STR, where, default=None, nullable=True),
    )


def _assignments_from_dict(data: dict) -> dict:
    table = _field(data, "assignments", (dict,), "snapshot", default={})
    return {
        code_id: tuple(dict.fromkeys(_list(table, code_id, "assignments", _ROW_ID)))
        for code_id in table
    }


def _decode(data: dict) -> dict[str, Any]:
    version = _field(data, "version", (int,), "snapshot", default=SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise SnapshotFormatError(
            f"unsupported version {version!r} (expected {SNAPSHOT_VERSION})",
        )
    return {
        "codes": tuple(_code_from_dict(d, w) for w, d in _records(data, "codes")),
        "memos": tuple(_memo_from_dict(d, w) for w, d in _records(data, "memos")),
        "relations": tuple(
            _relation_from_dict(d, w) for w, d in _records(data, "relations")
        ),
        "actors": tuple(_actor_from_dict(d, w) for w, d in _records(data, "actors")),
        "actor_links": tuple(
            _actor_link_from_dict(d, w) for w, d in _records(data, "actor_links")
        ),
        "temporal_codes": tuple(
            _temporal_code_from_dict(d, w) for w, d in _records(data, "temporal_codes")
        ),
        "assignments": _assignments_from_dict(data),
        "coding_events": tuple(
            _event_from_dict(d, w) for w, d in _records(data, "coding_events")
        ),
    }


def store_from_snapshot(data: dict | None, **store_kwargs: Any) -> QualitativeStore:
    """Rebuild a store from a snapshot dict. Raises SnapshotFormatError on bad input."""
    store = QualitativeStore(**store_kwargs)
    if not data:
        return store
    if not isinstance(data, dict):
        raise SnapshotFormatError("snapshot must be a JSON object")
    decoded = _decode(data)
    with store.graph.batch():
        for name, value in decoded.items():
            store.graph[name].set(value)
    return store
