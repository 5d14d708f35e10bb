"""Qualitative Store — in-memory coding store with live derived analytics.

Invariants:
    - Registries are tuples, the assignment table a dict of tuples; every write
      replaces the container (copy-on-write), never mutates it in place
    - A RowId appears at most once per code (ordered set semantics)
    - Audit log is append-only; only create_code/apply_code/remove_code write to it
    - Derived nodes (assignments_by_row, codes_with_frequency, cooccurrence,
      saturation) are never stale after a Mutation API call returns
    - Mutation API never raises on empty input; it does not check that referenced
      ids exist (strict checks live in enforce_references, applied by the shell)

Design Decisions:
    - One store object per project, passed by handle (no module-level instance)
    - Multi-node writes wrapped in graph.batch(): observers get one notification pass
    - id_factory and clock injectable so tests can pin ids and timestamps
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from qualstore.core import analytics
from qualstore.core.domain_types import (
    ActorId, ActorRole, ActorType, CodeId, CodeLevel, CodingAction,
    MemoType, RelationType, RowId,
    CODE_PALETTE, DEFAULT_CODE_NAME, SATURATION_THRESHOLD, SATURATION_WINDOW,
)
from qualstore.core.entities import (
    Actor, ActorLink, Code, CodeRelation, CodingEvent, Memo, TemporalCode,
)
from qualstore.core.identity import create_id
from qualstore.core.reactive import ReactiveGraph, Subscriber, Unsubscribe
from qualstore.core.refi_qda import export_refi_qda, export_refi_qda_bytes

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def palette_color(index: int) -> str:
    """Deterministic default color for the index-th code."""
    return CODE_PALETTE[index % len(CODE_PALETTE)]


class QualitativeStore:
    """Codes, memos, relations, actors and assignments for one coding project."""

    def __init__(
        self,
        *,
        id_factory: Callable[[str], str] = create_id,
        clock: Callable[[], datetime] = _utcnow,
        saturation_window: int = SATURATION_WINDOW,
        saturation_threshold: int = SATURATION_THRESHOLD,
    ):
        self._new_id = id_factory
        self._now = clock
        self.saturation_window = saturation_window
        self.saturation_threshold = saturation_threshold

        graph = self.graph = ReactiveGraph()

        # Registries
        self.codes = graph.signal("codes", ())
        self.memos = graph.signal("memos", ())
        self.relations = graph.signal("relations", ())
        self.actors = graph.signal("actors", ())
        self.actor_links = graph.signal("actor_links", ())
        self.temporal_codes = graph.signal("temporal_codes", ())

        # Assignment table + audit log
        self.assignments = graph.signal("assignments", {})
        self.coding_events = graph.signal("coding_events", ())

        # Derived analytics
        self.assignments_by_row = graph.derived(
            "assignments_by_row", [self.assignments], analytics.assignments_by_row,
        )
        self.codes_with_frequency = graph.derived(
            "codes_with_frequency", [self.codes, self.assignments],
            analytics.codes_with_frequency,
        )
        self.cooccurrence = graph.derived(
            "cooccurrence", [self.assignments_by_row], analytics.cooccurrence,
        )
        self.saturation = graph.derived(
            "saturation", [self.codes, self.coding_events], self._saturation,
        )

    def _saturation(self, codes, events) -> dict:
        return analytics.saturation(
            codes, events, self.saturation_window, self.saturation_threshold,
        )

    # --- Observation -------------------------------------------------------------

    def observe(self, name: str, callback: Subscriber) -> Unsubscribe:
        """Subscribe to a registry or derived value by name."""
        return self.graph.observe(name, callback)

    # --- Lookups -----------------------------------------------------------------

    def get_code(self, code_id: str) -> Code | None:
        return next((c for c in self.codes.value if c.id == code_id), None)

    def has_code(self, code_id: str) -> bool:
        return self.get_code(code_id) is not None

    def has_actor(self, actor_id: str) -> bool:
        return any(a.id == actor_id for a in self.actors.value)

    def rows_for(self, code_id: str) -> tuple[RowId, ...]:
        return tuple(self.assignments.value.get(code_id, ()))

    # --- Audit log ---------------------------------------------------------------

    def _log_event(
        self,
        action: CodingAction,
        code_id: str,
        row_ids: tuple[RowId, ...] = (),
        coder: str | None = None,
        notes: str | None = None,
    ) -> None:
        event = CodingEvent(
            timestamp=self._now(), action=action, code_id=CodeId(code_id),
            data_point_ids=row_ids, coder=coder, notes=notes,
        )
        self.coding_events.update(lambda events: (*events, event))

    # --- Mutation API: codes -----------------------------------------------------

    def create_code(
        self,
        name: str | None = None,
        description: str | None = None,
        color: str | None = None,
        parent_id: str | None = None,
        level: int | None = None,
        created_by: str | None = None,
        actor_type: ActorType | str | None = None,
        notes: str | None = None,
    ) -> Code:
        """Create a code with defaults filled in and log a `create` event."""
        code = Code(
            id=CodeId(self._new_id("code")),
            name=name if name is not None else DEFAULT_CODE_NAME,
            description=description if description is not None else "",
            color=color if color is not None else palette_color(len(self.codes.value)),
            parent_id=CodeId(parent_id) if parent_id is not None else None,
            level=CodeLevel(level) if level is not None else CodeLevel.THEME,
            created_at=self._now(),
            created_by=created_by,
            actor_type=ActorType(actor_type) if actor_type is not None else None,
        )
        with self.graph.batch():
            self.codes.update(lambda codes: (*codes, code))
            self._log_event(CodingAction.CREATE, code.id, (), created_by, notes)
        logger.debug("Code created", extra={"code_id": code.id, "action": "create"})
        return code

    def apply_code(
        self,
        code_id: str,
        row_ids: Iterable[RowId],
        coder: str | None = None,
        notes: str | None = None,
    ) -> None:
        """Union `row_ids` into the code's assignment set. No-op when empty."""
        rows = tuple(row_ids)
        if not rows:
            return

        def _apply(current: dict) -> dict:
            merged = dict.fromkeys((*current.get(code_id, ()), *rows))
            return {**current, code_id: tuple(merged)}

        with self.graph.batch():
            self.assignments.update(_apply)
            self._log_event(CodingAction.APPLY, code_id, rows, coder, notes)
        logger.debug(
            "Code applied",
            extra={"code_id": code_id, "action": "apply", "row_count": len(rows)},
        )

    def remove_code(
        self,
        code_id: str,
        row_ids: Iterable[RowId],
        coder: str | None = None,
        notes: str | None = None,
    ) -> None:
        """Remove rows from the code's assignment set. Logs every requested row."""
        rows = tuple(row_ids)
        if not rows:
            return
        removed = set(rows)

        def _remove(current: dict) -> dict:
            kept = tuple(r for r in current.get(code_id, ()) if r not in removed)
            return {**current, code_id: kept}

        with self.graph.batch():
            self.assignments.update(_remove)
            self._log_event(CodingAction.REMOVE, code_id, rows, coder, notes)
        logger.debug(
            "Code removed from rows",
            extra={"code_id": code_id, "action": "remove", "row_count": len(rows)},
        )

    # --- Mutation API: memos, relations, actors ----------------------------------

    def create_memo(
        self,
        content: str,
        memo_type: MemoType | str,
        linked_codes: Iterable[str] = (),
        linked_data_point_ids: Iterable[RowId] = (),
        tags: Iterable[str] = (),
    ) -> Memo:
        """Create a memo. Newest memos come first; not written to the audit log."""
        memo = Memo(
            id=self._new_id("memo"),
            content=content,
            memo_type=MemoType(memo_type),
            created_at=self._now(),
            linked_codes=tuple(CodeId(c) for c in linked_codes),
            linked_data_point_ids=tuple(linked_data_point_ids),
            tags=tuple(tags),
        )
        self.memos.update(lambda memos: (memo, *memos))
        logger.debug("Memo created", extra={"action": "create_memo"})
        return memo

    def create_relation(
        self,
        from_code: str,
        to_code: str,
        relation_type: RelationType | str,
        strength: float | None = None,
        notes: str | None = None,
    ) -> CodeRelation:
        relation = CodeRelation(
            id=self._new_id("relation"),
            from_code=CodeId(from_code),
            to_code=CodeId(to_code),
            relation_type=RelationType(relation_type),
            strength=strength,
            notes=notes,
        )
        self.relations.update(lambda relations: (*relations, relation))
        logger.debug("Relation created", extra={"action": "create_relation"})
        return relation

    def add_actor(
        self,
        name: str,
        actor_type: ActorType | str,
        role: ActorRole | str,
        description: str | None = None,
    ) -> Actor:
        actor = Actor(
            id=self._new_id("actor"),
            name=name,
            actor_type=ActorType(actor_type),
            role=ActorRole(role),
            description=description,
        )
        self.actors.update(lambda actors: (*actors, actor))
        logger.debug("Actor added", extra={"action": "add_actor"})
        return actor

    def add_actor_link(
        self,
        from_actor: str,
        to_actor: str,
        translation_type: str,
        data_point_ids: Iterable[RowId] = (),
        notes: str | None = None,
    ) -> ActorLink:
        link = ActorLink(
            id=self._new_id("actor-link"),
            from_actor=ActorId(from_actor),
            to_actor=ActorId(to_actor),
            translation_type=translation_type,
            data_point_ids=tuple(data_point_ids),
            notes=notes,
        )
        self.actor_links.update(lambda links: (*links, link))
        logger.debug("Actor link added", extra={"action": "add_actor_link"})
        return link

    def add_temporal_code(
        self,
        code_id: str,
        start_time: float,
        end_time: float,
        video_id: RowId,
    ) -> TemporalCode:
        """Attach a code to a time span of a video row."""
        temporal = TemporalCode(
            id=self._new_id("temporal-code"),
            code_id=CodeId(code_id),
            start_time=start_time,
            end_time=end_time,
            video_id=video_id,
        )
        self.temporal_codes.update(lambda items: (*items, temporal))
        logger.debug(
            "Temporal code added",
            extra={"code_id": code_id, "action": "add_temporal_code"},
        )
        return temporal

    # --- Export ------------------------------------------------------------------

    def export_refi_qda(self) -> str:
        """REFI-QDA XML for the current codes, memos and assignments. Side-effect-free."""
        return export_refi_qda(
            self.codes.value, self.memos.value, self.assignments.value,
        )

    def export_refi_qda_bytes(self) -> bytes:
        return export_refi_qda_bytes(
            self.codes.value, self.memos.value, self.assignments.value,
        )
