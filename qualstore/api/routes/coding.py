"""Coding Routes — the Mutation API over HTTP (codes, assignments, memos, relations, actors).

Invariants:
    - Every write goes through QualitativeStore; routes hold no state
    - Strict mode: reference checks run before the write, a failed check writes nothing
    - Lenient mode: ids pass straight through, matching the store's permissive contract
    - Handlers are async def: they run on the event-loop thread, which is the
      store's single writer

Design Decisions:
    - Code listings come from codes_with_frequency (live counts), never from the raw registry
    - Apply/remove answer with the code's resulting assignment set
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from qualstore.api.dependencies import enforce, get_app_settings, get_store
from qualstore.config import Settings
from qualstore.core.enforce_references import (
    check_actor_link_endpoints, check_code_exists, check_memo_links,
    check_parent_code, check_relation_endpoints, check_temporal_code,
)
from qualstore.core.qualitative_store import QualitativeStore
from qualstore.schemas.coding import (
    ActorCreate, ActorLinkCreate, CodeAssignment, CodeCreate, MemoCreate,
    RelationCreate, TemporalCodeCreate,
)
from qualstore.schemas.responses import (
    ActorLinkResponse, ActorResponse, AssignmentResult, CodeResponse,
    CodingEventResponse, MemoResponse, RelationResponse, TemporalCodeResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects/{project_id}", tags=["coding"])


def _assignment_result(store: QualitativeStore, code_id: str) -> AssignmentResult:
    rows = store.rows_for(code_id)
    return AssignmentResult(code_id=code_id, row_ids=list(rows), frequency=len(rows))


# --- Codes --------------------------------------------------------------------

@router.post(
    "/codes", response_model=CodeResponse, status_code=status.HTTP_201_CREATED,
)
async def create_code(
    project_id: UUID,
    body: CodeCreate,
    store: QualitativeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    enforce(check_parent_code(store, body.parent_id), settings, project_id)
    code = store.create_code(**body.model_dump())
    logger.info(
        "Code created",
        extra={"project_id": str(project_id), "code_id": code.id, "action": "create"},
    )
    return CodeResponse.model_validate(code)


@router.get("/codes", response_model=list[CodeResponse])
async def list_codes(store: QualitativeStore = Depends(get_store)):
    """Codes with live frequency counts."""
    return [CodeResponse.model_validate(c) for c in store.codes_with_frequency.value]


@router.post("/codes/{code_id}/apply", response_model=AssignmentResult)
async def apply_code(
    project_id: UUID,
    code_id: str,
    body: CodeAssignment,
    store: QualitativeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    enforce(check_code_exists(store, code_id), settings, project_id)
    store.apply_code(code_id, body.row_ids, coder=body.coder, notes=body.notes)
    return _assignment_result(store, code_id)


@router.post("/codes/{code_id}/remove", response_model=AssignmentResult)
async def remove_code(
    project_id: UUID,
    code_id: str,
    body: CodeAssignment,
    store: QualitativeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    enforce(check_code_exists(store, code_id), settings, project_id)
    store.remove_code(code_id, body.row_ids, coder=body.coder, notes=body.notes)
    return _assignment_result(store, code_id)


# --- Memos --------------------------------------------------------------------

@router.post(
    "/memos", response_model=MemoResponse, status_code=status.HTTP_201_CREATED,
)
async def create_memo(
    project_id: UUID,
    body: MemoCreate,
    store: QualitativeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    enforce(check_memo_links(store, body.linked_codes), settings, project_id)
    memo = store.create_memo(**body.model_dump())
    logger.info(
        "Memo created", extra={"project_id": str(project_id), "action": "create_memo"},
    )
    return MemoResponse.model_validate(memo)


@router.get("/memos", response_model=list[MemoResponse])
async def list_memos(store: QualitativeStore = Depends(get_store)):
    """Memos, newest first."""
    return [MemoResponse.model_validate(m) for m in store.memos.value]


# --- Relations ----------------------------------------------------------------

@router.post(
    "/relations", response_model=RelationResponse, status_code=status.HTTP_201_CREATED,
)
async def create_relation(
    project_id: UUID,
    body: RelationCreate,
    store: QualitativeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    enforce(
        check_relation_endpoints(store, body.from_code, body.to_code),
        settings, project_id,
    )
    relation = store.create_relation(**body.model_dump())
    logger.info(
        "Relation created",
        extra={"project_id": str(project_id), "action": "create_relation"},
    )
    return RelationResponse.model_validate(relation)


@router.get("/relations", response_model=list[RelationResponse])
async def list_relations(store: QualitativeStore = Depends(get_store)):
    return [RelationResponse.model_validate(r) for r in store.relations.value]


# --- Actors -------------------------------------------------------------------

@router.post(
    "/actors", response_model=ActorResponse, status_code=status.HTTP_201_CREATED,
)
async def add_actor(
    project_id: UUID,
    body: ActorCreate,
    store: QualitativeStore = Depends(get_store),
):
    actor = store.add_actor(**body.model_dump())
    logger.info(
        "Actor added", extra={"project_id": str(project_id), "action": "add_actor"},
    )
    return ActorResponse.model_validate(actor)


@router.get("/actors", response_model=list[ActorResponse])
async def list_actors(store: QualitativeStore = Depends(get_store)):
    return [ActorResponse.model_validate(a) for a in store.actors.value]


@router.post(
    "/actor-links", response_model=ActorLinkResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_actor_link(
    project_id: UUID,
    body: ActorLinkCreate,
    store: QualitativeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    enforce(
        check_actor_link_endpoints(store, body.from_actor, body.to_actor),
        settings, project_id,
    )
    link = store.add_actor_link(**body.model_dump())
    logger.info(
        "Actor link added",
        extra={"project_id": str(project_id), "action": "add_actor_link"},
    )
    return ActorLinkResponse.model_validate(link)


@router.get("/actor-links", response_model=list[ActorLinkResponse])
async def list_actor_links(store: QualitativeStore = Depends(get_store)):
    return [ActorLinkResponse.model_validate(link) for link in store.actor_links.value]


# --- Temporal codes -----------------------------------------------------------

@router.post(
    "/temporal-codes", response_model=TemporalCodeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_temporal_code(
    project_id: UUID,
    body: TemporalCodeCreate,
    store: QualitativeStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    enforce(check_temporal_code(store, body.code_id), settings, project_id)
    temporal = store.add_temporal_code(**body.model_dump())
    return TemporalCodeResponse.model_validate(temporal)


@router.get("/temporal-codes", response_model=list[TemporalCodeResponse])
async def list_temporal_codes(store: QualitativeStore = Depends(get_store)):
    return [TemporalCodeResponse.model_validate(t) for t in store.temporal_codes.value]


# --- Audit log ----------------------------------------------------------------

@router.get("/events", response_model=list[CodingEventResponse])
async def list_events(store: QualitativeStore = Depends(get_store)):
    """The audit log, oldest first."""
    return [CodingEventResponse.model_validate(e) for e in store.coding_events.value]
