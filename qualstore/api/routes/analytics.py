"""Analytics Routes — read-only views of the store's derived values.

Invariants:
    - Every response is the current value of a derived node (never recomputed here)
    - Row keys in assignments-by-row are stringified row ids

Design Decisions:
    - One endpoint per derived node: clients poll only what they render
"""

from fastapi import APIRouter, Depends

from qualstore.api.dependencies import get_store
from qualstore.core.qualitative_store import QualitativeStore
from qualstore.schemas.responses import SaturationResponse

router = APIRouter(prefix="/api/v1/projects/{project_id}/analytics", tags=["analytics"])


@router.get("/assignments-by-row", response_model=dict[str, list[str]])
async def get_assignments_by_row(store: QualitativeStore = Depends(get_store)):
    return store.assignments_by_row.value


@router.get("/cooccurrence", response_model=dict[str, dict[str, int]])
async def get_cooccurrence(store: QualitativeStore = Depends(get_store)):
    """Symmetric code x code matrix of shared rows."""
    return store.cooccurrence.value


@router.get("/saturation", response_model=SaturationResponse)
async def get_saturation(store: QualitativeStore = Depends(get_store)):
    return store.saturation.value
