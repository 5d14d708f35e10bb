"""Export Route — REFI-QDA XML download.

Invariants:
    - Body is the UTF-8 encoding of QualitativeStore.export_refi_qda()
    - Always offered as an attachment named coding.refi-qda.xml
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from qualstore.api.dependencies import get_store
from qualstore.core.domain_types import REFI_QDA_FILENAME
from qualstore.core.qualitative_store import QualitativeStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects/{project_id}/export", tags=["export"])


@router.get("/refi-qda")
async def export_refi_qda(
    project_id: UUID, store: QualitativeStore = Depends(get_store),
):
    """Download the project's codes, memos and codings as REFI-QDA XML."""
    body = store.export_refi_qda_bytes()
    logger.info(
        "REFI-QDA export",
        extra={"project_id": str(project_id), "action": "export"},
    )
    return Response(
        content=body,
        media_type="application/xml; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{REFI_QDA_FILENAME}"'},
    )
