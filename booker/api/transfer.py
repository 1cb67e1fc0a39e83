"""
Export/import API endpoints.

Import is a two-step exchange:
1. POST /transfer/import with the file text. A usable file is held as the
   pending import and the preview (item count, confirmation prompt) is
   returned. An unusable file is rejected with 400 and nothing is held.
2. POST /transfer/import/confirm with `confirm: true` to replace the
   collection, or `confirm: false` to drop the pending import.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from booker.api.records import ConfirmRequest
from booker.parsers.collection_import import ImportStatus
from booker.services.session import BookerSession, get_booker

router = APIRouter(prefix="/transfer", tags=["transfer"])


class ImportRequest(BaseModel):
    """Request model for previewing an import."""

    text: str = Field(
        ...,
        description="Raw contents of a Booker export file or a JSON array of items",
        examples=['{"items": [{"title": "Dune", "year": 1965}]}'],
    )


class ImportPreviewResponse(BaseModel):
    """Response model for an import waiting for confirmation."""

    status: ImportStatus
    count: int = Field(..., description="Items that would replace the current list")
    dropped: int = Field(default=0, description="Items discarded as unusable")
    has_api_key: bool = Field(default=False, description="Whether the file carries an API key")
    message: str = Field(..., description="Confirmation prompt to show the user")


class ImportResultResponse(BaseModel):
    """Response model for a confirmed or cancelled import."""

    applied: bool
    records_imported: int = 0
    credential_imported: bool = False
    message: str


@router.get("/export")
async def export_collection(
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> Response:
    """
    Export the collection (and API key) as a downloadable JSON file.

    The filename follows `Booker-export-YYYY-MM-DD.json`.
    """
    export = booker.export()
    return Response(
        content=export.content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.post("/import", response_model=ImportPreviewResponse)
async def preview_import(
    request: ImportRequest,
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> ImportPreviewResponse:
    """
    Validate an import file and hold it for confirmation.

    Rejections (invalid JSON, no `items` array, no usable items) return
    400 with a descriptive message. Nothing is stored until confirmed.
    """
    plan = booker.begin_import(request.text)
    if not plan.ok:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=plan.message,
        )

    return ImportPreviewResponse(
        status=plan.status,
        count=plan.count,
        dropped=plan.dropped,
        has_api_key=plan.api_key is not None,
        message=plan.message,
    )


@router.post("/import/confirm", response_model=ImportResultResponse)
async def confirm_import(
    request: ConfirmRequest,
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> ImportResultResponse:
    """
    Confirm or cancel the pending import.

    Confirming REPLACES the current list (no merge). Returns 409 if no
    import is pending.
    """
    receipt = booker.resolve_import(request.confirm)
    return ImportResultResponse(
        applied=receipt.applied,
        records_imported=receipt.records_imported,
        credential_imported=receipt.credential_imported,
        message=receipt.message,
    )
