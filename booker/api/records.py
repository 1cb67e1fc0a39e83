"""
Record API endpoints.

Add, delete and clear records, and read or adjust the current view
(search text and sort column).

Handlers are `async def` on purpose: they run on the event loop thread,
so commands against the session never interleave.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from booker.models.record import Record, SortDirection
from booker.services.session import BookerSession, get_booker

router = APIRouter(tags=["records"])

# Raw form values: text from an input box, or a JSON number
FormValue = str | float | None


class RecordResponse(BaseModel):
    """A single record."""

    id: str
    number: int | float | None = None
    title: str
    year: int | float | None = None
    notes: str = ""
    created_at: str

    @classmethod
    def from_record(cls, record: Record) -> "RecordResponse":
        return cls(
            id=record.id,
            number=record.number,
            title=record.title,
            year=record.year,
            notes=record.notes,
            created_at=record.created_at,
        )


class ViewResponse(BaseModel):
    """The filtered, sorted collection as currently displayed."""

    records: list[RecordResponse] = Field(default_factory=list)
    count: int = 0
    label: str = Field(default="0 books", description="Display label, e.g. '3 books'")
    search: str = ""
    sort_key: str
    sort_direction: SortDirection
    total: int = Field(default=0, description="Records in the collection before filtering")


class AddRecordRequest(BaseModel):
    """Request model for adding a record. Fields arrive as raw form values."""

    number: FormValue = Field(default="", examples=["1"])
    title: FormValue = Field(default="", examples=["Dune"])
    year: FormValue = Field(default="", examples=["1965"])
    notes: FormValue = Field(default="", examples=["Reread"])


class AddRecordResponse(BaseModel):
    """Response model for add. A blank title is ignored, not an error."""

    added: bool
    record: RecordResponse | None = None


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    record_id: str
    deleted: bool


class ConfirmRequest(BaseModel):
    """Explicit yes/no decision for a destructive command."""

    confirm: bool = Field(
        ...,
        description="True to proceed. False leaves everything untouched.",
    )


class ClearResponse(BaseModel):
    """Response model for clearing the collection."""

    cleared: bool
    removed: int = 0


class SearchRequest(BaseModel):
    """Request model for updating the search text."""

    text: str = Field(default="", examples=["dune"])


def build_view(booker: BookerSession) -> ViewResponse:
    """Snapshot the session's current view."""
    records = booker.visible_records()
    return ViewResponse(
        records=[RecordResponse.from_record(record) for record in records],
        count=len(records),
        label=booker.count_label(),
        search=booker.search_text,
        sort_key=booker.sort.key,
        sort_direction=booker.sort.direction,
        total=len(booker.store.records),
    )


@router.get("/records", response_model=ViewResponse)
async def list_records(
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> ViewResponse:
    """Get the collection filtered by the search text and sorted by the sort column."""
    return build_view(booker)


@router.post("/records", response_model=AddRecordResponse)
async def add_record(
    request: AddRecordRequest,
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> AddRecordResponse:
    """
    Add a record.

    A blank (or whitespace-only) title means nothing is added. Number and
    year values that are not finite numbers are stored as absent.
    """
    record = booker.add_record(
        number=request.number,
        title=request.title,
        year=request.year,
        notes=request.notes,
    )
    if record is None:
        return AddRecordResponse(added=False)
    return AddRecordResponse(added=True, record=RecordResponse.from_record(record))


@router.delete("/records/{record_id}", response_model=DeleteResponse)
async def delete_record(
    record_id: str,
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> DeleteResponse:
    """Delete a record. Deleting an unknown id is a no-op."""
    return DeleteResponse(record_id=record_id, deleted=booker.delete_record(record_id))


@router.post("/records/clear", response_model=ClearResponse)
async def clear_records(
    request: ConfirmRequest,
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> ClearResponse:
    """
    Clear ALL records. This cannot be undone.

    Requires `confirm: true`; anything else leaves the collection as it is.
    """
    removed = booker.clear_all(request.confirm)
    return ClearResponse(cleared=request.confirm, removed=removed)


@router.put("/view/search", response_model=ViewResponse)
async def set_search(
    request: SearchRequest,
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> ViewResponse:
    """Set the search text and return the updated view."""
    booker.set_search_text(request.text)
    return build_view(booker)


@router.post("/view/sort/{column}", response_model=ViewResponse)
async def toggle_sort(
    column: str,
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> ViewResponse:
    """
    Sort by a column.

    Selecting the current sort column flips its direction; a new column
    sorts ascending.
    """
    booker.toggle_sort(column)
    return build_view(booker)
