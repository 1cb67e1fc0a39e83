"""
Parser for Booker import files.

Accepts:
- A bare JSON array of item objects
- An export envelope: {"app": ..., "version": 1, "apiKey": ..., "items": [...]}

The result is a tagged `ImportPlan`. A READY plan holds the cleaned
candidate collection and is only applied after the user confirms
(see `booker.services.transfer.commit_import`). Every other status is a
rejection and must leave stored state untouched.
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from booker.models.record import Record, new_record_id, utc_now_iso
from booker.parsers.fields import coerce_text, parse_finite_number

logger = logging.getLogger(__name__)


class ImportStatus(str, Enum):
    """Outcome of parsing an import file."""

    READY = "ready"
    INVALID_JSON = "invalid_json"
    MISSING_ITEMS = "missing_items"
    NO_USABLE_ITEMS = "no_usable_items"


REJECTION_MESSAGES: dict[ImportStatus, str] = {
    ImportStatus.INVALID_JSON: "That file wasn't valid JSON.",
    ImportStatus.MISSING_ITEMS: "JSON didn't contain a valid 'items' array.",
    ImportStatus.NO_USABLE_ITEMS: "No usable items found in that JSON.",
}


class ImportedRecord(BaseModel):
    """
    One untrusted item from an import file.

    Validators coerce instead of rejecting: anything unusable becomes the
    field's empty value. Unknown keys are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    number: int | float | None = None
    title: str = ""
    year: int | float | None = None
    notes: str = ""
    created_at: str = Field(default="", alias="createdAt")

    @field_validator("id", "created_at", mode="before")
    @classmethod
    def _truthy_text(cls, value: Any) -> str:
        # Falsy values (None, "", 0, false) count as absent; text is kept verbatim
        if not value:
            return ""
        return value if isinstance(value, str) else coerce_text(value)

    @field_validator("number", "year", mode="before")
    @classmethod
    def _finite_number(cls, value: Any) -> int | float | None:
        return parse_finite_number(value)

    @field_validator("title", "notes", mode="before")
    @classmethod
    def _trimmed_text(cls, value: Any) -> str:
        return coerce_text(value)

    def to_record(self, created_at: str) -> Record:
        """Build a Record, filling a missing id or timestamp."""
        return Record(
            id=self.id or new_record_id(),
            number=self.number,
            title=self.title,
            year=self.year,
            notes=self.notes,
            created_at=self.created_at or created_at,
        )


@dataclass(frozen=True)
class ImportPlan:
    """
    Result of parsing an import file.

    Attributes:
        status: READY or the rejection reason
        records: Cleaned candidate collection (empty unless READY)
        api_key: Non-empty `apiKey` from an envelope object, else None
        dropped: Number of items discarded during cleaning
    """

    status: ImportStatus
    records: tuple[Record, ...] = field(default_factory=tuple)
    api_key: str | None = None
    dropped: int = 0

    @property
    def ok(self) -> bool:
        """Whether the plan can be committed."""
        return self.status == ImportStatus.READY

    @property
    def count(self) -> int:
        """Number of records that would replace the collection."""
        return len(self.records)

    @property
    def message(self) -> str:
        """User-facing description: the confirmation prompt or the rejection."""
        if self.ok:
            return (
                f"Import {self.count} item(s)? "
                "Confirming replaces your current list; cancelling does nothing."
            )
        return REJECTION_MESSAGES[self.status]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_json(text: str) -> Any:
    """
    Strict `json.loads`: the NaN, Infinity and -Infinity literals are rejected.

    Raises:
        ValueError: Text is not valid JSON
        RecursionError: Nesting is deeper than the decoder can follow
    """
    return json.loads(text, parse_constant=_reject_constant)


def extract_items(parsed: Any) -> list[Any] | None:
    """
    Find the candidate item array in parsed JSON.

    Returns the array for a bare array or an object with an `items` array,
    None for any other shape.
    """
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict) and isinstance(parsed.get("items"), list):
        return parsed["items"]
    return None


def extract_api_key(parsed: Any) -> str | None:
    """Return the envelope's `apiKey` if it is non-empty text."""
    if isinstance(parsed, dict):
        api_key = parsed.get("apiKey")
        if isinstance(api_key, str) and api_key:
            return api_key
    return None


def clean_item(raw: dict[str, Any], created_at: str) -> Record:
    """Normalize one raw item object into a Record."""
    return ImportedRecord.model_validate(raw).to_record(created_at)


def clean_items(items: Iterable[Any], now: datetime | None = None) -> list[Record]:
    """
    Clean raw items into records.

    Non-object elements are dropped, survivors are normalized, and records
    left entirely blank (no title, number, year or notes) are discarded.
    """
    created_at = utc_now_iso(now)
    cleaned: list[Record] = []
    for raw in items:
        if not isinstance(raw, dict):
            continue
        record = clean_item(raw, created_at)
        if record.is_blank():
            continue
        cleaned.append(record)
    return cleaned


def parse_import_text(text: str, now: datetime | None = None) -> ImportPlan:
    """
    Parse and validate import file text.

    Args:
        text: Raw file contents (untrusted)
        now: Timestamp for items without `createdAt` (defaults to current time)

    Returns:
        ImportPlan tagged READY with cleaned records, or with the first
        rejection reason encountered.
    """
    try:
        parsed = decode_json(text)
    except (ValueError, TypeError, RecursionError):
        logger.info("import_rejected", extra={"reason": ImportStatus.INVALID_JSON.value})
        return ImportPlan(status=ImportStatus.INVALID_JSON)

    items = extract_items(parsed)
    if items is None:
        logger.info("import_rejected", extra={"reason": ImportStatus.MISSING_ITEMS.value})
        return ImportPlan(status=ImportStatus.MISSING_ITEMS)

    try:
        records = clean_items(items, now)
    except RecursionError:
        # Nested values too deep to render as text
        logger.info("import_rejected", extra={"reason": ImportStatus.INVALID_JSON.value})
        return ImportPlan(status=ImportStatus.INVALID_JSON)

    dropped = len(items) - len(records)
    if not records:
        logger.info(
            "import_rejected",
            extra={"reason": ImportStatus.NO_USABLE_ITEMS.value, "dropped": dropped},
        )
        return ImportPlan(status=ImportStatus.NO_USABLE_ITEMS, dropped=dropped)

    logger.info(
        "import_ready",
        extra={"record_count": len(records), "dropped": dropped},
    )
    return ImportPlan(
        status=ImportStatus.READY,
        records=tuple(records),
        api_key=extract_api_key(parsed),
        dropped=dropped,
    )
