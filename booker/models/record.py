"""
Record and sort models.

A Record is one catalogued book. Records are immutable once built; the
record store replaces them wholesale rather than editing in place.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from booker.config import settings

# Wire name -> attribute name for fields whose names differ
_FIELD_ALIASES = {"createdAt": "created_at"}


def utc_now_iso(now: datetime | None = None) -> str:
    """Timestamp text in UTC with millisecond precision, e.g. 2024-05-01T09:30:00.000Z."""
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_record_id() -> str:
    """Fresh opaque record identifier."""
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class Record:
    """
    One book in the collection.

    Attributes:
        id: Opaque unique identifier, never empty
        title: Trimmed title text
        number: Optional rank/ordinal, None when absent (distinct from 0)
        year: Optional year, None when absent
        notes: Trimmed free text, "" when absent
        created_at: Creation timestamp text, preserved verbatim on import
    """

    id: str
    title: str
    number: int | float | None = None
    year: int | float | None = None
    notes: str = ""
    created_at: str = ""

    def get(self, key: str) -> Any:
        """
        Look up a field by its wire or attribute name.

        Unknown keys yield None so that sorting by an unknown column
        treats every record as missing that value.
        """
        attr = _FIELD_ALIASES.get(key, key)
        if attr not in self.__slots__:
            return None
        return getattr(self, attr)

    def is_blank(self) -> bool:
        """True when the record carries no title, number, year or notes."""
        return not self.title and self.number is None and self.year is None and not self.notes

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the persisted/exported field names."""
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "year": self.year,
            "notes": self.notes,
            "createdAt": self.created_at,
        }


class SortDirection(str, Enum):
    """Sort direction for the collection view."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class SortSpec:
    """Column and direction the view is sorted by. Transient, never persisted."""

    key: str = settings.default_sort_key
    direction: SortDirection = SortDirection.ASC

    def toggled(self, column: str) -> "SortSpec":
        """
        Sort spec after the user selects `column`.

        Selecting the current column flips the direction; selecting a
        different column sorts by it ascending.
        """
        if column == self.key:
            flipped = SortDirection.DESC if self.direction == SortDirection.ASC else SortDirection.ASC
            return SortSpec(key=column, direction=flipped)
        return SortSpec(key=column, direction=SortDirection.ASC)
