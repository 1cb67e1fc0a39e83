"""
Record store.

Owns the live collection and the API key credential, and persists both
through a byte store under two independent keys.

INVARIANTS:
- Every mutation is followed by a synchronous persist of the whole
  collection (no buffering, no diffing).
- Corrupt or missing stored state loads as empty; it is never raised.
- Only this class mutates the collection. Readers get a tuple snapshot.
"""

import json
import logging
from collections.abc import Iterable
from typing import Any

from booker.config import settings
from booker.db.byte_store import ByteStore
from booker.models.record import Record, new_record_id, utc_now_iso
from booker.parsers.collection_import import clean_item, decode_json
from booker.parsers.fields import coerce_text, parse_finite_number

logger = logging.getLogger(__name__)


class RecordStore:
    """Single source of truth for the collection and the credential."""

    def __init__(
        self,
        byte_store: ByteStore,
        collection_key: str = settings.collection_key,
        credential_key: str = settings.api_key_storage_key,
    ) -> None:
        self._byte_store = byte_store
        self._collection_key = collection_key
        self._credential_key = credential_key
        self._records: list[Record] = []
        self._credential = ""

    @property
    def records(self) -> tuple[Record, ...]:
        """Snapshot of the collection in insertion order."""
        return tuple(self._records)

    @property
    def credential(self) -> str:
        """Stored API key, "" when there is none."""
        return self._credential

    # --- Loading ---

    def load(self) -> None:
        """Reload the collection and credential from the byte store."""
        self._records = self._load_records()
        self._credential = self._load_credential()
        logger.info(
            "record_store_loaded",
            extra={"record_count": len(self._records), "has_credential": bool(self._credential)},
        )

    def _load_records(self) -> list[Record]:
        raw = self._byte_store.get(self._collection_key)
        if not raw:
            return []

        try:
            parsed: Any = decode_json(raw)
        except (ValueError, RecursionError):
            logger.warning("stored_collection_corrupt", extra={"reason": "invalid_json"})
            return []

        if not isinstance(parsed, list):
            logger.warning("stored_collection_corrupt", extra={"reason": "not_an_array"})
            return []

        created_at = utc_now_iso()
        try:
            records = [clean_item(item, created_at) for item in parsed if isinstance(item, dict)]
        except RecursionError:
            logger.warning("stored_collection_corrupt", extra={"reason": "too_deeply_nested"})
            return []

        if len(records) != len(parsed):
            logger.warning(
                "stored_collection_corrupt",
                extra={"reason": "non_object_items", "skipped": len(parsed) - len(records)},
            )
        return records

    def _load_credential(self) -> str:
        value = self._byte_store.get(self._credential_key)
        return value if isinstance(value, str) else ""

    # --- Collection mutations ---

    def add(
        self,
        number: Any = "",
        title: Any = "",
        year: Any = "",
        notes: Any = "",
    ) -> Record | None:
        """
        Add a record built from raw form fields.

        Returns the new record, or None when the trimmed title is empty
        (the add is silently ignored). Numeric fields that are not finite
        numbers are stored as absent.
        """
        trimmed_title = coerce_text(title)
        if not trimmed_title:
            return None

        record = Record(
            id=new_record_id(),
            number=parse_finite_number(number),
            title=trimmed_title,
            year=parse_finite_number(year),
            notes=coerce_text(notes),
            created_at=utc_now_iso(),
        )
        self._records.append(record)
        self._persist_records()
        return record

    def remove(self, record_id: str) -> bool:
        """
        Remove the record with `record_id`.

        Returns False (and changes nothing) if no record matches.
        """
        remaining = [record for record in self._records if record.id != record_id]
        if len(remaining) == len(self._records):
            return False

        self._records = remaining
        self._persist_records()
        return True

    def replace_all(self, records: Iterable[Record]) -> None:
        """Swap the entire collection, then persist."""
        self._records = list(records)
        self._persist_records()

    def clear(self) -> int:
        """Remove every record. Returns how many were removed."""
        removed = len(self._records)
        self.replace_all([])
        return removed

    def _persist_records(self) -> None:
        payload = json.dumps([record.to_dict() for record in self._records], ensure_ascii=False)
        self._byte_store.set(self._collection_key, payload)
        logger.debug("records_persisted", extra={"record_count": len(self._records)})

    # --- Credential ---

    def set_credential(self, value: str) -> None:
        """Store the API key. An empty value reads back as no credential."""
        self._credential = value
        self._byte_store.set(self._credential_key, value)

    def clear_credential(self) -> None:
        """Forget the API key and remove it from storage."""
        self._credential = ""
        self._byte_store.remove(self._credential_key)
