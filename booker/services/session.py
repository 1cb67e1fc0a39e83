"""
Booker session: the user-command layer.

A session owns the record store plus the transient UI state (search
text, sort spec, pending import, status line). Each command runs to
completion before the next; the HTTP handlers and the CLI job are thin
adapters over these methods.
"""

import logging
from functools import lru_cache

from booker.db.byte_store import SqlByteStore
from booker.db.database import session_factory
from booker.models.failure import CredentialUnavailableError, FailureKind, KnownError
from booker.models.record import Record, SortSpec
from booker.parsers.collection_import import ImportPlan, parse_import_text
from booker.services.collection_search import count_label, view_records
from booker.services.credential import generate_api_key
from booker.services.record_store import RecordStore
from booker.services.transfer import ExportFile, ImportReceipt, commit_import, export_collection

logger = logging.getLogger(__name__)


class BookerSession:
    """Commands a user can issue against one collection."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self.search_text = ""
        self.sort = SortSpec()
        self.status = ""
        self.pending_import: ImportPlan | None = None

    @classmethod
    def open(cls, store: RecordStore) -> "BookerSession":
        """Load `store` and start a session on it."""
        store.load()
        session = cls(store)
        if store.credential:
            session.status = "Loaded existing key."
        return session

    # --- View ---

    def visible_records(self) -> list[Record]:
        """Current view: the collection filtered by search text and sorted."""
        return view_records(self.store.records, self.search_text, self.sort)

    def count_label(self) -> str:
        return count_label(len(self.visible_records()))

    def set_search_text(self, text: str) -> None:
        self.search_text = text or ""

    def toggle_sort(self, column: str) -> SortSpec:
        """Sort by `column`, flipping direction if it is already the sort column."""
        self.sort = self.sort.toggled(column)
        return self.sort

    # --- Records ---

    def add_record(
        self,
        number: object = "",
        title: object = "",
        year: object = "",
        notes: object = "",
    ) -> Record | None:
        """Add a record; returns None when the title is blank."""
        return self.store.add(number=number, title=title, year=year, notes=notes)

    def delete_record(self, record_id: str) -> bool:
        return self.store.remove(record_id)

    def clear_all(self, confirmed: bool) -> int:
        """
        Remove every record once the user confirms.

        Returns the number of records removed (0 when not confirmed).
        """
        if not confirmed:
            return 0
        removed = self.store.clear()
        self.status = ""
        logger.info("collection_cleared", extra={"removed": removed})
        return removed

    # --- Export / import ---

    def export(self) -> ExportFile:
        return export_collection(self.store.records, self.store.credential)

    def begin_import(self, text: str) -> ImportPlan:
        """
        Parse an import file and hold it for confirmation.

        A READY plan becomes the pending import (replacing any earlier one).
        A rejected plan is returned with its message and nothing is pending.
        """
        self.pending_import = None
        plan = parse_import_text(text)
        if plan.ok:
            self.pending_import = plan
        else:
            self.status = plan.message
        return plan

    def resolve_import(self, confirmed: bool) -> ImportReceipt:
        """
        Confirm or cancel the pending import.

        Raises:
            KnownError: If no import is waiting for confirmation
        """
        plan = self.pending_import
        if plan is None:
            raise KnownError(
                kind=FailureKind.NOT_FOUND,
                message="There is no import waiting for confirmation.",
                suggestion="Upload an import file first.",
                status_code=409,
            )

        self.pending_import = None
        receipt = commit_import(self.store, plan, confirmed)
        if receipt.applied:
            self.status = receipt.message
        return receipt

    # --- Credential ---

    def generate_credential(self) -> str:
        """
        Generate, store and return a new API key.

        Raises:
            CredentialUnavailableError: If secure randomness is unavailable
        """
        try:
            api_key = generate_api_key()
        except CredentialUnavailableError:
            self.status = "Failed to generate key."
            raise

        self.store.set_credential(api_key)
        self.status = "Generated key. Save it somewhere safe."
        return api_key

    def clear_credential(self, confirmed: bool) -> bool:
        """Forget the stored API key once the user confirms."""
        if not confirmed:
            return False
        self.store.clear_credential()
        self.status = "Cleared key."
        return True

    def copy_credential(self) -> str | None:
        """
        Hand out the stored key for manual copying.

        There is no clipboard here, so the key text itself is the copy
        affordance. Returns None when no key is stored.
        """
        api_key = self.store.credential
        if not api_key:
            return None
        self.status = "Copied key. Save it somewhere safe."
        return api_key


@lru_cache(maxsize=1)
def open_booker() -> BookerSession:
    """Open the process-wide session backed by the configured database."""
    return BookerSession.open(RecordStore(SqlByteStore(session_factory)))


async def get_booker() -> BookerSession:
    """
    FastAPI dependency for the process-wide session.

    Async so it runs on the event loop thread and the first call opens
    exactly one session. Tests override it with a memory-backed session.
    """
    return open_booker()
