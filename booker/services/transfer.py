"""
Collection export and import commit.

Export serializes the collection and credential into a versioned envelope.
Import commit applies a READY `ImportPlan` once the user has decided.

INVARIANT: An import either replaces the whole collection or changes
nothing. It never merges, and a rejected or cancelled plan never touches
the credential.
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from booker.config import EXPORT_FILENAME_TEMPLATE, EXPORT_VERSION, settings
from booker.models.failure import FailureKind, KnownError
from booker.models.record import Record, utc_now_iso
from booker.parsers.collection_import import ImportPlan
from booker.services.record_store import RecordStore

logger = logging.getLogger(__name__)

STATUS_KEY_IMPORTED = "Imported API key from JSON."
STATUS_NO_KEY = "Imported books. (No API key in JSON.)"
STATUS_CANCELLED = "Import cancelled. Nothing was changed."


@dataclass(frozen=True)
class ExportFile:
    """A rendered export: suggested filename and JSON text."""

    filename: str
    content: str


@dataclass(frozen=True)
class ImportReceipt:
    """What a committed (or cancelled) import did."""

    applied: bool
    records_imported: int
    credential_imported: bool
    message: str


def build_export_envelope(
    records: Sequence[Record],
    credential: str,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the export envelope for a collection snapshot."""
    return {
        "app": settings.app_name,
        "version": EXPORT_VERSION,
        "exportedAt": utc_now_iso(now),
        "apiKey": credential or "",
        "items": [record.to_dict() for record in records],
    }


def export_filename(now: datetime | None = None) -> str:
    """Suggested export filename, e.g. Booker-export-2024-05-01.json."""
    moment = (now or datetime.now(UTC)).astimezone(UTC)
    return EXPORT_FILENAME_TEMPLATE.format(app=settings.app_name, date=moment.date().isoformat())


def export_collection(
    records: Sequence[Record],
    credential: str,
    now: datetime | None = None,
) -> ExportFile:
    """Render the collection as pretty-printed envelope JSON."""
    moment = now or datetime.now(UTC)
    envelope = build_export_envelope(records, credential, moment)
    content = json.dumps(envelope, indent=2, ensure_ascii=False)

    logger.info("collection_exported", extra={"record_count": len(records)})
    return ExportFile(filename=export_filename(moment), content=content)


def commit_import(store: RecordStore, plan: ImportPlan, confirmed: bool) -> ImportReceipt:
    """
    Apply an import plan after the user's decision.

    Args:
        store: Record store to replace
        plan: A READY plan from `parse_import_text`
        confirmed: The user's answer to `plan.message`

    Returns:
        ImportReceipt describing the change (or lack of one).

    Raises:
        KnownError: If the plan was rejected during parsing
    """
    if not plan.ok:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message=plan.message,
            detail=f"Import plan status is {plan.status.value}",
            suggestion="Choose a Booker export file or a JSON array of items.",
        )

    if not confirmed:
        logger.info("import_cancelled", extra={"record_count": plan.count})
        return ImportReceipt(
            applied=False,
            records_imported=0,
            credential_imported=False,
            message=STATUS_CANCELLED,
        )

    store.replace_all(plan.records)

    credential_imported = plan.api_key is not None
    if plan.api_key is not None:
        store.set_credential(plan.api_key)

    logger.info(
        "import_committed",
        extra={"record_count": plan.count, "credential_imported": credential_imported},
    )
    return ImportReceipt(
        applied=True,
        records_imported=plan.count,
        credential_imported=credential_imported,
        message=STATUS_KEY_IMPORTED if credential_imported else STATUS_NO_KEY,
    )
