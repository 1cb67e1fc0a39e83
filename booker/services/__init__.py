"""Services for Booker."""

from booker.services.collection_search import (
    compare_values,
    count_label,
    filter_records,
    sort_records,
    view_records,
)
from booker.services.credential import generate_api_key
from booker.services.record_store import RecordStore
from booker.services.session import BookerSession, get_booker, open_booker
from booker.services.transfer import (
    ExportFile,
    ImportReceipt,
    build_export_envelope,
    commit_import,
    export_collection,
    export_filename,
)

__all__ = [
    "BookerSession",
    "ExportFile",
    "ImportReceipt",
    "RecordStore",
    "build_export_envelope",
    "commit_import",
    "compare_values",
    "count_label",
    "export_collection",
    "export_filename",
    "filter_records",
    "generate_api_key",
    "get_booker",
    "open_booker",
    "sort_records",
    "view_records",
]
