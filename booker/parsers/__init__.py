from booker.parsers.collection_import import (
    ImportedRecord,
    ImportPlan,
    ImportStatus,
    clean_items,
    decode_json,
    parse_import_text,
)
from booker.parsers.fields import coerce_text, format_number, parse_finite_number

__all__ = [
    "ImportPlan",
    "ImportStatus",
    "ImportedRecord",
    "clean_items",
    "coerce_text",
    "decode_json",
    "format_number",
    "parse_finite_number",
    "parse_import_text",
]
