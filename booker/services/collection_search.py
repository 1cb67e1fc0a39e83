"""
Collection search service.

Produces the filtered, sorted view of the collection shown to the user.

Everything here is pure: the same (records, search text, sort spec)
always yields the same list, and the input collection is never modified.

Sorting rules:
- Missing values (None or "") sort before present ones; descending
  reverses the comparison, so they end up last
- Two values that both read as finite numbers compare numerically
- Anything else compares as text, ignoring case and accents, with runs
  of digits compared by value ("Vol 2" < "Vol 10")
"""

import re
import unicodedata
from collections.abc import Sequence
from functools import cmp_to_key
from typing import Any

from booker.models.record import Record, SortDirection, SortSpec
from booker.parsers.fields import coerce_text, format_number, parse_finite_number

_DIGIT_RUN = re.compile(r"(\d+)")


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _collation_key(text: str) -> list[str | int]:
    """
    Key for natural, case- and accent-insensitive text ordering.

    Splitting on digit runs always yields text at even positions and
    digits at odd positions, so two keys compare element by element
    without mixing types.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    parts = _DIGIT_RUN.split(base)
    return [int(part) if index % 2 else part for index, part in enumerate(parts)]


def compare_text(a: str, b: str) -> int:
    """Natural text comparison: negative, zero or positive."""
    key_a, key_b = _collation_key(a), _collation_key(b)
    return (key_a > key_b) - (key_a < key_b)


def compare_values(a: Any, b: Any) -> int:
    """
    Compare two field values for sorting.

    Returns a negative number if `a` sorts first, positive if `b` does,
    and 0 when they are equivalent (including both missing).
    """
    if a == b:
        return 0
    if _is_missing(a):
        return -1
    if _is_missing(b):
        return 1

    a_number = parse_finite_number(a)
    b_number = parse_finite_number(b)
    if a_number is not None and b_number is not None:
        return (a_number > b_number) - (a_number < b_number)

    return compare_text(coerce_text(a), coerce_text(b))


def _normalize_query(text: str | None) -> str:
    return (text or "").strip().casefold()


def search_haystack(record: Record) -> str:
    """Text a search query is matched against: number, title, year and notes."""
    return (
        f"{format_number(record.number)} {record.title} "
        f"{format_number(record.year)} {record.notes}"
    ).casefold()


def filter_records(records: Sequence[Record], search_text: str | None) -> list[Record]:
    """
    Keep records whose haystack contains the search text.

    Matching is a case-insensitive substring test. Blank search text
    keeps everything.
    """
    query = _normalize_query(search_text)
    if not query:
        return list(records)
    return [record for record in records if query in search_haystack(record)]


def sort_records(records: Sequence[Record], sort: SortSpec) -> list[Record]:
    """Stable sort by `sort.key` in `sort.direction`."""
    sign = 1 if sort.direction == SortDirection.ASC else -1

    def compare(x: Record, y: Record) -> int:
        return sign * compare_values(x.get(sort.key), y.get(sort.key))

    return sorted(records, key=cmp_to_key(compare))


def view_records(
    records: Sequence[Record],
    search_text: str | None = "",
    sort: SortSpec | None = None,
) -> list[Record]:
    """
    Filtered, sorted view of a collection.

    Args:
        records: Collection snapshot (not modified)
        search_text: Free-text filter, blank for no filtering
        sort: Sort column and direction, defaults to number ascending

    Returns:
        New list of the matching records in display order.

    Examples:
        >>> view_records(store.records, "dune")
        >>> view_records(store.records, "", SortSpec("title", SortDirection.DESC))
    """
    return sort_records(filter_records(records, search_text), sort or SortSpec())


def count_label(count: int) -> str:
    """Display label for the number of visible books."""
    return f"{count} book{'' if count == 1 else 's'}"
