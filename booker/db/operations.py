"""
Database CRUD operations.

Key/value access used by `SqlByteStore`. Callers own the transaction.
"""

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from booker.models.db import KeyValueEntryDB


def get_entry(session: Session, key: str) -> KeyValueEntryDB | None:
    """
    Get a stored entry by key.

    Returns None if nothing is stored under the key.
    """
    result = session.execute(select(KeyValueEntryDB).where(KeyValueEntryDB.key == key))
    return result.scalar_one_or_none()


def put_entry(session: Session, key: str, value: str) -> KeyValueEntryDB:
    """
    Store a value under a key, replacing any previous value.
    """
    entry = get_entry(session, key)
    if entry is None:
        entry = KeyValueEntryDB(key=key, value=value)
        session.add(entry)
    else:
        entry.value = value

    session.flush()
    return entry


def delete_entry(session: Session, key: str) -> bool:
    """
    Delete the entry under a key.

    Returns True if deleted, False if not found.
    """
    result = session.execute(delete(KeyValueEntryDB).where(KeyValueEntryDB.key == key))
    return bool(result.rowcount)
