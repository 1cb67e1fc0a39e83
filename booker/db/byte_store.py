"""
String-keyed byte stores.

The record store only needs get/set/remove with synchronous semantics.
`MemoryByteStore` backs tests and throwaway sessions; `SqlByteStore`
persists through SQLAlchemy.
"""

import logging
from typing import Protocol

from sqlalchemy.orm import Session, sessionmaker

from booker.db.operations import delete_entry, get_entry, put_entry

logger = logging.getLogger(__name__)


class ByteStore(Protocol):
    """Synchronous string-keyed storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryByteStore:
    """Byte store held in a dict. Contents are lost with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class SqlByteStore:
    """
    Byte store persisted in the `kv_entries` table.

    Each call runs in its own transaction and commits before returning.
    """

    def __init__(self, factory: sessionmaker[Session]) -> None:
        self._factory = factory

    def get(self, key: str) -> str | None:
        with self._factory() as session:
            entry = get_entry(session, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with self._factory() as session, session.begin():
            put_entry(session, key, value)
        logger.debug("byte_store_write", extra={"key": key, "size": len(value)})

    def remove(self, key: str) -> None:
        with self._factory() as session, session.begin():
            removed = delete_entry(session, key)
        logger.debug("byte_store_remove", extra={"key": key, "removed": removed})
