from booker.db.byte_store import ByteStore, MemoryByteStore, SqlByteStore
from booker.db.database import get_session, init_db
from booker.db.operations import delete_entry, get_entry, put_entry

__all__ = [
    "ByteStore",
    "MemoryByteStore",
    "SqlByteStore",
    "delete_entry",
    "get_entry",
    "get_session",
    "init_db",
    "put_entry",
]
