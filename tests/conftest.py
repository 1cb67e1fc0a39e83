import pytest
from httpx import ASGITransport, AsyncClient

from booker.db.byte_store import MemoryByteStore
from booker.main import app
from booker.models.record import Record
from booker.services.record_store import RecordStore
from booker.services.session import BookerSession, get_booker


def make_record(
    title: str = "Dune",
    number: int | float | None = None,
    year: int | float | None = None,
    notes: str = "",
    record_id: str | None = None,
) -> Record:
    """Build a record with a predictable id and timestamp."""
    return Record(
        id=record_id or f"id-{title or 'blank'}-{number}",
        number=number,
        title=title,
        year=year,
        notes=notes,
        created_at="2024-01-01T00:00:00.000Z",
    )


@pytest.fixture
def byte_store() -> MemoryByteStore:
    return MemoryByteStore()


@pytest.fixture
def store(byte_store: MemoryByteStore) -> RecordStore:
    return RecordStore(byte_store)


@pytest.fixture
def booker(store: RecordStore) -> BookerSession:
    return BookerSession.open(store)


@pytest.fixture
async def client(booker: BookerSession):
    """Provide an async test client bound to a memory-backed session."""
    app.dependency_overrides[get_booker] = lambda: booker

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
