"""
Shared test fixtures.

Uses an in-memory SQLite database for fast testing.
JSONB columns are compiled as JSON for SQLite compatibility, and the
connection is set up so SAVEPOINTs behave (the importer relies on them).
For integration tests against PostgreSQL, point DATABASE_URL at a server.
"""

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

from billtrack.core.database import Base, get_db
from billtrack.main import app
from billtrack.models.core import Property, Ward
from billtrack.models.ledger import UploadRecord  # noqa: F401
from billtrack.services.properties import add_property
from billtrack.services.wards import resolve_ward


# ─── SQLite compatibility: JSONB → JSON, UUID → CHAR(36) ──────

@compiles(JSONB, "sqlite")
def compile_jsonb_sqlite(type_, compiler, **kw):
    return "JSON"


@compiles(UUID, "sqlite")
def compile_uuid_sqlite(type_, compiler, **kw):
    return "CHAR(36)"


# Use SQLite async for tests (aiosqlite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
test_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@event.listens_for(engine.sync_engine, "connect")
def _sqlite_disable_implicit_begin(dbapi_connection, connection_record):
    # aiosqlite's own BEGIN handling breaks SAVEPOINT; emit BEGIN ourselves
    dbapi_connection.isolation_level = None


@event.listens_for(engine.sync_engine, "begin")
def _sqlite_begin(conn):
    conn.exec_driver_sql("BEGIN")


ADMIN_HEADERS = {"X-User-Name": "Asha Admin", "X-User-Role": "admin"}
STAFF_HEADERS = {"X-User-Name": "Sunil Staff", "X-User-Role": "staff"}
COMMISSIONER_HEADERS = {"X-User-Name": "Kiran Commissioner", "X-User-Role": "commissioner"}


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session."""
    async with test_session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide a test HTTP client with database override."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ─── Helper factories ─────────────────────────────────────────

@pytest_asyncio.fixture
async def make_ward(db_session: AsyncSession):
    """Factory fixture for creating wards."""
    async def _make(
        corporate_name: str = "Nagar Nigam",
        ward_name: str = "Ward 1",
        mohallas: list[str] | None = None,
    ) -> Ward:
        ward = Ward(
            corporate_name=corporate_name,
            ward_name=ward_name,
            mohallas=mohallas if mohallas is not None else ["Chowk"],
        )
        db_session.add(ward)
        await db_session.flush()
        await db_session.refresh(ward)
        return ward
    return _make


@pytest_asyncio.fixture
async def make_property(db_session: AsyncSession):
    """Factory fixture for creating Pending properties."""
    async def _make(
        property_id: str,
        ward: Ward | None = None,
        owner_name: str = "Ram Sharma",
        address: str = "12 Chowk",
        mohalla: str = "Chowk",
    ) -> Property:
        if ward is None:
            ward, _created = await resolve_ward(
                db_session, "Nagar Nigam", "Ward 1", mohalla
            )
        prop = await add_property(
            db_session,
            property_id=property_id,
            ward=ward,
            mohalla=mohalla,
            owner_name=owner_name,
            address=address,
        )
        await db_session.refresh(prop)
        return prop
    return _make
