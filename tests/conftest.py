"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models are created directly on the
test engine; ``Database.from_url`` keeps a single shared connection so
every session sees the same in-memory database.
"""

from typing import AsyncGenerator, Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.app import create_app
from src.config import Settings
from src.domain.pricing import FlatFare
from src.infrastructure.database import Database

# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

TEST_FARE = 25.0
PASSWORD = "secret-pass"


def make_settings(**overrides) -> Settings:
    values = dict(
        database_url=TEST_DB_URL,
        jwt_secret="test-secret",
        rate_limit_enabled=False,
        log_level="WARNING",
    )
    values.update(overrides)
    return Settings(**values)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Create tables, yield the store client, then drop everything."""
    db = Database.from_url(TEST_DB_URL)
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient backed by the in-memory database and a flat fare."""
    app = create_app(
        settings=make_settings(), database=database, fares=FlatFare(TEST_FARE)
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ── Helpers ───────────────────────────────────────────────────────────


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def register_customer(
    client: AsyncClient, email: str = "alice@example.com", username: str = "alice"
) -> tuple[int, dict[str, str]]:
    """Register and log in a customer; return ``(customer id, auth headers)``."""
    resp = await client.post(
        "/customer/register",
        json={
            "username": username,
            "email": email,
            "password": PASSWORD,
            "phone_no": "555-0100",
        },
    )
    assert resp.status_code == 201, resp.text
    customer_id = resp.json()["customerId"]
    resp = await client.post(
        "/customer/login", json={"email": email, "password": PASSWORD}
    )
    assert resp.status_code == 200, resp.text
    return customer_id, bearer(resp.json()["token"])


async def register_driver(
    client: AsyncClient,
    email: str = "dave@example.com",
    username: str = "dave",
    car_model: Optional[str] = "Corolla",
) -> tuple[int, dict[str, str]]:
    resp = await client.post(
        "/driver/register",
        json={
            "username": username,
            "email": email,
            "password": PASSWORD,
            "phone_no": "555-0200",
            "car_model": car_model,
        },
    )
    assert resp.status_code == 201, resp.text
    driver_id = resp.json()["driverId"]
    resp = await client.post(
        "/driver/login", json={"email": email, "password": PASSWORD}
    )
    assert resp.status_code == 200, resp.text
    return driver_id, bearer(resp.json()["token"])


async def register_admin(
    client: AsyncClient, email: str = "root@example.com"
) -> tuple[int, dict[str, str]]:
    resp = await client.post(
        "/admin/register",
        json={"username": "root", "email": email, "password": PASSWORD},
    )
    assert resp.status_code == 201, resp.text
    admin_id = resp.json()["adminId"]
    resp = await client.post("/admin/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return admin_id, bearer(resp.json()["token"])


async def driver_status(client: AsyncClient, admin: dict, driver_id: int) -> str:
    resp = await client.get("/admin/users", headers=admin)
    assert resp.status_code == 200, resp.text
    for driver in resp.json()["drivers"]:
        if driver["id"] == driver_id:
            return driver["status"]
    raise AssertionError(f"driver {driver_id} not listed")
