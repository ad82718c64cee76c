"""Integration-test fixtures.

Needs PostgreSQL with `alembic upgrade head` applied (seed data included).
Run with: pytest -m integration (modules mark themselves with pytestmark).

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool stays valid across the session.
"""

import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _login(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    resp = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def staff_headers(client: AsyncClient) -> dict[str, str]:
    """Seeded employee account (migration 005)."""
    return await _login(client, "empleado@libreria.local", "Empleado1234")


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client_headers(client: AsyncClient) -> dict[str, str]:
    """A fresh client registered for this run."""
    email = f"cliente_{uuid.uuid4().hex[:8]}@example.com"
    resp = await client.post(
        "/api/v1/auth/register",
        json={"name": "Cliente Prueba", "email": email, "password": "Cliente123"},
    )
    assert resp.status_code == 201, resp.text
    return await _login(client, email, "Cliente123")
