"""Service test fixtures — fresh app + async HTTP client per test.

Invariants:
    - Every test gets its own app (and so its own empty ProjectRegistry)
    - strict client: reference checks on (default settings)
    - lenient client: a separate app built with Settings(strict_references=False)

Design Decisions:
    - create_app() per test over the module-level app: no state leaks between tests
    - ASGITransport skips the lifespan; create_app sets the registry up front
"""

import pytest
from httpx import ASGITransport, AsyncClient

from qualstore.config import Settings
from qualstore.main import create_app


@pytest.fixture
def app():
    return create_app(Settings())


@pytest.fixture
async def client(app):
    """Strict-mode client (unknown references rejected)."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def lenient_app():
    return create_app(Settings(strict_references=False))


@pytest.fixture
async def lenient_client(lenient_app):
    """Client against an app built with strict_references disabled."""
    async with AsyncClient(
        transport=ASGITransport(app=lenient_app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def project_url(client):
    """Base URL of a freshly created project."""
    res = await client.post("/api/v1/projects", json={"name": "Interviews"})
    return f"/api/v1/projects/{res.json()['id']}"


@pytest.fixture
async def lenient_project_url(lenient_client):
    res = await lenient_client.post("/api/v1/projects", json={"name": "Interviews"})
    return f"/api/v1/projects/{res.json()['id']}"
