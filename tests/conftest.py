import pytest
import pytest_asyncio
import httpx
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from workflow_gateway.config import Settings
from workflow_gateway.database import Base, create_session_factory
from workflow_gateway.main import create_app
from workflow_gateway.models import UserProject

TEST_SECRET = "test-secret"

# did -> [(project_id, role)]
MEMBERSHIPS = {
    "did:alice": [("p1", "admin")],
    "did:bob": [("p1", "member")],
    "did:carol": [("p2", "member")],
    "did:dave": [("p2", "admin")],
}


def make_token(did: str, secret: str = TEST_SECRET, expires_in: timedelta = timedelta(hours=1)) -> str:
    payload = {
        "did": did,
        "username": did.split(":")[-1],
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def auth(did: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(did)}"}


def workflow_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "workflow_name": "Summarize ticket",
        "description": "Summarizes a support ticket",
        "source": "coze",
        "template_name": "workflow",
        "http_method": "POST",
        "base_url": "https://api.coze.example/v1/workflow/run",
        "bearer_token": "pat_stored",
        "external_workflow_id": "wf-1",
        "parameters": {"a": 1},
        "headers": {"X-Team": "support"},
        "project_id": "p1",
    }
    payload.update(overrides)
    return payload


class Upstream:
    """Stand-in for the third-party workflow API behind httpx.MockTransport."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.json: Any = {"code": 0, "data": "done"}
        self.text: Optional[str] = None
        self.headers: Any = {}
        self.error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text, headers=self.headers)
        return httpx.Response(self.status_code, json=self.json, headers=self.headers)


@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite+aiosqlite://", JWT_SECRET=TEST_SECRET)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    factory = create_session_factory(engine)
    async with factory() as session:
        for did, projects in MEMBERSHIPS.items():
            for project_id, role in projects:
                session.add(UserProject(user_did=did, project_id=project_id, role=role))
        await session.commit()
    return factory


@pytest.fixture
def upstream():
    return Upstream()


@pytest_asyncio.fixture
async def outbound_client(upstream):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def client(settings, session_factory, outbound_client):
    app = create_app(settings)
    # ASGITransport does not run the lifespan, so wire the composition root by hand
    app.state.session_factory = session_factory
    app.state.http_client = outbound_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def create_workflow(client):
    async def _create(actor: str = "did:bob", **overrides: Any) -> str:
        response = await client.post("/api/workflows", json=workflow_payload(**overrides), headers=auth(actor))
        assert response.status_code == 200, response.text
        return response.json()["data"]["workflow_id"]
    return _create
