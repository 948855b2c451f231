import os

# Must be in place before app.core.config builds its module-level settings
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("STORAGE_BACKEND", "json")

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.services.database.json_store import JsonFileStore
from app.services.database.sql_store import SqlAlchemyStore


def make_settings(tmp_path, backend: str, **overrides) -> Settings:
    values = dict(
        STORAGE_BACKEND=backend,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        DATA_DIR=str(tmp_path / "data"),
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        RATE_LIMIT_ENABLED=False,
        SEED_DEFAULT_CATEGORIES=False,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def test_settings(tmp_path):
    return make_settings(tmp_path, "json")


@pytest.fixture(params=["sql", "json"])
def client(request, tmp_path):
    """API client against a fresh store, once per local backend."""
    app = create_app(make_settings(tmp_path, request.param))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(params=["sql", "json"])
async def store(request, tmp_path):
    if request.param == "sql":
        backend = SqlAlchemyStore(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}", auto_create=True)
    else:
        backend = JsonFileStore(str(tmp_path / "store"))
    await backend.connect()
    yield backend
    await backend.close()


@pytest.fixture
def anyio_backend():
    return "asyncio"


def signup(client, email="ana@acme-corp.com", name="Ana Lopez", password="secret123"):
    response = client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(client, email="ana@acme-corp.com", name="Ana Lopez"):
    token = signup(client, email=email, name=name)["token"]
    return {"Authorization": f"Bearer {token}"}


def create_prompt(client, headers, **overrides):
    payload = {
        "title": "Quarterly review",
        "prompt": "Analyze {company} results for {quarter}",
        "category": "Analysis & Research",
        "tags": ["analysis"],
    }
    payload.update(overrides)
    response = client.post("/api/prompts", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]
