"""
Pytest fixtures: an in-memory store for data-layer tests and a TestClient
running the full application (lifespan included) on the same store type.
"""
import pytest
from fastapi.testclient import TestClient

import app.core.runtime as runtime
from app.client.toasts import ToastStack
from app.core.memory_redis import AsyncMemoryRedis
from app.main import app

JSON = {"Accept": "application/json"}
STREAM = {"Accept": "text/vnd.turbo-stream.html, text/html"}


@pytest.fixture
def store():
    """Fresh in-memory store installed as the runtime redis client."""
    runtime.redis_client = AsyncMemoryRedis()
    yield runtime.redis_client
    runtime.redis_client = None


@pytest.fixture
def client(monkeypatch):
    """Application client backed by the in-memory store."""
    monkeypatch.setenv("USE_FAKE_REDIS", "1")
    monkeypatch.setenv("SEED_DATA", "0")
    monkeypatch.setenv("DEFAULT_LOCALE", "es")
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_post(client):
    """Create a post through the JSON API and return its payload."""
    def _make(title="Test Post", content="Test content here", published=True, **extra):
        resp = client.post("/posts", json={"title": title, "content": content, "published": published, **extra}, headers=JSON)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make


@pytest.fixture(autouse=True)
def fresh_toast_container():
    ToastStack.reset_container()
    yield
    ToastStack.reset_container()
