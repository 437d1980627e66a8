"""Pytest configuration and fixtures."""
import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from taskpwa.config import Settings
from taskpwa.database import build_engine, build_session_factory, close_db, init_db
from taskpwa.integrations.task_api import HttpTaskGateway
from taskpwa.main import create_app
from taskpwa.services.task_registry import TaskRegistry
from taskpwa.sync.store import InMemoryTaskStore, SQLTaskStore

from .fakes import Clock, FakeGateway

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment."""
    return Settings(
        SEED_DEMO_TASKS=False,
        VAPID_PUBLIC=None,
        VAPID_PRIVATE=None,
        LOCAL_DATABASE_URL=TEST_DATABASE_URL,
        SYNC_RETRY_ATTEMPTS=3,
        SYNC_RETRY_MIN_SECONDS=0,
        SYNC_RETRY_MAX_SECONDS=0,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def registry(clock: Clock) -> TaskRegistry:
    """Server-side registry with a deterministic clock."""
    return TaskRegistry(clock=clock)


@pytest.fixture
def app(test_settings: Settings, registry: TaskRegistry):
    return create_app(test_settings, registry=registry)


@pytest.fixture
def client(app):
    """Create a test client for the server API."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def http_gateway(app):
    """HttpTaskGateway talking to the in-process app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield HttpTaskGateway("http://testserver", client=http_client)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def memory_store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest_asyncio.fixture
async def sql_store():
    """SQLTaskStore over a fresh in-memory SQLite database."""
    engine = build_engine(TEST_DATABASE_URL)
    await init_db(engine)
    yield SQLTaskStore(build_session_factory(engine))
    await close_db(engine)
