"""Shared fixtures: every test gets its own SQLite database file."""
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine as create_sync_engine
from sqlalchemy.ext.asyncio import create_async_engine

from counter_api.core.config import Settings
from counter_api.db.store import CounterStore
from counter_api.main import create_app


def make_store(database_url: str) -> CounterStore:
    # Generous busy timeout so concurrent writers queue instead of failing
    return CounterStore(create_async_engine(database_url, connect_args={"timeout": 30}))


@pytest.fixture
def store_factory():
    return make_store


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "counter.db"


@pytest.fixture
def database_url(db_path):
    return f"sqlite+aiosqlite:///{db_path}"


@pytest.fixture
def unreachable_url(tmp_path):
    # SQLite cannot create a file inside a directory that does not exist
    return f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'counter.db'}"


@pytest_asyncio.fixture
async def store(database_url):
    counter_store = make_store(database_url)
    await counter_store.initialize()
    yield counter_store
    await counter_store.close()


@pytest.fixture
def app(database_url):
    return create_app(store=make_store(database_url), settings=Settings(database_url=database_url))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sync_engine(db_path):
    """Out-of-band access to the same database file."""
    engine = create_sync_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()
