import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from tinylink.main import app
from tinylink.db.Models.models import Base
from tinylink.db.Connection import database
from tinylink.db.repository import SqlLinkStore


@pytest.fixture
def store():
    """A fresh in-memory SQL store for each test."""
    engine = database.create_sql_engine("sqlite://", poolclass=StaticPool)
    link_store = SqlLinkStore(engine)
    link_store.initialize()
    try:
        yield link_store
    finally:
        Base.metadata.drop_all(bind=engine)
        link_store.close()


@pytest.fixture
def client(store):
    """Creates a test client with the record store swapped for the test store."""
    app.dependency_overrides[database.get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_urls():
    """Provides sample URLs for testing."""
    return [
        "https://example.com/test1",
        "https://google.com/search?q=test",
        "https://github.com/user/repo",
    ]
