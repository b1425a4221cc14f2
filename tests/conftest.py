import os

# Force the SQLite test database before anything imports viewgate.db
os.environ["DATABASE_URL"] = "sqlite:///./test_viewgate.db"
os.environ["REDIS_URL"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from viewgate.db import Base, SessionLocal, engine  # noqa: E402
from viewgate.dependencies.settings import get_cache_service, get_catalog_client  # noqa: E402
from viewgate.main import app  # noqa: E402
from viewgate.services.redis_cache_service import RedisCacheService  # noqa: E402


@pytest.fixture
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(database):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def api_client(database):
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def override_catalog():
    """Install a catalog client (and a cache, disabled unless given) for the API under test."""

    def _override(client, cache: RedisCacheService | None = None):
        cache = cache or RedisCacheService(None)
        app.dependency_overrides[get_catalog_client] = lambda: client
        app.dependency_overrides[get_cache_service] = lambda: cache
        return client

    yield _override
    app.dependency_overrides.clear()
