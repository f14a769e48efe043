import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import pos_pricing.db as db
import pos_pricing.config as config_mod
from pos_pricing.catalog import CachedCatalog, SqlCatalog
from pos_pricing.main import app
from pos_pricing.models import Base
from pos_pricing.pricing import PricingEngine
from pos_pricing.seed_demo import seed_demo_catalog
from pos_pricing.services import pricing_service

# Test admin credentials
TEST_ADMIN_USERNAME = "testadmin"
TEST_ADMIN_PASSWORD = "testpassword123"


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with the catalog tables.

    Uses StaticPool so all connections share the same in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory over the in-memory DB, seeded with the demo catalog."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    session = TestingSessionLocal()
    seed_demo_catalog(session)
    session.close()

    return TestingSessionLocal


@pytest.fixture
def sql_catalog(session_factory):
    return SqlCatalog(session_factory)


@pytest.fixture
def pricing_engine(sql_catalog):
    return PricingEngine(sql_catalog)


@pytest.fixture
def client(db_engine, session_factory, monkeypatch):
    """Shared FastAPI TestClient backed by the seeded in-memory catalog.

    Sets up test admin credentials for authentication.
    """
    monkeypatch.setattr(config_mod, "ADMIN_USERNAME", TEST_ADMIN_USERNAME)
    monkeypatch.setattr(config_mod, "ADMIN_PASSWORD", TEST_ADMIN_PASSWORD)

    # Patch the db module used by the app
    monkeypatch.setattr(db, "engine", db_engine)
    monkeypatch.setattr(db, "SessionLocal", session_factory)

    catalog = CachedCatalog(SqlCatalog(session_factory))
    engine = PricingEngine(catalog)
    app.dependency_overrides[pricing_service.get_catalog] = lambda: catalog
    app.dependency_overrides[pricing_service.get_pricing_engine] = lambda: engine

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    pricing_service.reset()


@pytest.fixture
def admin_auth():
    """Returns HTTP Basic Auth tuple for admin endpoints."""
    return (TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)
