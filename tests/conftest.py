"""
Shared pytest fixtures for Tenant Portal tests.

Provides:
- Isolated SQLite database per test
- FastAPI TestClient with dependency overrides
- Tenant / admin fixtures and a signed-in client
- KMS cipher override and rate limiter reset
"""

import os
import tempfile

# Settings are read once at import; point everything at a scratch area first
_TEST_HOME = tempfile.mkdtemp(prefix="tenant-portal-tests-")
os.environ["PORTAL_DATABASE_URL"] = f"sqlite:///{_TEST_HOME}/portal.db"
os.environ["PORTAL_CONFIG_PATH"] = os.path.join(_TEST_HOME, "config.yaml")
os.environ["PORTAL_AUTO_SEED"] = "false"
os.environ["PORTAL_LOG_TO_FILE"] = "false"
os.environ["PORTAL_SECRET_KEY"] = "test-session-signing-key-0123456789abcdef"
os.environ["PORTAL_INGEST_KEY"] = "test-ingest-key-0001"
os.environ.pop("PORTAL_KMS_MASTER_KEY", None)

import pytest
from typing import Generator
from cryptography.fernet import Fernet
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from portal.database import Base, get_db
from portal.main import app
from portal.middleware.rate_limit import reset_rate_limits
from portal.models import AdminUser, Tenant
from portal.services.kms import EnvelopeCipher, get_cipher

from tests.fixtures.data import DEFAULT_EMAIL, DEFAULT_PASSWORD
from tests.fixtures.factories import create_admin_user, create_tenant

TEST_INGEST_KEY = os.environ["PORTAL_INGEST_KEY"]
TEST_SECRET_KEY = os.environ["PORTAL_SECRET_KEY"]


# ============================================
# Database Fixtures
# ============================================


@pytest.fixture(scope="function")
def test_engine(tmp_path):
    """
    Create an isolated SQLite database engine for each test.

    Uses a file-based database in tmp_path to avoid connection isolation
    issues with in-memory SQLite.
    """
    db_path = tmp_path / "test.db"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db(test_engine) -> Generator[Session, None, None]:
    """
    Create database tables and provide a session.

    Tables are created before and dropped after each test.
    """
    from portal.models import activity, admin_user, conversation, tenant  # noqa: F401

    Base.metadata.create_all(bind=test_engine)

    TestingSessionLocal = sessionmaker(bind=test_engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(autouse=True)
def reset_limits():
    """Every test starts with empty login counters and slowapi storage"""
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture(scope="function")
def client(test_db: Session) -> Generator[TestClient, None, None]:
    """
    FastAPI TestClient with database dependency overridden.

    Uses the test_db session instead of the configured database.
    """

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================
# Tenant / Admin Fixtures
# ============================================


@pytest.fixture
def default_tenant(test_db: Session) -> Tenant:
    """The seeded "default" tenant"""
    return create_tenant(test_db, tenant_id="default", name="Default Tenant")


@pytest.fixture
def default_admin(test_db: Session, default_tenant: Tenant) -> AdminUser:
    """admin@example.com / admin123 on the default tenant"""
    return create_admin_user(test_db, default_tenant, email=DEFAULT_EMAIL, password=DEFAULT_PASSWORD)


@pytest.fixture
def other_tenant(test_db: Session) -> Tenant:
    return create_tenant(test_db, tenant_id="beta", name="Beta Corp", plan="premium")


@pytest.fixture
def logged_in_client(client: TestClient, default_admin: AdminUser) -> TestClient:
    """Client holding a session cookie for admin@example.com on "default" """
    response = client.post("/api/login", json={"email": DEFAULT_EMAIL, "password": DEFAULT_PASSWORD})
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def ingest_headers() -> dict[str, str]:
    """Headers carrying the shared ingest key"""
    return {"X-Customer-Key": TEST_INGEST_KEY}


# ============================================
# KMS Fixtures
# ============================================


@pytest.fixture
def cipher() -> EnvelopeCipher:
    return EnvelopeCipher(Fernet.generate_key().decode())


@pytest.fixture
def kms_client(client: TestClient, cipher: EnvelopeCipher) -> TestClient:
    """Client whose app has a KMS master key configured"""
    app.dependency_overrides[get_cipher] = lambda: cipher
    return client
