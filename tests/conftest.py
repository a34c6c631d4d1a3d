"""Pytest configuration and fixtures."""

import os
import tempfile

# Point the app at the test database before anything imports comply.config
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="comply-uploads-"))
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from comply.config import get_settings  # noqa: E402
from comply.database import Base, build_engine, get_db  # noqa: E402
from comply.main import app  # noqa: E402
from comply.models.enums import Role, UploadCategory  # noqa: E402
from comply.services.auth import CredentialStore, get_password_hasher  # noqa: E402
from comply.services.storage import (  # noqa: E402
    UploadStorage,
    default_policies,
    get_upload_storage,
)


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id and email."""

    def __init__(self, *args, user_id: str | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


engine = build_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    from comply import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def upload_storage(tmp_path):
    """Upload storage rooted in a per-test directory with the real limits."""
    storage = UploadStorage(tmp_path / "uploads", default_policies(get_settings()))
    storage.ensure_directories()
    return storage


@pytest.fixture
def stored_files(upload_storage):
    """Return a callable listing every visible file under the upload root."""

    def _list(category: UploadCategory | None = None) -> list:
        policies = (
            [upload_storage.policy(category)]
            if category is not None
            else list(upload_storage.policies.values())
        )
        files = []
        for policy in policies:
            files.extend(p for p in (upload_storage.root / policy.subdir).iterdir() if p.is_file())
        return files

    return _list


@pytest.fixture(scope="function")
def client(db, upload_storage):
    """Create a test client with database and storage overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upload_storage] = lambda: upload_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Register a regular user and return auth headers with user info."""
    response = client.post(
        "/api/v1/auth/register",
        json={
            "email": "test@example.com",
            "password": "testpass123",
            "first_name": "Test",
            "last_name": "User",
        },
    )
    assert response.status_code == 201
    data = response.json()
    token = data["access_token"]

    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )


@pytest.fixture
def admin_headers(client, db):
    """Provision an admin directly in the store, log in and return auth headers."""
    CredentialStore(db).create(
        email="admin@example.com",
        password_hash=get_password_hasher().hash("adminpass123"),
        first_name="Admin",
        last_name="User",
        role=Role.ADMIN,
    )
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "admin@example.com", "password": "adminpass123"},
    )
    assert response.status_code == 200
    data = response.json()

    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )
