"""Test fixtures and configuration."""
import os
from collections.abc import Generator

# Must be set before the application module builds its settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OTEL_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from verity.config import Settings, get_settings
from verity.database import Base, get_db
from verity.main import app
from verity.models import User

ADMIN_USERNAME = "root_admin"
TEST_PASSWORD = "TestPassword123!"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Get test settings."""
    return Settings(
        database_url="sqlite://",
        environment="test",
        otel_enabled=False,
        admin_usernames=[ADMIN_USERNAME],
    )


@pytest.fixture(scope="function")
def db_engine(test_settings):
    """Create a test database engine."""
    engine = create_engine(
        test_settings.database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session, test_settings) -> Generator[TestClient, None, None]:
    """Create a test client."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    def override_get_settings():
        return test_settings

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = override_get_settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session):
    """Factory inserting users directly, skipping password hashing."""

    def _make_user(username: str, is_admin: bool = False) -> User:
        user = User(username=username, hashed_password="hashed_password", is_admin=is_admin)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def login(client: TestClient):
    """Register a user through the API and return auth headers for them."""

    def _login(username: str) -> dict[str, str]:
        credentials = {"username": username, "password": TEST_PASSWORD}
        client.post("/api/auth/register", json=credentials)
        response = client.post("/api/auth/login", json=credentials)
        token = response.json()["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture
def admin_headers(login) -> dict[str, str]:
    """Auth headers for an administrator."""
    return login(ADMIN_USERNAME)


@pytest.fixture
def test_user_data() -> dict[str, str]:
    """Registration payload for a regular user."""
    return {"username": "testuser", "password": TEST_PASSWORD}
