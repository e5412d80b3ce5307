"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from laundry.core.config import Settings
from laundry.core.rate_limit import limiter
from laundry.core.rbac import UserRole
from laundry.core.security import create_access_token, get_password_hash
from laundry.db.base import Base
from laundry.db.session import enable_sqlite_foreign_keys, get_db
from laundry.main import create_app
# Import all models to ensure they're registered with Base.metadata
from laundry.models import *
from laundry.models.department import Department
from laundry.models.user import User

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_PASSWORD = "testpass123"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def other_session(db_engine) -> Generator[Session, None, None]:
    """A second session on the same database, for interleaved writers."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(database_url=TEST_DATABASE_URL, debug=True, rate_limit_enabled=False)


def _make_client(settings: Settings, db_engine, db_session: Session) -> Generator[TestClient, None, None]:
    app = create_app(settings, engine=db_engine)

    def override_get_db():
        try:
            yield db_session
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    # Disable rate limiting during tests to avoid flaky failures
    limiter.enabled = False
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(test_settings, db_engine, db_session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    yield from _make_client(test_settings, db_engine, db_session)


@pytest.fixture(scope="function")
def mock_client(db_engine, db_session) -> Generator[TestClient, None, None]:
    """Client for an app running in mock authentication mode."""
    settings = Settings(database_url=TEST_DATABASE_URL, debug=True, auth_mode="mock", mock_user_role="staff")
    yield from _make_client(settings, db_engine, db_session)


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory creating users of a given role."""

    def _make(role: UserRole = UserRole.STAFF, username: str = None, is_active: bool = True) -> User:
        user = User(
            username=username or f"{role.value}_user",
            password_hash=get_password_hash(TEST_PASSWORD),
            name=f"Test {role.value.title()}",
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


def headers_for(user: User) -> dict:
    """Bearer auth headers for a user."""
    token = create_access_token(
        data={"sub": str(user.id), "username": user.username, "role": user.role.value}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user(UserRole.ADMIN)


@pytest.fixture
def staff_user(make_user) -> User:
    return make_user(UserRole.STAFF)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return headers_for(admin_user)


@pytest.fixture
def staff_headers(staff_user: User) -> dict:
    return headers_for(staff_user)


@pytest.fixture
def department(db_session: Session) -> Department:
    """Create a test department."""
    dept = Department(name="Cardiology", location="Block B", contact_person="Dr. Rao")
    db_session.add(dept)
    db_session.commit()
    db_session.refresh(dept)
    return dept


@pytest.fixture
def task_payload(department: Department, staff_user: User) -> dict:
    """Minimal valid task creation body."""
    return {
        "description": "Bed linen, ward 3",
        "requested_by_id": staff_user.id,
        "department_id": department.id,
        "weight": 12.5,
        "due_date": (datetime.now(timezone.utc) + timedelta(days=1)).isoformat(),
    }


@pytest.fixture
def auth_for() -> Callable[[User], dict]:
    """Returns a helper building auth headers for any user."""
    return headers_for
