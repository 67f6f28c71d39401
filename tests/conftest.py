# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["BLOCK_OVERLAPPING_REQUESTS"] = "false"

from src.api.deps import get_db
from src.database import create_db_engine
from src.main import app
from src.models import User, UserRole
from src.models.base import Base

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_db_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session):
    """Session factory bound to the test database, for multi-session tests."""
    return TestingSessionLocal


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: the schema already exists, skip the lifespan
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory creating persisted users."""

    def _make_user(
        name: str = "Test User",
        email: str = "test@example.com",
        role: UserRole = UserRole.EMPLOYEE,
        balance: int = 25,
    ) -> User:
        user = User(name=name, email=email, role=role, vacation_balance=balance)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def test_user(make_user) -> User:
    """Create an employee with the default balance."""
    return make_user()


@pytest.fixture
def admin_user(make_user) -> User:
    """Create an admin user."""
    return make_user(
        name="Admin User",
        email="admin@example.com",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def auth_headers(test_user) -> dict[str, str]:
    """Identity headers for the employee."""
    return {"X-User-Id": str(test_user.id)}


@pytest.fixture
def admin_headers(admin_user) -> dict[str, str]:
    """Identity headers for the admin."""
    return {"X-User-Id": str(admin_user.id)}
