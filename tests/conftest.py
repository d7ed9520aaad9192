"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, tables rebuilt for every test
- Two users (test_user, other_user) for cross-tenant checks
- JWT token minting for authenticated tests
- HTTPX AsyncClient with proper headers
"""
import os
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ["ENV"] = "dev"

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

from gifter.main import app
from gifter.core.deps import get_db, COOKIE_NAME
from gifter.core.rate_limit import limiter
from gifter.core.security import create_session_token, hash_password
from gifter.db.base import Base
from gifter.db.models import User
from gifter.db.session import engine, SessionLocal

TEST_PASSWORD = "correct-horse"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    App code commits freely; isolation comes from recreating every table.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield


def _make_user(db: Session, username: str) -> User:
    user = User(
        id=uuid.uuid4(),
        email=f"{username.lower()}-{uuid.uuid4().hex[:8]}@test.com",
        username=username,
        password_hash=hash_password(TEST_PASSWORD),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_user(db: Session) -> User:
    """The user the authed_client acts as."""
    return _make_user(db, "Tester")


@pytest.fixture(scope="function")
def other_user(db: Session) -> User:
    """A second account whose data the test_user must never reach."""
    return _make_user(db, "Other")


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str
    cookie_name: str = COOKIE_NAME


def _auth_for(user: User) -> TestAuth:
    token = create_session_token(
        user_id=user.id,
        token_version=user.token_version,
    )
    return TestAuth(user=user, token=token)


@pytest.fixture(scope="function")
def test_auth(test_user: User) -> TestAuth:
    """Create JWT token for test user."""
    return _auth_for(test_user)


@pytest.fixture(scope="function")
def other_auth(other_user: User) -> TestAuth:
    return _auth_for(other_user)


# =============================================================================
# Client Fixtures
# =============================================================================

def _override_db(db: Session) -> None:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Create unauthenticated AsyncClient for testing public endpoints.
    """
    _override_db(db)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(
    db: Session,
    test_auth: TestAuth,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated AsyncClient with JWT cookie and CSRF header.
    """
    _override_db(db)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={test_auth.cookie_name: test_auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def other_client(
    db: Session,
    other_auth: TestAuth,
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated client for other_user."""
    _override_db(db)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={other_auth.cookie_name: other_auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},
    ) as c:
        yield c

    app.dependency_overrides.clear()
