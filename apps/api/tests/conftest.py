"""
Pytest configuration and fixtures

Tests run against an in-memory SQLite database unless DATABASE_URL is set.
Every test gets a freshly created schema that is dropped afterwards, so
nothing persists between tests.
"""
import pytest
import sys
import os
from uuid import uuid4

# Must be set before core.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pytest-only-0123456789")

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient
from core.database import Base, SessionLocal, engine, get_db
from core.security import create_access_token
import models  # noqa: F401  (registers tables)
from models import User


@pytest.fixture(scope="function")
def db_session():
    """
    Create a database session on a brand-new schema.

    All tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_user(db_session):
    user = User(
        email=f"test_{uuid4()}@example.com",
        display_name="Test User",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session):
    user = User(
        email=f"other_{uuid4()}@example.com",
        display_name="Other User",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user):
    """Bearer token for test_user"""
    token = create_access_token({"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db_session):
    """TestClient whose requests share the test's database session."""
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
