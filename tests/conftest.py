"""
Pytest fixtures for testing
"""
import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from subscription_service.infrastructure.db.session import Base
from subscription_service.infrastructure.db import models  # noqa: F401  (registers tables)


@pytest.fixture
def db_engine():
    """In-memory SQLite engine; StaticPool so every thread sees the same DB"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine)


@pytest.fixture
def db_session(session_factory) -> Session:
    """Create database session for tests"""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def user_id():
    """Sample user ID for tests"""
    return uuid.UUID("d4ae2ec1-3673-45c8-b823-7b28c99baff0")


@pytest.fixture
def other_user_id():
    return uuid.UUID("0b6f8a52-1c1e-4c55-9a57-3d0f2f3e9a11")
