"""
Pytest fixtures for testing
"""
import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.domain.subscription import Subscription
from app.infrastructure.db.session import Base
from app.infrastructure.db import models  # noqa: F401


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine for tests (shared across threads for TestClient)."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def user_id():
    """Sample owner of subscriptions"""
    return uuid.UUID("60601fee-2bf1-4721-ae6f-7636e79a0cba")


@pytest.fixture
def make_subscription(user_id):
    """Factory for in-memory Subscription snapshots"""
    def _make(price, start, end=None, service_name="Yandex Plus", owner=None):
        return Subscription(
            id=uuid.uuid4(),
            service_name=service_name,
            price=price,
            user_id=owner or user_id,
            start_date=start,
            end_date=end,
        )
    return _make
