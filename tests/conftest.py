"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_tracker.api.dependencies import get_current_user
from finance_tracker.api.main import create_app
from finance_tracker.domain.models import Transaction, TransactionType
from finance_tracker.infrastructure.clients.auth import AuthenticatedUser
from finance_tracker.infrastructure.database.models import Base
from finance_tracker.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed reference date so month windows are deterministic
AS_OF = date(2024, 5, 15)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_client(db: Session) -> Callable[..., TestClient]:
    """Build a test client with the test database, optionally signed in as `user_id`"""

    def _make(user_id: str | None = "user_1") -> TestClient:
        app = create_app()

        def override_get_db():
            try:
                yield db
            finally:
                pass

        app.dependency_overrides[get_db] = override_get_db
        if user_id is not None:
            app.dependency_overrides[get_current_user] = lambda: AuthenticatedUser(id=user_id)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    """Test client signed in as user_1"""
    return make_client("user_1")


@pytest.fixture
def txn() -> Callable[..., Transaction]:
    """Factory for domain transactions with sensible defaults"""
    counter = {"n": 0}

    def _txn(
        day: date,
        total: float,
        type: TransactionType = TransactionType.EXPENSE,
        category: str = "General",
        account_id: str = "acc_1",
    ) -> Transaction:
        counter["n"] += 1
        return Transaction(
            id=f"txn_{counter['n']}",
            date=day,
            account_id=account_id,
            type=type,
            category=category,
            total=total,
            description=f"{category} {counter['n']}",
        )

    return _txn
