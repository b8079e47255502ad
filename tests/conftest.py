"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real database. Tables are created before each test and dropped
after it, so every test starts from an empty ledger.
"""

import os

# Settings are read at import time; point them at the test
# database before anything from yield_ledger is imported.
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["ACCRUAL_SWEEP_INTERVAL_SECONDS"] = "0"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from yield_ledger.main import app
from yield_ledger.models.base import Base, get_db
from yield_ledger.models.enums import TransactionKind
from yield_ledger.services.account_service import AccountService
from yield_ledger.services.transaction_service import TransactionService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 30},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

ADMIN_ID = "admin-1"


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app uses the
    test session instead of the configured database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_account(db_session, account_id="user-1", email=None, referral_code=None):
    """Helper: register an account and commit."""
    account = AccountService(db_session).register(
        account_id,
        email=email or f"{account_id}@example.com",
        full_name=f"User {account_id}",
        referral_code=referral_code,
    )
    db_session.commit()
    return account


def create_admin(db_session, admin_id=ADMIN_ID):
    """Helper: register an account and make it an admin."""
    create_account(db_session, admin_id)
    AccountService(db_session).grant_admin(admin_id)
    db_session.commit()
    return admin_id


def fund_account(db_session, account_id, amount, admin_id=ADMIN_ID):
    """Helper: request a deposit and approve it."""
    service = TransactionService(db_session)
    txn = service.request(account_id, TransactionKind.DEPOSIT, Decimal(str(amount)))
    service.approve(txn.id, admin_id)
    db_session.commit()
    return txn


@pytest.fixture
def admin_id(db_session):
    return create_admin(db_session)


@pytest.fixture
def funded_account(db_session, admin_id):
    """An account holding 10000 from one approved deposit."""
    account = create_account(db_session, "investor-1")
    fund_account(db_session, account.id, "10000", admin_id)
    return account
