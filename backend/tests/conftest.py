"""Shared test fixtures for all test modules."""

import contextlib
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import marketplace.models  # noqa: F401
from marketplace.core import database as db_module
from marketplace.core.database import Base, get_db
from marketplace.models.coupon import CouponType
from marketplace.repositories.store_repository import StoreRepository
from marketplace.schemas.coupon import CouponCreate
from marketplace.schemas.store import StoreCreate
from marketplace.services.coupon_registry import CouponRegistry

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def now():
    return datetime.now(UTC)


@pytest.fixture
def store(db_session):
    """Create a test store."""
    return StoreRepository(db_session).create(StoreCreate(name="Corner Bakery"))


@pytest.fixture
def other_store(db_session):
    """Create a second test store."""
    return StoreRepository(db_session).create(StoreCreate(name="Fresh Market"))


@pytest.fixture
def make_coupon(db_session, now):
    """Factory creating coupons through the registry.

    Defaults to a global 10% coupon valid from yesterday for thirty days.
    """

    def _make(
        code: str = "SAVE10",
        coupon_type: CouponType = CouponType.PERCENTAGE,
        value: str = "10",
        **overrides,
    ):
        fields = {
            "code": code,
            "coupon_type": coupon_type,
            "value": Decimal(value),
            "valid_from": now - timedelta(days=1),
            "valid_until": now + timedelta(days=30),
        }
        fields.update(overrides)
        return CouponRegistry(db_session).create(CouponCreate(**fields))

    return _make
