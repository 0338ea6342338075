"""
Test configuration and fixtures.
Uses in-memory SQLite for the repository and fake sources/sessions for the
network layer; no test touches the network.
"""

from typing import List

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from medscan.db.database import Base
from medscan.db.models.product import Product  # noqa: F401
from medscan.repositories.product_repository import ProductRepository, InMemoryProductStore
from medscan.services.barcode import OverrideTable

from tests.fakes import FakeSource, make_sources

SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def product_repository(db_session) -> ProductRepository:
    return ProductRepository(db_session)


@pytest.fixture
def memory_store() -> InMemoryProductStore:
    return InMemoryProductStore()


@pytest.fixture
def empty_overrides() -> OverrideTable:
    return OverrideTable(entries={})


@pytest.fixture
def failing_sources() -> List[FakeSource]:
    """Four sources that all answer NOT_FOUND."""
    return make_sources()
