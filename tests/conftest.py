"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures and configuration for all tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Set testing environment
os.environ["TESTING"] = "true"

# Add the project root directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from infrastructure_base.adapters.procedures.factory import ProcedureAdapterFactory
from infrastructure_base.models.base import Base
from infrastructure_base.repositories.base import RepositoryBase
from infrastructure_base.utils.config import get_settings
from infrastructure_base.utils.database import get_engine, get_session_local, init_db, session_scope
from tests.fixtures.models import Address, Customer, Order
from tests.fixtures.procedures import PROCEDURES, SQLiteProcedureAdapter

@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings from the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

@pytest.fixture
def engine():
    """Create an in-memory SQLite engine with all tables."""
    engine = init_db(get_engine("sqlite://"))
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    """Session factory bound to the test engine."""
    return get_session_local(engine)

@pytest.fixture
def db_session(session_factory):
    """Create a fresh database session for a test."""
    with session_scope(session_factory) as session:
        yield session
        session.rollback()

@pytest.fixture
def customer_repository(db_session) -> RepositoryBase[Customer]:
    """Repository over the Customer model."""
    return RepositoryBase(db_session, Customer)

@pytest.fixture
def sample_customers(db_session):
    """Three customers, two with addresses, with a few orders."""
    oslo = Address(city="Oslo", street="Karl Johans gate 1")
    bergen = Address(city="Bergen")
    customers = [
        Customer(name="Ann", email="ann@example.com", age=34, address=oslo),
        Customer(name="Bob", email=None, age=19, address=bergen),
        Customer(name="Cid", email="cid@example.com", age=52),
    ]
    db_session.add_all(customers)
    db_session.flush()
    db_session.add_all([
        Order(customer_id=customers[0].id, total=100),
        Order(customer_id=customers[0].id, total=250),
        Order(customer_id=customers[2].id, total=75),
    ])
    db_session.commit()
    return customers

@pytest.fixture
def sqlite_procedures():
    """Register the SQLite stand-in for stored procedures."""
    adapter = SQLiteProcedureAdapter(PROCEDURES)
    ProcedureAdapterFactory.register("sqlite", adapter)
    yield adapter
    ProcedureAdapterFactory.unregister("sqlite")
