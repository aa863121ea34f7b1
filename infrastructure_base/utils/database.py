"""
Database configuration and session management.

This module provides:
- Database URL resolution from the environment
- SQLAlchemy engine and session factory creation
- A session scope that releases the session deterministically
- Table creation for models registered on the shared declarative base
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from infrastructure_base.models.base import Base
from infrastructure_base.utils.config import get_settings
from infrastructure_base.utils.logger import get_logger

# Load environment variables from .env file
load_dotenv()

logger = get_logger(__name__)

DEFAULT_SQLITE_URL = "sqlite:///infrastructure_base.db"
MEMORY_SQLITE_URL = "sqlite://"

def get_database_url() -> str:
    """
    Get database URL based on environment.

    Returns:
        str: In-memory SQLite when TESTING is set, DATABASE_URL when
            configured, a local SQLite file otherwise.
    """
    settings = get_settings()

    if settings.TESTING:
        logger.info("Using in-memory SQLite database for testing")
        return MEMORY_SQLITE_URL

    db_url = settings.DATABASE_URL
    if db_url:
        # Fix potential newline issues in .env file
        db_url = db_url.split('\n')[0].strip()
        logger.info(f"Using {db_url.split(':', 1)[0]} database for {settings.ENVIRONMENT}")
        return db_url

    logger.warning("No DATABASE_URL found, falling back to SQLite")
    return DEFAULT_SQLITE_URL

def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Get a SQLAlchemy engine.

    Args:
        database_url (str, optional): Database URL. If None, determined from environment.

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    if database_url is None:
        database_url = get_database_url()

    debug_mode = get_settings().DEBUG
    connect_args = {}
    engine_args = {"echo": debug_mode}

    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if database_url in (MEMORY_SQLITE_URL, "sqlite:///:memory:"):
            # Every session must see the same in-memory database
            engine_args["poolclass"] = StaticPool

    return create_engine(database_url, connect_args=connect_args, **engine_args)

def get_session_local(engine: Optional[Engine] = None) -> sessionmaker:
    """
    Get a SQLAlchemy session factory.

    Args:
        engine (Engine, optional): SQLAlchemy engine. If None, a new engine is created.

    Returns:
        sessionmaker: Session factory bound to the engine
    """
    if engine is None:
        engine = get_engine()

    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

@contextmanager
def session_scope(session_factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    """
    Provide a session that is closed when the block exits.

    Commits and rollbacks stay with the caller and the repositories.

    Args:
        session_factory (sessionmaker, optional): Factory to use. If None,
            one is built from the environment.

    Yields:
        Session: A database session
    """
    if session_factory is None:
        session_factory = get_session_local()

    session = session_factory()
    try:
        yield session
    finally:
        session.close()

def init_db(engine: Optional[Engine] = None) -> Engine:
    """
    Create all tables registered on the shared declarative base.

    Args:
        engine (Engine, optional): Engine to use. If None, one is built from the environment.

    Returns:
        Engine: The engine the tables were created on
    """
    if engine is None:
        engine = get_engine()

    try:
        Base.metadata.create_all(bind=engine)
        logger.info(f"Initialized database at {engine.url.render_as_string(hide_password=True)}")
    except Exception as e:
        logger.error(f"Error initializing database: {str(e)}")
        raise
    return engine
