"""
Database configuration for the document store.

This module builds the SQLAlchemy engine and session factory. Nothing here
is created at import time; the service container calls these helpers once
at startup.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base class for declarative models
Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for the document store.

    - pool_pre_ping: Verify connections are alive before using them
    - In-memory SQLite gets a single shared connection so every thread
      sees the same database.

    Args:
        database_url: SQLAlchemy database URL.
        echo: Log every SQL statement.

    Returns:
        Engine: Configured SQLAlchemy engine.
    """
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        echo=echo,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to ``engine``."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
