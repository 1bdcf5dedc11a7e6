# database.py
"""Database configuration and session management."""

import logging
from sqlalchemy import create_engine, NullPool, StaticPool
from sqlalchemy.orm import declarative_base, sessionmaker

from . import config

logger = logging.getLogger(__name__)

DATABASE_URL = config.DATABASE_URL
if not DATABASE_URL:
    raise RuntimeError(
        "DATABASE_URL environment variable is not set. "
        "Please set it in your .env file or environment."
    )


def engine_options(url: str) -> dict:
    """Engine keyword arguments for the configured backend."""
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # An in-memory database lives on one connection; every session must share it
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    if url.startswith("postgresql"):
        return {"client_encoding": "utf8", "poolclass": NullPool}
    return {}


logger.info("Connecting to database...")

# Create the SQLAlchemy engine
engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))

# Create a configured "SessionLocal" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()
