### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - App Database Setup -
# Author: Bailey Dixon
# Date: 09/02/2026
# Python: 3.11
####################

"""
App Database Setup

Relational store holding:
- Tenants (branding, encrypted secrets)
- Admin users and password hashes
- Tenant-scoped events, errors, metrics, usage, leads, conversations

Uses synchronous SQLAlchemy (no greenlet dependency). SQLite by default,
any SQLAlchemy URL via PORTAL_DATABASE_URL.
"""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from portal.config import get_settings

DATABASE_URL = get_settings().database_url


def _create_engine(url: str):
    """Create the engine, ensuring the SQLite data directory exists"""
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # Allow multi-threaded access
        db_path = url.split("///", 1)[-1]
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(
        url,
        connect_args=connect_args,
        echo=False,  # Set True for SQL debugging
    )


engine = _create_engine(DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency that provides a database session.

    Usage:
        @app.get("/endpoint")
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize the database - create all tables.

    Call this on application startup.
    """
    # Import models to register them with Base
    from portal.models import activity, admin_user, conversation, tenant  # noqa: F401

    Base.metadata.create_all(bind=engine)
    print(f"Database initialized at: {DATABASE_URL}")
