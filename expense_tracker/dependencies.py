# dependencies.py
"""Centralized dependencies for FastAPI application."""

from .database import SessionLocal
from .exceptions import AccessDeniedError, NotFoundError
from .services.alerts import AlertDispatcher


def get_db():
    """Database session dependency.

    Yields a database session and ensures it's closed after use.
    Usage: db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_alert_dispatcher() -> AlertDispatcher:
    """Alert dispatcher bound to its own sessions and the configured timeout."""
    return AlertDispatcher(SessionLocal)


def ensure_access(record, current_user, label: str, allow_admin: bool = True):
    """
    Returns the record if the caller owns it (or is an admin, when allowed).
    Raises NotFoundError for a missing record and AccessDeniedError otherwise.
    """
    if record is None:
        raise NotFoundError(f"{label} not found")

    if record.owner_id != current_user.id and not (allow_admin and current_user.is_admin):
        raise AccessDeniedError(f"You don't have permission to access this {label.lower()}")

    return record
