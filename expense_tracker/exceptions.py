# exceptions.py
"""Error taxonomy shared by the stores, services and HTTP layer."""

from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError


class ExpenseTrackerError(Exception):
    """Base class for errors raised by the expense tracker core."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConflictError(ExpenseTrackerError):
    """A budget already exists for the (owner, category, month) key."""

    status_code = 409


class NotFoundError(ExpenseTrackerError):
    status_code = 404


class AccessDeniedError(NotFoundError):
    """The record exists but the caller is neither its owner nor an admin."""

    status_code = 403


class TransientStoreError(ExpenseTrackerError):
    """I/O failure while reading or writing the backing store."""

    status_code = 503


@contextmanager
def translate_store_errors(operation: str):
    """Re-raise driver-level I/O failures as TransientStoreError.

    Integrity violations pass through untouched; callers that expect them
    (duplicate budget keys) translate them themselves.
    """
    try:
        yield
    except IntegrityError:
        raise
    except DBAPIError as exc:
        raise TransientStoreError(f"{operation} failed: {exc.orig}") from exc
