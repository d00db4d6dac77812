"""
Translation of SQLAlchemy / psycopg faults into subscription errors
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from psycopg import errors as pg_errors
from sqlalchemy import text
from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session

from subscription_service.domain.errors import (
    InvalidInput, DuplicateEntry, StorageFailure, OperationCancelled,
)

logger = logging.getLogger(__name__)

# sqlite3 has no error classes per constraint kind, only the message
_SQLITE_UNIQUE_MARKER = "UNIQUE constraint failed"


def _is_cancelled(exc: sa_exc.DBAPIError) -> bool:
    return isinstance(exc.orig, pg_errors.QueryCanceled)


def _is_unique_violation(exc: sa_exc.IntegrityError) -> bool:
    if isinstance(exc.orig, pg_errors.UniqueViolation):
        return True
    return _SQLITE_UNIQUE_MARKER in str(exc.orig)


@contextmanager
def translate_db_errors(db: Session, operation: str) -> Iterator[None]:
    """
    Run a store call, rolling back and re-raising failures as domain errors.

        IntegrityError (unique)   -> DuplicateEntry
        IntegrityError (other)    -> InvalidInput
        DataError (out of range)  -> InvalidInput
        pool TimeoutError         -> OperationCancelled
        QueryCanceled (deadline)  -> OperationCancelled
        any other SQLAlchemyError -> StorageFailure
    """
    try:
        yield
    except sa_exc.IntegrityError as exc:
        db.rollback()
        if _is_unique_violation(exc):
            logger.info("%s rejected by unique constraint: %s", operation, exc.orig)
            raise DuplicateEntry() from exc
        logger.info("%s rejected by constraint: %s", operation, exc.orig)
        raise InvalidInput() from exc
    except sa_exc.DataError as exc:
        db.rollback()
        logger.info("%s rejected value: %s", operation, exc.orig)
        raise InvalidInput() from exc
    except sa_exc.TimeoutError as exc:
        db.rollback()
        logger.warning("%s: connection pool exhausted", operation)
        raise OperationCancelled() from exc
    except sa_exc.DBAPIError as exc:
        db.rollback()
        if _is_cancelled(exc):
            logger.warning("%s cancelled: statement timeout", operation)
            raise OperationCancelled() from exc
        logger.exception("%s failed", operation)
        raise StorageFailure() from exc
    except sa_exc.SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s failed", operation)
        raise StorageFailure() from exc


def apply_statement_timeout(db: Session, timeout_ms: int | None) -> None:
    """
    Per-operation deadline (PostgreSQL only): statement_timeout for the
    current transaction. SQLite has no equivalent - no-op there.
    """
    if timeout_ms is None:
        return
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(
        text("SELECT set_config('statement_timeout', :ms, true)"),
        {"ms": str(int(timeout_ms))},
    )
