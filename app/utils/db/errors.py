"""Translate storage-level failures into domain errors."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session

from app.exceptions import TransientError
from app.infra.logging_config import get_logger

logger = get_logger("storage")

TRANSIENT_DB_ERRORS = (
    sa_exc.OperationalError,
    sa_exc.TimeoutError,
    sa_exc.DisconnectionError,
)


@contextmanager
def storage_guard(db: Session, operation: str) -> Iterator[Session]:
    """
    Run a unit of work; on connection loss or timeout roll back and raise TransientError.

    Any other exception also rolls back and propagates unchanged.
    """
    try:
        yield db
    except TRANSIENT_DB_ERRORS as e:
        db.rollback()
        logger.warning("Storage unavailable during %s: %s", operation, e)
        raise TransientError(
            "The message store is temporarily unavailable, please retry"
        ) from e
    except Exception:
        db.rollback()
        raise
