"""Transaction helper for multi-row operations."""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gifter.services.errors import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Run the block as one all-or-nothing unit.

    Commits when the block finishes, rolls back on any exception. Driver and
    connectivity failures are re-raised as StoreError; service errors
    (ValidationError, NotFoundOrForbidden) propagate unchanged after rollback.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("store_error")
        raise StoreError("Storage is unavailable, please try again") from exc
    except Exception:
        db.rollback()
        raise
