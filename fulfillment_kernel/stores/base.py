"""
BaseStore -- shared plumbing for the SQLAlchemy record stores.

Responsibility:
    Holds the caller's Session and translates driver/ORM failures into the
    kernel's typed store errors, so services never see SQLAlchemyError.

Architecture position:
    Kernel > Stores.  May import db/, models/, domain/ and exceptions.

Invariants enforced:
    - Stores flush, never commit or rollback the caller's transaction.
    - Every write runs inside a SAVEPOINT; a failed write rolls back only
      that savepoint, so the enclosing transaction stays usable.
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fulfillment_kernel.exceptions import StoreReadError, StoreWriteError
from fulfillment_kernel.logging_config import get_logger

logger = get_logger("stores")


class BaseStore:
    """Base class for stores; ``store_name`` names the logical table in errors."""

    store_name: str = "store"

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _reading(self, tenant_id: str) -> Generator[None, None, None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error(
                "store_read_failed",
                extra={"store": self.store_name, "error": str(exc)},
            )
            raise StoreReadError(self.store_name, tenant_id, str(exc)) from exc

    @contextmanager
    def _writing(self, operation: str) -> Generator[None, None, None]:
        savepoint = self.session.begin_nested()
        try:
            yield
            self.session.flush()
            savepoint.commit()
        except SQLAlchemyError as exc:
            savepoint.rollback()
            logger.error(
                "store_write_failed",
                extra={
                    "store": self.store_name,
                    "operation": operation,
                    "error": str(exc),
                },
            )
            raise StoreWriteError(self.store_name, operation, str(exc)) from exc
