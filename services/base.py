"""
Transaction helper shared by the cart, checkout and order services.

Every write is a read-modify-write executed as one database transaction:
``work`` loads what it needs (with row locks), mutates, and the helper commits.
Concurrency losers (stale version, duplicate lazily-created cart) are rolled
back and the whole unit is re-run; connectivity failures are reported as
``StorageUnavailableError``; everything else is rolled back and re-raised.
"""

import logging
from typing import Callable, Optional, Tuple, Type, TypeVar

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.config import settings
from app.exceptions import ConflictError, MealOrderError, StorageUnavailableError

T = TypeVar("T")

logger = logging.getLogger("mealorder.transactions")

# Cart writes may also lose a lazy-create race (duplicate primary key); order
# writes never insert concurrently, so they only retry on a stale version.
CONCURRENT_WRITE_ERRORS: Tuple[Type[Exception], ...] = (StaleDataError, IntegrityError)
STALE_WRITE_ERRORS: Tuple[Type[Exception], ...] = (StaleDataError,)
STORAGE_ERRORS: Tuple[Type[Exception], ...] = (OperationalError, InterfaceError)


def run_in_transaction(
    db: Session,
    work: Callable[[], T],
    action: str,
    attempts: Optional[int] = None,
    retry_on: Tuple[Type[Exception], ...] = CONCURRENT_WRITE_ERRORS,
) -> T:
    """
    Run ``work`` and commit, retrying on concurrent-write conflicts.

    Args:
        db: Database session (the caller's request-scoped session)
        work: zero-argument callable doing the reads and staged writes
        action: short label used in logs and error messages
        attempts: maximum number of runs, defaults to ``settings.cart_write_retries``
        retry_on: exception types that mean "someone else wrote first"

    Returns:
        Whatever ``work`` returned, after a successful commit

    Raises:
        ConflictError: if every attempt lost a concurrent-write race
        StorageUnavailableError: if the database could not be reached
    """
    attempts = attempts or settings.cart_write_retries
    last_exc: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            result = work()
            db.commit()
            return result
        except retry_on as exc:
            db.rollback()
            last_exc = exc
            logger.warning(
                "%s attempt %d/%d lost a concurrent write: %s",
                action,
                attempt,
                attempts,
                exc.__class__.__name__,
            )
        except STORAGE_ERRORS as exc:
            db.rollback()
            logger.exception("%s failed: storage unavailable", action)
            raise StorageUnavailableError(
                f"Storage unavailable during {action}", details={"action": action}
            ) from exc
        except MealOrderError:
            db.rollback()
            raise
        except Exception:
            db.rollback()
            logger.exception("Unexpected error during %s", action)
            raise

    logger.error("%s gave up after %d attempts", action, attempts)
    raise ConflictError(
        f"Concurrent updates prevented {action}; please retry",
        details={"action": action, "attempts": attempts},
    ) from last_exc
