"""
API dependencies for dependency injection
"""

from typing import Generator, Optional
from uuid import UUID
from fastapi import Header
from sqlalchemy.orm import Session

from app.exceptions import UnauthorizedError
from domain.models import get_db_session


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_current_user_id(
    x_user_id: Optional[str] = Header(
        None,
        alias="X-User-ID",
        description="Authenticated caller id, set by the authentication gateway",
    ),
) -> UUID:
    """
    Resolve the authenticated caller.

    Authentication happens upstream; the gateway forwards the verified user id
    in the ``X-User-ID`` header. Routes pass the returned id explicitly into
    every service call.
    """
    if not x_user_id:
        raise UnauthorizedError("Missing caller identity")
    try:
        return UUID(x_user_id)
    except ValueError:
        raise UnauthorizedError("Malformed caller identity")
