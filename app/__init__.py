"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    MealOrderError,
    ServiceValidationError,
    EmptyCartError,
    NotFoundError,
    InvalidTransitionError,
    ConflictError,
    StorageUnavailableError,
    UnauthorizedError,
)

__all__ = [
    "settings",
    "MealOrderError",
    "ServiceValidationError",
    "EmptyCartError",
    "NotFoundError",
    "InvalidTransitionError",
    "ConflictError",
    "StorageUnavailableError",
    "UnauthorizedError",
]
