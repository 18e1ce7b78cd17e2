from typing import Any, Mapping, Optional


class MealOrderError(Exception):
    """Base class for errors surfaced to API callers.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, ids)
        code: machine-readable error code, defaults to the class' ``default_code``
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_code = "INTERNAL_SERVER_ERROR"
    default_message = "Unexpected error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
    ):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(MealOrderError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_code = "SERVICE_VALIDATION_ERROR"
    default_message = "Invalid input"


class EmptyCartError(ServiceValidationError):
    """Raised when checkout is attempted without a cart or with a cart that has no items."""

    default_code = "EMPTY_CART"
    default_message = "Cart is empty"


class NotFoundError(MealOrderError):
    """Raised when a cart, cart line or order does not exist or is not owned by the caller."""

    http_status = 404
    default_code = "NOT_FOUND"
    default_message = "Not found"


class InvalidTransitionError(MealOrderError):
    """Raised when an order status change is not allowed from the current status."""

    http_status = 409
    default_code = "INVALID_TRANSITION"
    default_message = "Invalid order status transition"


class ConflictError(MealOrderError):
    """Raised when a concurrent write kept winning and the retry budget ran out."""

    http_status = 409
    default_code = "CONFLICT"
    default_message = "Conflict"


class StorageUnavailableError(MealOrderError):
    """Raised when the backing database cannot be reached. Safe to retry."""

    http_status = 503
    default_code = "STORAGE_UNAVAILABLE"
    default_message = "Storage temporarily unavailable"


class UnauthorizedError(MealOrderError):
    """Raised when the caller identity is missing or malformed."""

    http_status = 401
    default_code = "UNAUTHORIZED"
    default_message = "Unauthorized"
