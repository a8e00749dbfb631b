from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for errors raised by the service layer.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, ids)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Internal error"
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.error_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"
    error_code = "SERVICE_VALIDATION_ERROR"


class NotFoundError(AppError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_message = "Not found"
    error_code = "NOT_FOUND"


class ConflictError(AppError):
    """Raised when a resource conflict occurs (e.g., duplicate username)."""

    http_status = 409
    default_message = "Conflict"
    error_code = "CONFLICT"


class StarterMealSeedError(AppError):
    """Raised when starter meals could not be copied into a user's collection.

    The seeding transaction is rolled back, so the user's loaded flag stays
    unset and the call can be retried.
    """

    http_status = 500
    default_message = "Failed to load starter meals"
    error_code = "STARTER_MEAL_SEED_FAILED"


class ReorderError(AppError):
    """Raised when a step of the three-step reorder protocol fails.

    ``completed_steps`` tells how many updates were applied before the
    failure. With one or two steps applied the first entry is left parked at
    the sentinel position until the next successful reorder.
    """

    http_status = 500
    default_message = "Failed to reorder meals"
    error_code = "REORDER_FAILED"

    def __init__(self, message: Optional[str] = None, completed_steps: int = 0, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        merged = {"completed_steps": completed_steps}
        if details:
            merged.update(details)
        super().__init__(message, details=merged, code=code)
        self.completed_steps = completed_steps
