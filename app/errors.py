"""
Application error types.

Every failure the services raise carries a stable machine code, a human
message and the HTTP status the API layer maps it to. The exception handlers
in main.py turn these into JSON error bodies uniformly.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    code: str = "APP_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(AppError):
    """Malformed input rejected at the API boundary."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, details: list[dict[str, str]]):
        super().__init__("Validation failed", details)


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(AppError):
    code = "FORBIDDEN"
    status_code = 403

    def __init__(self, message: str = "You don't have permission to perform this action"):
        super().__init__(message)


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(AppError):
    code = "CONFLICT"
    status_code = 409


class QuotaExceededError(AppError):
    """A fixed cap was reached. Details carry the numbers for "20/20 used"."""

    code = "QUOTA_EXCEEDED"
    status_code = 429

    def __init__(self, resource: str, limit: int, current: int):
        super().__init__(
            f"Maximum number of {resource} reached",
            {"limit": limit, "current": current, "resource": resource},
        )
        self.resource = resource
        self.limit = limit
        self.current = current


class RateLimitedError(AppError):
    code = "RATE_LIMITED"
    status_code = 429

    def __init__(self, message: str = "Too many requests. Please try again later."):
        super().__init__(message)


class ConfigurationError(AppError):
    """A guard ran without its prerequisite.

    This is a wiring defect on the server (e.g. a role check mounted without
    the plan access check before it), never a caller fault.
    """

    code = "CONFIGURATION_ERROR"
    status_code = 500
