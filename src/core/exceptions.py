"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    SKILL_NOT_FOUND = "SKILL_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SELF_DEALING = "SELF_DEALING"

    # State and conflict errors (409)
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    TASK_ALREADY_CLAIMED = "TASK_ALREADY_CLAIMED"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Malformed or out-of-range input."""

    def __init__(
        self,
        message: str,
        details: Any | None = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=400,
            details=details,
        )


class SelfDealingError(ValidationError):
    """A user tried to serve their own request."""

    def __init__(self, message: str = "You cannot accept or request help for your own task") -> None:
        super().__init__(message=message, error_code=ErrorCode.SELF_DEALING)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class TaskNotFoundError(AppException):
    """Task not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message=f"Task not found: {task_id}",
            status_code=404,
            details={"task_id": task_id},
        )


class SkillNotFoundError(AppException):
    """Skill not found."""

    def __init__(self, skill_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.SKILL_NOT_FOUND,
            message=f"Skill not found: {skill_id}",
            status_code=404,
            details={"skill_id": skill_id},
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class StateError(AppException):
    """Lifecycle transition attempted from the wrong state."""

    def __init__(
        self,
        task_id: str,
        current_status: str | None,
        action: str,
        message: str | None = None,
    ) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_STATE_TRANSITION,
            message=message or f"Cannot {action} a task that is {current_status}",
            status_code=409,
            details={
                "task_id": task_id,
                "current_status": current_status,
                "action": action,
            },
        )


class ConflictError(AppException):
    """Another user claimed the task first."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_ALREADY_CLAIMED,
            message="This task has already been accepted by someone else",
            status_code=409,
            details={"task_id": task_id},
        )


class PersistenceError(AppException):
    """The database failed while handling the request."""

    def __init__(self, message: str = "A database error occurred") -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message=message,
            status_code=503,
        )
