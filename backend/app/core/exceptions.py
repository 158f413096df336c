"""Custom exception classes"""

from typing import Any, Optional


class GradeUpException(Exception):
    """Base exception for the GradeUp matching service"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(GradeUpException):
    """Malformed input rejected before any write"""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class AuthenticationException(GradeUpException):
    """Caller identity could not be resolved"""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, status_code=401)


class AuthorizationException(GradeUpException):
    """Caller is known but may not touch the resource"""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, status_code=403)


class NotFoundException(GradeUpException):
    """Resolved entity is missing"""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class ConflictException(GradeUpException):
    """Write lost a race against another writer"""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, status_code=409, details=details)


class DatabaseException(GradeUpException):
    """Underlying store failed"""

    def __init__(self, operation: str, message: str):
        full_message = f"Database error ({operation}): {message}"
        super().__init__(full_message, status_code=502, details={"operation": operation})
