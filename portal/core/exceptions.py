"""
Portal errors.

Services raise these; route handlers translate them into HTTP responses at
the point of the user action. None of them is fatal.
"""

from typing import Any, Dict, Optional


class PortalError(Exception):
    """Base exception for all portal errors"""

    status_code = 400

    def __init__(
        self,
        message: str,
        code: str = "PORTAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidCredentials(PortalError):
    """Login failed. Unknown email and wrong password look the same."""

    status_code = 401

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class DuplicateIdentity(PortalError):
    """A student with the same email or registration number exists"""

    status_code = 409

    def __init__(self, message: str = "Email or Registration Number already exists"):
        super().__init__(message, code="DUPLICATE_IDENTITY")


class ValidationError(PortalError):
    """A required field is missing or invalid"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else None
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class NotFound(PortalError):
    status_code = 404

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            f"{resource} not found: {identifier}",
            code="NOT_FOUND",
            details={"resource": resource, "id": identifier},
        )


class PermissionDenied(PortalError):
    """The current session's role may not perform this action"""

    status_code = 403

    def __init__(self, message: str = "Insufficient role"):
        super().__init__(message, code="PERMISSION_DENIED")


class DeserializationFallback(PortalError):
    """A stored value could not be parsed; callers treat it as empty."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            f"Stored value for {key!r} is unreadable: {reason}",
            code="DESERIALIZATION_FALLBACK",
            details={"key": key},
        )
