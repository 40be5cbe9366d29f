"""Custom exception classes for the activity audit platform."""

from fastapi import HTTPException, status


class AuditPlatformError(Exception):
    """Base exception for the activity audit platform."""

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class AuthenticationError(AuditPlatformError):
    """Raised when authentication fails."""
    pass


class ResourceNotFoundError(AuditPlatformError):
    """Raised when a requested resource is not found."""
    pass


class RoleConfigurationError(AuditPlatformError):
    """Raised when a role gate is bound with an unknown role name."""
    pass


class AuditWriteError(AuditPlatformError):
    """Raised when an activity log entry cannot be persisted."""
    pass


# HTTP exception shortcuts
def forbidden(detail: str = "Forbidden") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )
