# course_portal/core/errors.py - Domain error taxonomy surfaced to API callers
from fastapi import status


class PortalError(Exception):
    """Base class for business-rule violations.

    Each subclass maps to a stable machine-readable ``code`` and an HTTP status,
    rendered by the exception handler registered in ``course_portal.main``.
    """

    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class NotFoundError(PortalError):
    """Referenced entity is absent, or belongs to someone else"""
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InactiveCourseError(PortalError):
    code = "inactive_course"
    status_code = status.HTTP_409_CONFLICT


class CapacityExceededError(PortalError):
    code = "capacity_exceeded"
    status_code = status.HTTP_409_CONFLICT


class DuplicateRegistrationError(PortalError):
    code = "duplicate_registration"
    status_code = status.HTTP_409_CONFLICT


class AlreadyWithdrawnError(PortalError):
    code = "already_withdrawn"
    status_code = status.HTTP_409_CONFLICT


class InvalidTransitionError(PortalError):
    code = "invalid_transition"
    status_code = status.HTTP_409_CONFLICT


class ConflictError(PortalError):
    """Unique identity already taken (email, student id, course code, NISN)"""
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class AuthenticationError(PortalError):
    code = "invalid_credentials"
    status_code = status.HTTP_401_UNAUTHORIZED


class StorageUnavailableError(PortalError):
    """Transient storage failure that survived the retry budget"""
    code = "storage_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


__all__ = [
    "PortalError",
    "NotFoundError",
    "InactiveCourseError",
    "CapacityExceededError",
    "DuplicateRegistrationError",
    "AlreadyWithdrawnError",
    "InvalidTransitionError",
    "ConflictError",
    "AuthenticationError",
    "StorageUnavailableError",
]
