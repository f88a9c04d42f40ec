from typing import Optional


class IncidentServiceError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(IncidentServiceError):
    status_code = 400


class AuthorizationError(IncidentServiceError):
    status_code = 403


class NotFoundError(IncidentServiceError):
    status_code = 404


class UnsupportedMediaError(IncidentServiceError):
    status_code = 400


class StorageError(IncidentServiceError):
    status_code = 500
