"""Error taxonomy shared by both services."""

from fastapi import status


class ServiceError(Exception):
    """Base class for errors that map to an HTTP status and a JSON message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    """Duplicate unique field. Reported as 400 for compatibility with existing clients."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConfigurationError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UpstreamError(ServiceError):
    """Raised when the database, broker or a provider SDK fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
