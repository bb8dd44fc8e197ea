class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class NotFoundError(ServiceError):
    """Raised when a referenced appointment, service or provider does not exist."""


class InvalidTransitionError(ServiceError):
    """Raised when a status change is not allowed by the appointment state machine."""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move appointment from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class StoreFailureError(ServiceError):
    """Raised when the appointment store cannot load or persist records."""


class DownstreamServiceError(ServiceError):
    """Raised when an external service returns an error response."""

    def __init__(self, message: str, status_code: int | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code
