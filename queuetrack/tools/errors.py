from fastapi import HTTPException

from queuetrack.services.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    ServiceError,
)


def to_http_exception(exc: ServiceError) -> HTTPException:
    """Map a service failure onto the HTTP status callers should see."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidTransitionError):
        return HTTPException(
            status_code=409,
            detail={"message": str(exc), "current": exc.current, "requested": exc.requested},
        )
    return HTTPException(status_code=502, detail=str(exc))
