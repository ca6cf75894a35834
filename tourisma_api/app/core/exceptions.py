"""
Domain exceptions raised by the service layer.

All of them derive from ``ValueError`` so callers that only care about
"the operation was rejected" can keep catching ``ValueError``.  The
endpoints use :func:`http_error` to turn them into ``HTTPException``
with a fitting status code.
"""

from fastapi import HTTPException, status


class TourismaError(ValueError):
    """Base class for errors raised by services."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(TourismaError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidTransitionError(TourismaError):
    """A booking status change is not allowed from the current status."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current, target) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Invalid booking transition: {current.value} -> {target.value}")


class PermissionDeniedError(TourismaError):
    """The acting user may not perform the operation."""

    status_code = status.HTTP_403_FORBIDDEN


class ValidationFailedError(TourismaError):
    """Input is well-formed but violates a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(TourismaError):
    """The operation clashes with the current state (e.g. already reviewed)."""

    status_code = status.HTTP_409_CONFLICT


def http_error(exc: TourismaError) -> HTTPException:
    """Build the ``HTTPException`` matching a service error."""
    return HTTPException(status_code=exc.status_code, detail=str(exc))
