"""
Trip store errors and their HTTP translation.

Authorization denials on rows the principal cannot read are raised as
RowNotFound so callers cannot tell a hidden itinerary from a missing one.
"""

from fastapi import HTTPException, status

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
CHECK_VIOLATION = "23514"


class TripStoreError(Exception):
    """Store operation failed."""


class StoreUnavailable(TripStoreError):
    """Backend could not be reached. Never retried."""


class IntegrityViolation(TripStoreError):
    """Constraint rejected the write. `code` follows Postgres SQLSTATE."""

    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(message)

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION


class RowNotFound(TripStoreError):
    """Row does not exist or is not visible to the acting principal."""

    def __init__(self, entity: str, row_id=None):
        self.entity = entity
        self.row_id = row_id
        super().__init__(f"{entity.capitalize()} not found")


class AccessDenied(TripStoreError):
    """Row is visible but the requested write is not allowed."""

    def __init__(self, entity: str, action: str, row_id=None, reason: str = ""):
        self.entity = entity
        self.action = action
        self.row_id = row_id
        self.reason = reason
        super().__init__(reason or f"Not allowed to {action} {entity}")


def to_http_exception(exc: TripStoreError) -> HTTPException:
    if isinstance(exc, RowNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, AccessDenied):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Insufficient permissions. {exc}"
        )
    if isinstance(exc, IntegrityViolation):
        if exc.code == FOREIGN_KEY_VIOLATION:
            return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Referenced record does not exist")
        if exc.code in (UNIQUE_VIOLATION, CHECK_VIOLATION):
            return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, StoreUnavailable):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
