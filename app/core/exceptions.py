# app/core/exceptions.py
from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """Claim sheet or expense missing (or not under the given claim sheet)"""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidArgumentError(HTTPException):
    def __init__(self, detail: str = "Invalid argument"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(HTTPException):
    """A uniqueness constraint was violated, usually by a concurrent writer.

    Callers may retry after re-reading the current state.
    """
    def __init__(self, detail: str = "Conflicting update, retry the operation"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class StoreUnavailableError(HTTPException):
    def __init__(self, detail: str = "Database unavailable"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
