"""Error kinds raised by the service layer.

Business-rule errors carry a detail message the caller can act on.
StorageFailure hides the underlying I/O error; backends log it first.
"""
from fastapi import HTTPException


class BadRequestError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=404, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=409, detail=detail)


class StaleWriteError(ConflictError):
    """The collection changed between load and save."""

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(f"Collection '{collection}' was modified concurrently. Reload and retry.")


class StorageFailure(HTTPException):
    def __init__(self, detail: str = "Storage failure"):
        super().__init__(status_code=500, detail=detail)
