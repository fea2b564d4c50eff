from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    STORAGE = "storage"
    DB = "db"
    NOT_AUTHENTICATED = "not_authenticated"
    NOT_FOUND = "not_found"


class AppError(Exception):
    """Base error carried by every Result and surfaced at the API boundary."""

    kind: ErrorKind = ErrorKind.DB

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(kind={self.kind.value}, message={self.message!r})>"


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION


class StorageError(AppError):
    kind = ErrorKind.STORAGE


class DbError(AppError):
    kind = ErrorKind.DB


class NotAuthenticatedError(AppError):
    kind = ErrorKind.NOT_AUTHENTICATED

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
