from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from geophoto.core.errors import AppError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a repository or service operation.

    Exactly one of ``data`` / ``error`` is meaningful: a failed result always
    carries an ``AppError``, a successful one never does. ``data`` may itself be
    ``None`` for operations that return nothing.
    """

    data: Optional[T] = None
    error: Optional[AppError] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "Result[T]":
        return cls(data=data, error=None)

    @classmethod
    def fail(cls, error: AppError) -> "Result[T]":
        if error is None:
            raise TypeError("Result.fail requires an error")
        return cls(data=None, error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.data
