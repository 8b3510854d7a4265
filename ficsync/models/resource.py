"""Result wrappers passed between the remote source, the repository and callers."""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Loading:
    data: Any = None


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T


@dataclass(frozen=True)
class Error:
    message: str
    data: Any = None


Resource = Union[Loading, Success, Error]


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a remote operation: a value or the exception that prevented it."""
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Result[T]":
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        if self.error is None:
            return ""
        return str(self.error) or self.error.__class__.__name__

    @property
    def retryable(self) -> bool:
        return bool(getattr(self.error, "retryable", False))

    def map(self, func: Callable[[T], U]) -> "Result[U]":
        if self.error is not None:
            return Result(error=self.error)
        return Result(value=func(self.value))
