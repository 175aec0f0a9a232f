"""Uniform result value returned by every client operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class OperationResult(Generic[T]):
    """Outcome of a client operation.

    Callers branch only on :attr:`ok` / :attr:`error`; no exception
    escapes an operation.
    """

    error: str | None = None
    value: T | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> OperationResult[T]:
        return cls(error=None, value=value)

    @classmethod
    def failure(cls, error: str) -> OperationResult[T]:
        return cls(error=error or "Unknown error")
