"""Shared plumbing for view controllers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """Outcome of an explicit load action: either ``value`` or ``error``."""

    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "LoadResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "LoadResult[T]":
        return cls(error=error)


class ObservableView:
    """Mixin that lets a renderer subscribe to state changes."""

    def __init__(self) -> None:
        self._listeners: list[Callable[[], None]] = []

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()
