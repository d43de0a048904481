"""Thread-safe write-once values for process-wide cached state."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

_UNSET = object()
_registry: list[Once[object]] = []
_registry_lock = threading.Lock()


class Once(Generic[T]):
    """Compute a value at most once and hand out the same object afterwards.

    Readers that find the value already set never take the lock. Concurrent
    first readers serialize on the lock and only one of them runs the factory.
    """

    __slots__ = ("_factory", "_lock", "_name", "_value")

    def __init__(self, factory: Callable[[], T], *, name: str | None = None) -> None:
        self._factory = factory
        self._name = name or getattr(factory, "__qualname__", repr(factory))
        self._lock = threading.Lock()
        self._value: object = _UNSET
        with _registry_lock:
            _registry.append(self)  # type: ignore[arg-type]

    def get(self) -> T:
        value = self._value
        if value is not _UNSET:
            return value  # type: ignore[return-value]
        with self._lock:
            if self._value is _UNSET:
                self._value = self._factory()
            return self._value  # type: ignore[return-value]

    __call__ = get

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    def reset(self) -> None:
        """Forget the cached value. Intended for testing."""
        with self._lock:
            self._value = _UNSET

    def __repr__(self) -> str:
        state = "set" if self.is_set else "unset"
        return f"Once({self._name}, {state})"


def reset_caches() -> None:
    """Clear every process-wide cached value. Intended for testing."""
    with _registry_lock:
        holders = list(_registry)
    for holder in holders:
        holder.reset()


__all__ = ["Once", "reset_caches"]
