"""Ownership adapter returned by format table lookups."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class Handle(Generic[T]):
    """
    Either a reference into table-owned storage or a value synthesized for
    a single lookup.

    Both forms expose the same read-only ``value``. Used as a context
    manager, an owned handle is released on exit: the reference is dropped
    and the value's ``close()`` is called if it has one. Borrowed handles are
    never released, the table keeps owning the value.
    """

    __slots__ = ("_value", "_owned", "_released")

    def __init__(self, value: T, owned: bool = False):
        self._value = value
        self._owned = owned
        self._released = False

    @classmethod
    def borrowed(cls, value: T) -> "Handle[T]":
        return cls(value, owned=False)

    @classmethod
    def owned(cls, value: T) -> "Handle[T]":
        return cls(value, owned=True)

    @property
    def is_owned(self) -> bool:
        return self._owned

    @property
    def released(self) -> bool:
        return self._released

    @property
    def value(self) -> T:
        if self._released:
            raise RuntimeError("Handle has been released")
        return self._value

    def release(self) -> None:
        if not self._owned or self._released:
            return
        value = self._value
        self._value = None
        self._released = True
        close = getattr(value, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> T:
        return self.value

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self._released else ("owned" if self._owned else "borrowed")
        return f"Handle<{state}>({self._value!r})"
