"""Ready-made format tables over Python containers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from typing import Any, Callable, Mapping, Optional, Sequence
import re

from pfmt.api import Fmt, FormatTable
from pfmt.handle import Handle
from pfmt.leaves import to_fmt

_INDEX_RE = re.compile(r"[0-9]+")


def _handle_for(value: Any, strict: bool) -> Handle[Fmt]:
    # stored Fmts stay owned by the table, anything else is wrapped per lookup
    if isinstance(value, Fmt):
        return Handle.borrowed(value)
    return Handle.owned(to_fmt(value, strict=strict))


class DictTable(FormatTable):
    """Looks names up in a mapping."""

    def __init__(self, values: Mapping[str, Any], strict: bool = False):
        self.values = values
        self.strict = strict

    def get_fmt(self, name: str) -> Optional[Handle[Fmt]]:
        if name not in self.values:
            return None
        return _handle_for(self.values[name], self.strict)

    def __repr__(self) -> str:
        return f"DictTable({sorted(self.values)!r})"


class ListTable(FormatTable):
    """Looks decimal indices up in a sequence; ``{0}`` is the first value."""

    def __init__(self, values: Sequence[Any], strict: bool = False):
        self.values = values
        self.strict = strict

    def get_fmt(self, name: str) -> Optional[Handle[Fmt]]:
        if _INDEX_RE.fullmatch(name) is None:
            return None
        index = int(name)
        if index >= len(self.values):
            return None
        return _handle_for(self.values[index], self.strict)


class ChainTable(FormatTable):
    """
    Tries each table in turn; the first one that knows a name wins.

    Useful for layering explicit values over defaults.
    """

    def __init__(self, *tables: FormatTable):
        self.tables = tables

    def get_fmt(self, name: str) -> Optional[Handle[Fmt]]:
        for table in self.tables:
            handle = table.get_fmt(name)
            if handle is not None:
                return handle
        return None


class ProducerTable(FormatTable):
    """
    Synthesizes a value for every lookup by calling ``producer(name)``.

    Produced values are handed out in owned handles and released once the
    placeholder is rendered. ``None`` means the name is unknown.
    """

    def __init__(self, producer: Callable[[str], Any], strict: bool = False):
        self.producer = producer
        self.strict = strict

    def get_fmt(self, name: str) -> Optional[Handle[Fmt]]:
        value = self.producer(name)
        if value is None:
            return None
        if isinstance(value, Fmt):
            return Handle.owned(value)
        return Handle.owned(to_fmt(value, strict=self.strict))


def as_table(obj: Any, strict: bool = False) -> FormatTable:
    """Coerce a table, a mapping or a list/tuple to a FormatTable."""
    if isinstance(obj, FormatTable):
        return obj
    if isinstance(obj, MappingABC):
        return DictTable(obj, strict=strict)
    if isinstance(obj, (list, tuple)):
        return ListTable(obj, strict=strict)
    raise TypeError(f"Cannot use {type(obj).__name__} as a format table")
