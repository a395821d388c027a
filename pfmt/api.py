"""Stable capability contracts: formattable values and format tables."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, FrozenSet, Mapping, Sequence

from pfmt.errors import SingleFmtError
from pfmt.handle import Handle
from pfmt.util import join_name

if TYPE_CHECKING:
    from pfmt.config import EngineConfig

Name = Sequence[str]
Flags = FrozenSet[str]
Options = Mapping[str, str]


class Fmt(ABC):
    """
    Something that can be formatted by a placeholder.

    ``full_name`` is the complete name path of the placeholder, ``name`` the
    part of it that has not been consumed yet (empty for the value named by
    the placeholder itself). ``args`` and ``options`` arrive already rendered.
    """

    @abstractmethod
    def format(
        self,
        full_name: Name,
        name: Name,
        args: Sequence[str],
        flags: Flags,
        options: Options,
    ) -> str:
        """Render the value or raise SingleFmtError."""


class CompositeFmt(Fmt):
    """
    A Fmt with members reachable through dot access.

    The first unconsumed name segment selects a member, which is formatted
    with the rest of the name. Without a remaining segment ``render`` is
    used; by default composites are namespace-only and cannot be rendered
    directly.
    """

    @abstractmethod
    def member(self, key: str) -> Fmt | None:
        """Return the member called ``key``, if there is one."""

    def render(
        self,
        full_name: Name,
        args: Sequence[str],
        flags: Flags,
        options: Options,
    ) -> str:
        raise SingleFmtError.namespace_only_fmt(join_name(full_name))

    def format(
        self,
        full_name: Name,
        name: Name,
        args: Sequence[str],
        flags: Flags,
        options: Options,
    ) -> str:
        if not name:
            return self.render(full_name, args, flags, options)
        member = self.member(name[0])
        if member is None:
            raise SingleFmtError.unknown_subfmt(join_name(full_name))
        return member.format(full_name, name[1:], args, flags, options)


class FormatTable(ABC):
    """Maps placeholder root names to Fmts."""

    @abstractmethod
    def get_fmt(self, name: str) -> Handle[Fmt] | None:
        """Look up (or produce) the Fmt called ``name``."""

    def format(self, text: str, config: EngineConfig | None = None) -> str:
        """Format ``text`` against this table, see ``pfmt.engine.format_string``."""
        from pfmt.engine import format_string

        return format_string(self, text, config)
