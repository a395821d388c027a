"""Standard Fmts for Python values."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping as MappingABC
from dataclasses import fields, is_dataclass
from typing import Any, Mapping, Sequence

from pfmt import util
from pfmt.api import CompositeFmt, Flags, Fmt, Name, Options
from pfmt.errors import NotFormattableError, SingleFmtError

COMMON_OPTIONS = frozenset({"width", "truncate"})
NUMERIC_OPTIONS = COMMON_OPTIONS | {"prec", "round"}


class LeafFmt(Fmt):
    """A value without members. Args are accepted and ignored."""

    known_flags: frozenset = frozenset()
    known_options: frozenset = COMMON_OPTIONS

    def __init__(self, value: Any, strict: bool = False):
        self.value = value
        self.strict = strict

    def format(
        self,
        full_name: Name,
        name: Name,
        args: Sequence[str],
        flags: Flags,
        options: Options,
    ) -> str:
        if name:
            raise SingleFmtError.unknown_subfmt(util.join_name(full_name))
        if self.strict:
            util.check_known(flags, options, self.known_flags, self.known_options)
        res = self.to_str(flags, options)
        return util.apply_common_options(res, options)

    @abstractmethod
    def to_str(self, flags: Flags, options: Options) -> str:
        """Render the bare value; common options are applied afterwards."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class BoolFmt(LeafFmt):
    """
    Flags:
    * ``y`` prints yes/no instead of true/false;
    * ``Y`` prints Y/N.
    Common options are recognised.
    """

    known_flags = frozenset("yY")

    def to_str(self, flags: Flags, options: Options) -> str:
        if "y" in flags:
            return "yes" if self.value else "no"
        if "Y" in flags:
            return "Y" if self.value else "N"
        return "true" if self.value else "false"


class IntFmt(LeafFmt):
    """
    Flags:
    * ``+`` forces display of the sign;
    * ``b``, ``o``, ``x`` switch to binary, octal, hexadecimal output;
    * ``p`` adds the base prefix (``0b``, ``0o``, ``0x``) to those.
    Common and common numeric options are recognised; ``prec`` >= 0 has no
    effect on integers.
    """

    known_flags = frozenset("+bopx")
    known_options = NUMERIC_OPTIONS

    def to_str(self, flags: Flags, options: Options) -> str:
        res = util.int_to_str(self.value, flags, options)
        return util.add_sign(res, self.value, flags)


class FloatFmt(LeafFmt):
    """
    Flags:
    * ``+`` forces display of the sign;
    * ``e`` switches to exponential notation.
    Common and common numeric options are recognised.
    """

    known_flags = frozenset("+e")
    known_options = NUMERIC_OPTIONS

    def to_str(self, flags: Flags, options: Options) -> str:
        if "e" in flags:
            res = util.float_to_exp(self.value, options)
        else:
            res = util.float_to_normal(self.value, options)
        return util.add_sign(res, self.value, flags)


class StrFmt(LeafFmt):
    """No flags; common options are recognised."""

    def to_str(self, flags: Flags, options: Options) -> str:
        return self.value


class RecordFmt(CompositeFmt):
    """
    Namespace-only Fmt over named member values.

    Members are wrapped with ``to_fmt`` when accessed, so nested mappings,
    sequences and dataclasses are reachable with dots to any depth.
    """

    def __init__(self, members: Mapping[str, Any], strict: bool = False):
        self.members = members
        self.strict = strict

    def member(self, key: str) -> Fmt | None:
        if key not in self.members:
            return None
        return to_fmt(self.members[key], strict=self.strict)

    def __repr__(self) -> str:
        return f"RecordFmt({list(self.members)!r})"


def to_fmt(value: Any, strict: bool = False) -> Fmt:
    """Wrap a Python value in the matching standard Fmt."""
    if isinstance(value, Fmt):
        return value
    # bool first: bool is an int subclass
    if isinstance(value, bool):
        return BoolFmt(value, strict=strict)
    if isinstance(value, int):
        return IntFmt(value, strict=strict)
    if isinstance(value, float):
        return FloatFmt(value, strict=strict)
    if isinstance(value, str):
        return StrFmt(value, strict=strict)
    if isinstance(value, MappingABC):
        return RecordFmt({str(k): v for k, v in value.items()}, strict=strict)
    if isinstance(value, (list, tuple)):
        return RecordFmt({str(i): v for i, v in enumerate(value)}, strict=strict)
    if is_dataclass(value) and not isinstance(value, type):
        return RecordFmt({f.name: getattr(value, f.name) for f in fields(value)}, strict=strict)
    type_name = f"{type(value).__module__}.{type(value).__name__}"
    raise NotFormattableError(f"Value type '{type_name}' is not formattable")
