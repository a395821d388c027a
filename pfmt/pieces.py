"""
Parsed representation of a format string.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, Tuple

ESCAPE = "\\"


def _escape(text: str, specials: str) -> str:
    return "".join(ESCAPE + ch if ch in specials else ch for ch in text)


@dataclass(frozen=True)
class Piece(ABC):
    """Base class for the pieces of a format string"""

    @abstractmethod
    def to_syntax(self) -> str:
        """Convert the piece back to format string syntax"""

    def _nested_syntax(self, specials: str) -> str:
        return self.to_syntax()


Pieces = Tuple[Piece, ...]


def _join(pieces: Iterable[Piece], emit: Callable[[Piece], str], separate: bool) -> str:
    # adjacent literals only come from a dropped ":" separator; put it back
    parts = []
    previous = None
    for piece in pieces:
        if separate and isinstance(previous, Literal) and isinstance(piece, Literal):
            parts.append(":")
        parts.append(emit(piece))
        previous = piece
    return "".join(parts)


def pieces_to_syntax(pieces: Iterable[Piece]) -> str:
    return _join(pieces, lambda piece: piece.to_syntax(), True)


def _nested_to_syntax(pieces: Iterable[Piece], specials: str, separate: bool) -> str:
    return _join(pieces, lambda piece: piece._nested_syntax(specials), separate)


@dataclass(frozen=True)
class Literal(Piece):
    """Literal text, emitted verbatim"""

    text: str

    def __str__(self) -> str:
        return self.text

    def to_syntax(self) -> str:
        return _escape(self.text, "\\{}:")

    def _nested_syntax(self, specials: str) -> str:
        return _escape(self.text, specials)


@dataclass(frozen=True)
class Placeholder(Piece):
    """A ``{name(args):flags:key=value}`` request for a formatted value

    Hashing uses the options sorted by key, since the ``options`` dict
    itself is not hashable.
    """

    name: Tuple[str, ...]
    args: Tuple[Pieces, ...] = ()
    flags: FrozenSet[str] = frozenset()
    options: Dict[str, Pieces] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Placeholder name cannot be empty")

    def __hash__(self) -> int:
        return hash((self.name, self.args, self.flags, tuple(sorted(self.options.items()))))

    @property
    def root(self) -> str:
        return self.name[0]

    @property
    def dotted_name(self) -> str:
        return ".".join(self.name)

    def __str__(self) -> str:
        return self.to_syntax()

    def to_syntax(self) -> str:
        res = "{" + self.dotted_name
        if self.args == ((),):
            # "()" would read back as no arguments at all
            res += "(:)"
        elif self.args:
            res += "(" + ",".join(
                _nested_to_syntax(arg, "\\{}:,)", True) for arg in self.args
            ) + ")"
        if self.flags or self.options:
            res += ":" + _escape("".join(sorted(self.flags)), "\\{}:")
        for key, value in self.options.items():
            res += ":" + _escape(key, "\\{}:=") + "=" + _nested_to_syntax(value, "\\{}:", False)
        return res + "}"
