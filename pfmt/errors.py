"""
pfmt error taxonomy.

Three tiers, each a closed set of kinds:

* ``ParseError`` - structural problems found while parsing a format string;
* ``SingleFmtError`` - semantic problems raised by a single ``Fmt``;
* ``FormattingError`` - everything the caller of ``format_string`` can see.

Parse and leaf errors are lifted into ``FormattingError`` by total, 1:1
mappings that keep the payload. The only collapse is ``UNKNOWN_SUBFMT``,
which surfaces as ``UNKNOWN_FMT`` alongside unknown root names.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Tuple


class ParseErrorKind(str, Enum):
    EMPTY_NAME = "E_EMPTY_NAME"
    UNTERMINATED_ARGUMENT_LIST = "E_UNTERMINATED_ARGUMENT_LIST"
    UNTERMINATED_PLACEHOLDER = "E_UNTERMINATED_PLACEHOLDER"
    UNEXPECTED_CHARACTER = "E_UNEXPECTED_CHARACTER"
    NESTING_TOO_DEEP = "E_NESTING_TOO_DEEP"


class LeafErrorKind(str, Enum):
    UNKNOWN_FLAG = "E_UNKNOWN_FLAG"
    UNKNOWN_OPTION = "E_UNKNOWN_OPTION"
    INVALID_OPTION_VALUE = "E_INVALID_OPTION_VALUE"
    NAMESPACE_ONLY_FMT = "E_NAMESPACE_ONLY_FMT"
    UNKNOWN_SUBFMT = "E_UNKNOWN_SUBFMT"


class FormattingErrorKind(str, Enum):
    EMPTY_NAME = "E_EMPTY_NAME"
    UNTERMINATED_ARGUMENT_LIST = "E_UNTERMINATED_ARGUMENT_LIST"
    UNTERMINATED_PLACEHOLDER = "E_UNTERMINATED_PLACEHOLDER"
    UNEXPECTED_CHARACTER = "E_UNEXPECTED_CHARACTER"
    NESTING_TOO_DEEP = "E_NESTING_TOO_DEEP"
    UNKNOWN_FLAG = "E_UNKNOWN_FLAG"
    UNKNOWN_OPTION = "E_UNKNOWN_OPTION"
    INVALID_OPTION_VALUE = "E_INVALID_OPTION_VALUE"
    NAMESPACE_ONLY_FMT = "E_NAMESPACE_ONLY_FMT"
    UNKNOWN_FMT = "E_UNKNOWN_FMT"


_MESSAGES: Dict[str, str] = {
    "E_EMPTY_NAME": "Placeholder has an empty name segment: {0!r}",
    "E_UNTERMINATED_ARGUMENT_LIST": "Argument list is not terminated: {0!r}",
    "E_UNTERMINATED_PLACEHOLDER": "Placeholder is not terminated: {0!r}",
    "E_UNEXPECTED_CHARACTER": "Unexpected character in format string: {0!r}",
    "E_NESTING_TOO_DEEP": "Placeholders are nested too deeply: {0!r}",
    "E_UNKNOWN_FLAG": "Unknown flag: {0!r}",
    "E_UNKNOWN_OPTION": "Unknown option: {0!r}",
    "E_INVALID_OPTION_VALUE": "Invalid value {1!r} for option {0!r}",
    "E_NAMESPACE_ONLY_FMT": "'{0}' can only be used through its members",
    "E_UNKNOWN_SUBFMT": "Unknown member: '{0}'",
    "E_UNKNOWN_FMT": "Unknown placeholder: '{0}'",
}


class NotFormattableError(TypeError):
    """A value has no standard Fmt."""


class PfmtError(Exception):
    """Base class for all pfmt errors: a kind plus its payload."""

    def __init__(self, kind: Enum, *payload: Any):
        self.kind = kind
        self.payload: Tuple[Any, ...] = tuple(payload)
        super().__init__(self.format_message())

    @property
    def code(self) -> str:
        return str(self.kind.value)

    def format_message(self) -> str:
        template = _MESSAGES.get(self.code)
        if template is None:
            return f"{self.code}: {self.payload!r}"
        return template.format(*self.payload)

    def diagnostic(self) -> Dict[str, Any]:
        """Machine-friendly view for API payloads."""
        return {
            "code": self.code,
            "message": self.format_message(),
            "payload": list(self.payload),
        }

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.kind == other.kind and self.payload == other.payload

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.kind, self.payload))

    def __repr__(self) -> str:
        args = ", ".join(repr(p) for p in self.payload)
        return f"{type(self).__name__}.{self.kind.name}({args})"


class ParseError(PfmtError):
    """Raised when a format string is not well-formed."""

    kind: ParseErrorKind

    @classmethod
    def empty_name(cls, raw: str) -> "ParseError":
        return cls(ParseErrorKind.EMPTY_NAME, raw)

    @classmethod
    def unterminated_argument_list(cls, raw: str) -> "ParseError":
        return cls(ParseErrorKind.UNTERMINATED_ARGUMENT_LIST, raw)

    @classmethod
    def unterminated_placeholder(cls, raw: str) -> "ParseError":
        return cls(ParseErrorKind.UNTERMINATED_PLACEHOLDER, raw)

    @classmethod
    def unexpected_character(cls, raw: str) -> "ParseError":
        return cls(ParseErrorKind.UNEXPECTED_CHARACTER, raw)

    @classmethod
    def nesting_too_deep(cls, raw: str) -> "ParseError":
        return cls(ParseErrorKind.NESTING_TOO_DEEP, raw)


class SingleFmtError(PfmtError):
    """Raised by an individual ``Fmt`` while formatting one placeholder."""

    kind: LeafErrorKind

    @classmethod
    def unknown_flag(cls, flag: str) -> "SingleFmtError":
        return cls(LeafErrorKind.UNKNOWN_FLAG, flag)

    @classmethod
    def unknown_option(cls, option: str) -> "SingleFmtError":
        return cls(LeafErrorKind.UNKNOWN_OPTION, option)

    @classmethod
    def invalid_option_value(cls, option: str, value: str) -> "SingleFmtError":
        return cls(LeafErrorKind.INVALID_OPTION_VALUE, option, value)

    @classmethod
    def namespace_only_fmt(cls, path: str) -> "SingleFmtError":
        return cls(LeafErrorKind.NAMESPACE_ONLY_FMT, path)

    @classmethod
    def unknown_subfmt(cls, path: str) -> "SingleFmtError":
        return cls(LeafErrorKind.UNKNOWN_SUBFMT, path)


_PARSE_TO_AGGREGATE: Dict[ParseErrorKind, FormattingErrorKind] = {
    ParseErrorKind.EMPTY_NAME: FormattingErrorKind.EMPTY_NAME,
    ParseErrorKind.UNTERMINATED_ARGUMENT_LIST: FormattingErrorKind.UNTERMINATED_ARGUMENT_LIST,
    ParseErrorKind.UNTERMINATED_PLACEHOLDER: FormattingErrorKind.UNTERMINATED_PLACEHOLDER,
    ParseErrorKind.UNEXPECTED_CHARACTER: FormattingErrorKind.UNEXPECTED_CHARACTER,
    ParseErrorKind.NESTING_TOO_DEEP: FormattingErrorKind.NESTING_TOO_DEEP,
}

_LEAF_TO_AGGREGATE: Dict[LeafErrorKind, FormattingErrorKind] = {
    LeafErrorKind.UNKNOWN_FLAG: FormattingErrorKind.UNKNOWN_FLAG,
    LeafErrorKind.UNKNOWN_OPTION: FormattingErrorKind.UNKNOWN_OPTION,
    LeafErrorKind.INVALID_OPTION_VALUE: FormattingErrorKind.INVALID_OPTION_VALUE,
    LeafErrorKind.NAMESPACE_ONLY_FMT: FormattingErrorKind.NAMESPACE_ONLY_FMT,
    LeafErrorKind.UNKNOWN_SUBFMT: FormattingErrorKind.UNKNOWN_FMT,
}


class FormattingError(PfmtError):
    """Any error that can happen while formatting a string."""

    kind: FormattingErrorKind

    @classmethod
    def from_parse(cls, err: ParseError) -> "FormattingError":
        return cls(_PARSE_TO_AGGREGATE[err.kind], *err.payload)

    @classmethod
    def from_leaf(cls, err: SingleFmtError) -> "FormattingError":
        return cls(_LEAF_TO_AGGREGATE[err.kind], *err.payload)

    @classmethod
    def empty_name(cls, raw: str) -> "FormattingError":
        return cls(FormattingErrorKind.EMPTY_NAME, raw)

    @classmethod
    def unterminated_argument_list(cls, raw: str) -> "FormattingError":
        return cls(FormattingErrorKind.UNTERMINATED_ARGUMENT_LIST, raw)

    @classmethod
    def unterminated_placeholder(cls, raw: str) -> "FormattingError":
        return cls(FormattingErrorKind.UNTERMINATED_PLACEHOLDER, raw)

    @classmethod
    def unexpected_character(cls, raw: str) -> "FormattingError":
        return cls(FormattingErrorKind.UNEXPECTED_CHARACTER, raw)

    @classmethod
    def nesting_too_deep(cls, raw: str) -> "FormattingError":
        return cls(FormattingErrorKind.NESTING_TOO_DEEP, raw)

    @classmethod
    def unknown_flag(cls, flag: str) -> "FormattingError":
        return cls(FormattingErrorKind.UNKNOWN_FLAG, flag)

    @classmethod
    def unknown_option(cls, option: str) -> "FormattingError":
        return cls(FormattingErrorKind.UNKNOWN_OPTION, option)

    @classmethod
    def invalid_option_value(cls, option: str, value: str) -> "FormattingError":
        return cls(FormattingErrorKind.INVALID_OPTION_VALUE, option, value)

    @classmethod
    def namespace_only_fmt(cls, path: str) -> "FormattingError":
        return cls(FormattingErrorKind.NAMESPACE_ONLY_FMT, path)

    @classmethod
    def unknown_fmt(cls, path: str) -> "FormattingError":
        return cls(FormattingErrorKind.UNKNOWN_FMT, path)
