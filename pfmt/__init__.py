"""
pfmt - runtime format strings.

Placeholders like ``{name.member(arg):flags:option=value}`` are resolved
against a format table and rendered by the Fmt the table returns.
"""

from pfmt.api import CompositeFmt, Fmt, FormatTable
from pfmt.config import EngineConfig, config_scope, current_config, load_config
from pfmt.engine import format_one, format_string, render
from pfmt.errors import (
    FormattingError,
    NotFormattableError,
    ParseError,
    PfmtError,
    SingleFmtError,
)
from pfmt.handle import Handle
from pfmt.leaves import BoolFmt, FloatFmt, IntFmt, RecordFmt, StrFmt, to_fmt
from pfmt.parser import parse
from pfmt.pieces import Literal, Piece, Placeholder
from pfmt.tables import ChainTable, DictTable, ListTable, ProducerTable, as_table
from pfmt.version import __version__

__all__ = [
    "BoolFmt",
    "ChainTable",
    "CompositeFmt",
    "DictTable",
    "EngineConfig",
    "FloatFmt",
    "Fmt",
    "FormatTable",
    "FormattingError",
    "Handle",
    "IntFmt",
    "ListTable",
    "Literal",
    "NotFormattableError",
    "ParseError",
    "PfmtError",
    "Piece",
    "Placeholder",
    "ProducerTable",
    "RecordFmt",
    "SingleFmtError",
    "StrFmt",
    "__version__",
    "as_table",
    "config_scope",
    "current_config",
    "format_one",
    "format_string",
    "load_config",
    "parse",
    "render",
    "to_fmt",
]
