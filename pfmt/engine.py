"""
pfmt Engine module - resolves placeholders against a format table

Every placeholder is looked up independently, its arguments and option
values are rendered first (pre-order, left to right), and the Fmt returned by
the table is called with the full name and the unconsumed remainder.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pfmt.api import FormatTable
from pfmt.config import EngineConfig, config_scope
from pfmt.errors import FormattingError, ParseError, SingleFmtError
from pfmt.parser import parse
from pfmt.pieces import Literal, Piece, Placeholder

logger = logging.getLogger("pfmt.engine")


def format_one(table: FormatTable, piece: Piece) -> str:
    """Render a single piece"""
    if isinstance(piece, Literal):
        return piece.text
    if not isinstance(piece, Placeholder):
        raise TypeError(f"Unknown piece type: {type(piece).__name__}")

    handle = table.get_fmt(piece.root)
    if handle is None:
        logger.debug("No format for %s", piece.dotted_name)
        raise FormattingError.unknown_fmt(piece.dotted_name)

    with handle as fmt:
        args = [render(table, arg) for arg in piece.args]
        options = {key: render(table, value) for key, value in piece.options.items()}
        try:
            result = fmt.format(piece.name, piece.name[1:], args, piece.flags, options)
        except SingleFmtError as err:
            logger.debug("Formatting %s failed: %r", piece.dotted_name, err)
            raise FormattingError.from_leaf(err) from err
    logger.debug("Resolved %s -> %r", piece.dotted_name, result)
    return result


def render(table: FormatTable, pieces: Iterable[Piece]) -> str:
    """Concatenate the rendering of ``pieces`` in order"""
    return "".join(format_one(table, piece) for piece in pieces)


def format_string(
    table: FormatTable, text: str, config: Optional[EngineConfig] = None
) -> str:
    """
    Parse ``text`` and render it against ``table``

    Args:
        table: Table that resolves placeholder root names
        text: The format string
        config: Optional configuration installed for the duration of the call

    Returns:
        The fully rendered string; there is no partial output

    Raises:
        FormattingError: on the first parse or formatting failure
    """
    if config is not None:
        with config_scope(config):
            return format_string(table, text)
    try:
        pieces = parse(text)
    except ParseError as err:
        logger.debug("Parsing %r failed: %r", text, err)
        raise FormattingError.from_parse(err) from err
    return render(table, pieces)
