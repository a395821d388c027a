"""
pfmt Parser module - format strings to pieces

Tokenization is done by a Lark lexer; the placeholder structure itself
(nested arguments and option values) is walked by a small recursive-descent
parser over the token stream, which keeps the error payloads exact.
"""

import logging
from typing import Dict, FrozenSet, List, Optional, Tuple

from lark import Lark, Token

from pfmt.config import MAX_NESTING_DEPTH_LIMIT, current_config
from pfmt.errors import ParseError
from pfmt.pieces import Literal, Piece, Pieces, Placeholder

logger = logging.getLogger("pfmt.parser")

# Lark grammar for format string tokens
grammar = r"""
    start: (ESCAPE | LBRACE | RBRACE | COLON | DOT | COMMA | LPAR | RPAR | EQUALS | TEXT)*

    // A lone backslash at the very end escapes nothing and stays literal
    ESCAPE: /\\[\s\S]?/
    LBRACE: "{"
    RBRACE: "}"
    COLON: ":"
    DOT: "."
    COMMA: ","
    LPAR: "("
    RPAR: ")"
    EQUALS: "="
    TEXT: /[^\\{}:.,()=]+/
"""

lexer = Lark(grammar, start="start", parser="lalr", lexer="basic")


def _unescape(token: Token) -> str:
    # "\x" -> "x"; a trailing lone "\" stays a backslash
    return token.value[1:] or token.value


class _PieceParser:
    """Recursive-descent parser over the token list of one format string"""

    def __init__(self, text: str, max_depth: int):
        self.text = text
        self.tokens: List[Token] = list(lexer.lex(text))
        self.pos = 0
        self.max_depth = max_depth

    # ----------------- token helpers -----------------

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def raw(self, start: int, token: Optional[Token] = None) -> str:
        """Source text from ``start`` through ``token`` (or to end of input)"""
        if token is None:
            return self.text[start:]
        return self.text[start:token.end_pos]

    # ----------------- sequences -----------------

    def parse_sequence(self, context: str, depth: int, start: int = 0) -> Pieces:
        """
        Parse literal runs and placeholders until the context's terminator.

        ``context`` is one of:
        - "top": runs to end of input;
        - "arg": stops before "," or ")"; "}" or end of input means the
          argument list of the placeholder opened at ``start`` is unterminated;
        - "value": stops before ":" or "}"; end of input means the placeholder
          opened at ``start`` is unterminated.
        """
        pieces: List[Piece] = []
        buf: List[str] = []

        def flush() -> None:
            if buf:
                pieces.append(Literal("".join(buf)))
                buf.clear()

        while True:
            token = self.peek()
            if token is None:
                if context == "arg":
                    raise ParseError.unterminated_argument_list(self.raw(start))
                if context == "value":
                    raise ParseError.unterminated_placeholder(self.raw(start))
                break
            kind = token.type
            if context == "arg" and kind in ("COMMA", "RPAR"):
                break
            if context == "value" and kind in ("COLON", "RBRACE"):
                break
            if kind == "RBRACE":
                if context == "arg":
                    raise ParseError.unterminated_argument_list(self.raw(start, token))
                raise ParseError.unexpected_character(self.raw(token.start_pos, token))
            self.advance()
            if kind == "ESCAPE":
                buf.append(_unescape(token))
            elif kind == "COLON":
                flush()
            elif kind == "LBRACE":
                flush()
                pieces.append(self.parse_placeholder(token.start_pos, depth + 1))
            else:
                buf.append(token.value)
        flush()
        return tuple(pieces)

    # ----------------- placeholders -----------------

    def parse_placeholder(self, start: int, depth: int) -> Placeholder:
        """Parse a placeholder body; the opening "{" at ``start`` is consumed"""
        if depth > self.max_depth:
            raise ParseError.nesting_too_deep(self.raw(start))

        name = self.parse_name(start)
        args: Tuple[Pieces, ...] = ()
        flags: FrozenSet[str] = frozenset()
        options: Dict[str, Pieces] = {}

        token = self.peek()
        if token is not None and token.type == "LPAR":
            self.advance()
            args = self.parse_args(start, depth)
            token = self.peek()
            if token is None:
                raise ParseError.unterminated_placeholder(self.raw(start))
            if token.type not in ("COLON", "RBRACE"):
                raise ParseError.unexpected_character(self.raw(start, token))

        if token is not None and token.type == "COLON":
            self.advance()
            flags = self.parse_flags(start)
            token = self.peek()
            if token is not None and token.type == "COLON":
                self.advance()
                options = self.parse_options(start, depth)

        # parse_name/parse_flags/parse_options only return in front of "}"
        self.advance()
        return Placeholder(tuple(name), args, flags, options)

    def parse_name(self, start: int) -> List[str]:
        segments: List[str] = []
        buf: List[str] = []
        while True:
            token = self.peek()
            if token is None:
                raise ParseError.unterminated_placeholder(self.raw(start))
            kind = token.type
            if kind in ("LPAR", "COLON", "RBRACE"):
                segments.append("".join(buf))
                if any(not segment for segment in segments):
                    raise ParseError.empty_name(self.raw(start, token))
                return segments
            if kind in ("ESCAPE", "LBRACE"):
                raise ParseError.unexpected_character(self.raw(start, token))
            self.advance()
            if kind == "DOT":
                segments.append("".join(buf))
                buf = []
            else:
                buf.append(token.value)

    def parse_args(self, start: int, depth: int) -> Tuple[Pieces, ...]:
        token = self.peek()
        if token is not None and token.type == "RPAR":
            self.advance()
            return ()
        args: List[Pieces] = []
        while True:
            args.append(self.parse_sequence("arg", depth, start))
            # parse_sequence("arg") only returns in front of "," or ")"
            if self.advance().type == "RPAR":
                return tuple(args)

    def parse_flags(self, start: int) -> FrozenSet[str]:
        flags = set()
        while True:
            token = self.peek()
            if token is None:
                raise ParseError.unterminated_placeholder(self.raw(start))
            kind = token.type
            if kind in ("COLON", "RBRACE"):
                return frozenset(flags)
            if kind == "LBRACE":
                raise ParseError.unexpected_character(self.raw(start, token))
            self.advance()
            flags.update(_unescape(token) if kind == "ESCAPE" else token.value)

    def parse_options(self, start: int, depth: int) -> Dict[str, Pieces]:
        options: Dict[str, Pieces] = {}
        while True:
            token = self.peek()
            if token is None:
                raise ParseError.unterminated_placeholder(self.raw(start))
            if token.type == "RBRACE":
                return options
            if token.type == "COLON":
                self.advance()
                continue
            key = self.parse_option_key(start)
            value: Pieces = ()
            if self.peek().type == "EQUALS":
                self.advance()
                value = self.parse_sequence("value", depth, start)
            options[key] = value

    def parse_option_key(self, start: int) -> str:
        buf: List[str] = []
        while True:
            token = self.peek()
            if token is None:
                raise ParseError.unterminated_placeholder(self.raw(start))
            kind = token.type
            if kind in ("EQUALS", "COLON", "RBRACE"):
                return "".join(buf)
            if kind == "LBRACE":
                raise ParseError.unexpected_character(self.raw(start, token))
            self.advance()
            buf.append(_unescape(token) if kind == "ESCAPE" else token.value)


def parse(text: str, max_depth: Optional[int] = None) -> List[Piece]:
    """
    Parse a format string into pieces

    Args:
        text: The format string
        max_depth: Maximum placeholder nesting depth; defaults to the
            configured ``max_nesting_depth``; at most ``MAX_NESTING_DEPTH_LIMIT``

    Returns:
        The ordered list of literal and placeholder pieces

    Raises:
        ParseError: if the format string is not well-formed
        ValueError: if ``max_depth`` is out of range
    """
    if max_depth is None:
        max_depth = current_config().max_nesting_depth
    elif not 1 <= max_depth <= MAX_NESTING_DEPTH_LIMIT:
        raise ValueError(
            f"max_depth must be between 1 and {MAX_NESTING_DEPTH_LIMIT}, got {max_depth}"
        )
    parser = _PieceParser(text, max_depth)
    pieces = list(parser.parse_sequence("top", 0))
    logger.debug("Parsed %d pieces from %r", len(pieces), text)
    return pieces
