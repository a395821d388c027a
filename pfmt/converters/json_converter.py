"""
JSON converter for parsed pieces
"""

from typing import Any, Dict, Iterable, List
import json

from pfmt.pieces import Literal, Piece, Placeholder


class PieceJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, Piece):
            return piece_to_json(o)
        if isinstance(o, (set, frozenset)):
            return sorted(o)
        return super().default(o)


def piece_to_json(piece: Piece) -> Dict[str, Any]:
    """Convert a single piece to a JSON-serializable dictionary"""
    if isinstance(piece, Literal):
        return {"type": "literal", "text": piece.text}
    if isinstance(piece, Placeholder):
        return {
            "type": "placeholder",
            "name": list(piece.name),
            "args": [pieces_to_json(arg) for arg in piece.args],
            "flags": sorted(piece.flags),
            "options": {key: pieces_to_json(value) for key, value in piece.options.items()},
        }
    raise TypeError(f"Unknown piece type: {type(piece).__name__}")


def pieces_to_json(pieces: Iterable[Piece]) -> List[Dict[str, Any]]:
    """Convert pieces to a list of dictionaries

    Args:
        pieces: Pieces as returned by ``pfmt.parse``

    Returns:
        One dictionary per piece; nested argument and option value sequences
        are converted recursively
    """
    return [piece_to_json(piece) for piece in pieces]
