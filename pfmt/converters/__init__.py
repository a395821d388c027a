"""
pfmt Piece Converters package

This package contains converters to transform parsed pieces into various formats.
"""

from .json_converter import pieces_to_json, PieceJSONEncoder

__all__ = ['pieces_to_json', 'PieceJSONEncoder']
