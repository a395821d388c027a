from __future__ import annotations

import json

import pytest

from pfmt.converters import PieceJSONEncoder, pieces_to_json
from pfmt.parser import parse


@pytest.mark.unit
def test_pieces_to_json():
    assert pieces_to_json(parse("x {a.b(1,{c}):xp:width={w}}")) == [
        {"type": "literal", "text": "x "},
        {
            "type": "placeholder",
            "name": ["a", "b"],
            "args": [
                [{"type": "literal", "text": "1"}],
                [{"type": "placeholder", "name": ["c"], "args": [], "flags": [], "options": {}}],
            ],
            "flags": ["p", "x"],
            "options": {
                "width": [{"type": "placeholder", "name": ["w"], "args": [], "flags": [], "options": {}}],
            },
        },
    ]


@pytest.mark.unit
def test_encoder_handles_pieces_and_flag_sets():
    pieces = parse("{i:+x}")
    encoded = json.loads(json.dumps({"pieces": pieces, "flags": pieces[0].flags}, cls=PieceJSONEncoder))
    assert encoded["pieces"][0]["flags"] == ["+", "x"]
    assert encoded["flags"] == ["+", "x"]
    with pytest.raises(TypeError):
        json.dumps(object(), cls=PieceJSONEncoder)
