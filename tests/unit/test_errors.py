from __future__ import annotations

import pytest

from pfmt.errors import (
    FormattingError,
    FormattingErrorKind,
    LeafErrorKind,
    ParseError,
    ParseErrorKind,
    PfmtError,
    SingleFmtError,
)


@pytest.mark.unit
def test_every_parse_kind_lifts_with_the_same_payload():
    for kind in ParseErrorKind:
        lifted = FormattingError.from_parse(ParseError(kind, "{raw"))
        assert lifted.kind.name == kind.name
        assert lifted.payload == ("{raw",)


@pytest.mark.unit
def test_every_leaf_kind_lifts_and_subfmt_collapses():
    for kind in LeafErrorKind:
        lifted = FormattingError.from_leaf(SingleFmtError(kind, "a.b"))
        if kind is LeafErrorKind.UNKNOWN_SUBFMT:
            assert lifted.kind is FormattingErrorKind.UNKNOWN_FMT
        else:
            assert lifted.kind.name == kind.name
        assert lifted.payload == ("a.b",)


@pytest.mark.unit
def test_invalid_option_value_keeps_both_fields():
    lifted = FormattingError.from_leaf(SingleFmtError.invalid_option_value("width", "x5"))
    assert lifted == FormattingError.invalid_option_value("width", "x5")
    assert lifted.payload == ("width", "x5")


@pytest.mark.unit
def test_equality_is_by_class_kind_and_payload():
    assert ParseError.empty_name("{}") == ParseError.empty_name("{}")
    assert ParseError.empty_name("{}") != ParseError.empty_name("{a.}")
    assert ParseError.empty_name("{}") != FormattingError.empty_name("{}")
    assert hash(SingleFmtError.unknown_flag("x")) == hash(SingleFmtError.unknown_flag("x"))


@pytest.mark.unit
def test_diagnostic_and_message():
    err = FormattingError.unknown_fmt("a.b")
    assert isinstance(err, PfmtError)
    assert err.code == "E_UNKNOWN_FMT"
    assert "a.b" in str(err)
    assert err.diagnostic() == {
        "code": "E_UNKNOWN_FMT",
        "message": "Unknown placeholder: 'a.b'",
        "payload": ["a.b"],
    }
    assert repr(err) == "FormattingError.UNKNOWN_FMT('a.b')"


@pytest.mark.unit
def test_messages_exist_for_every_code():
    for kind in list(FormattingErrorKind) + list(LeafErrorKind):
        message = PfmtError(kind, "p", "q").format_message()
        assert not message.startswith("E_")
