from __future__ import annotations

import pytest

from pfmt import util
from pfmt.errors import SingleFmtError
from pfmt.util import Rounding


@pytest.mark.unit
@pytest.mark.parametrize(
    "width, expected",
    [("l10", "foobar    "), ("r10", "    foobar"), ("c10", "  foobar  "), ("c9", " foobar  "), ("l3", "foobar")],
)
def test_apply_width(width, expected):
    assert util.apply_width("foobar", {"width": width}) == expected


@pytest.mark.unit
@pytest.mark.parametrize("truncate, expected", [("l5", "67890"), ("r5", "12345"), ("r20", "1234567890")])
def test_apply_truncation(truncate, expected):
    assert util.apply_truncation("1234567890", {"truncate": truncate}) == expected


@pytest.mark.unit
def test_common_options_truncate_before_padding():
    options = {"truncate": "r3", "width": "r5"}
    assert util.apply_common_options("abcdef", options) == "  abc"


@pytest.mark.unit
@pytest.mark.parametrize(
    "options, bad",
    [
        ({"width": "x5"}, ("width", "x5")),
        ({"width": "l"}, ("width", "l")),
        ({"width": ""}, ("width", "")),
        ({"truncate": "c5"}, ("truncate", "c5")),
        ({"truncate": "r-1"}, ("truncate", "r-1")),
    ],
)
def test_invalid_common_options(options, bad):
    with pytest.raises(SingleFmtError) as excinfo:
        util.apply_common_options("x", options)
    assert excinfo.value == SingleFmtError.invalid_option_value(*bad)


@pytest.mark.unit
def test_parse_precision_and_rounding():
    assert util.parse_precision({}) is None
    assert util.parse_precision({"prec": "+3"}) == 3
    assert util.parse_precision({"prec": "-2"}) == -2
    assert util.parse_rounding({}) is Rounding.NEAREST
    assert util.parse_rounding({"round": "down"}) is Rounding.DOWN
    with pytest.raises(SingleFmtError) as excinfo:
        util.parse_precision({"prec": "1.5"})
    assert excinfo.value == SingleFmtError.invalid_option_value("prec", "1.5")
    with pytest.raises(SingleFmtError) as excinfo:
        util.parse_rounding({"round": "sideways"})
    assert excinfo.value == SingleFmtError.invalid_option_value("round", "sideways")


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, prec, rounding, expected",
    [
        (1235, -1, Rounding.NEAREST, 1240),
        (1235, -2, Rounding.NEAREST, 1200),
        (-1235, -1, Rounding.NEAREST, -1240),
        (-1235, -2, Rounding.NEAREST, -1200),
        (1231, -1, Rounding.UP, 1240),
        (-1239, -1, Rounding.UP, -1230),
        (1239, -1, Rounding.DOWN, 1230),
        (-1231, -1, Rounding.DOWN, -1240),
        (1235, 2, Rounding.NEAREST, 1235),
        (1235, None, Rounding.UP, 1235),
        (7, -1000, Rounding.NEAREST, 0),
        (7, -1000, Rounding.DOWN, 0),
        (-7, -1000, Rounding.UP, 0),
        (7, -1000, Rounding.UP, 10**1000),
        (-7, -1000, Rounding.DOWN, -(10**1000)),
    ],
)
def test_round_int_decimal(value, prec, rounding, expected):
    assert util.round_int(value, 10, prec, rounding) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, flags, options, expected",
    [
        (11, "b", {}, "1011"),
        (11, "o", {}, "13"),
        (11, "x", {}, "b"),
        (1, "bp", {}, "0b1"),
        (1, "op", {}, "0o1"),
        (1, "xp", {}, "0x1"),
        (-11, "b", {}, "-1011"),
        (-11, "o", {}, "-13"),
        (-11, "x", {}, "-b"),
        (-10, "xp", {}, "-0xa"),
        (10, "p", {}, "10"),
        (11, "bp", {}, "0b1011"),
        (11, "op", {}, "0o13"),
        (11, "xp", {}, "0xb"),
        (0, "xp", {}, "0x0"),
        (11, "xob", {}, "1011"),
        (0o124, "op", {"prec": "-1"}, "0o130"),
        (0o124, "op", {"prec": "-2"}, "0o100"),
        (0b1101, "bp", {"prec": "-1"}, "0b1110"),
        (0b1101, "bp", {"prec": "-2"}, "0b1100"),
        (0x1A2, "xp", {"prec": "-1"}, "0x1a0"),
        (0x1A2, "xp", {"prec": "-2"}, "0x200"),
    ],
)
def test_int_to_str(value, flags, options, expected):
    assert util.int_to_str(value, frozenset(flags), options) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, options, expected",
    [
        (-1.0, {}, "-1"),
        (0.25, {}, "0.25"),
        (1e22, {}, "10000000000000000000000"),
        (1234.5678, {"prec": "2"}, "1234.57"),
        (1.0, {"prec": "3"}, "1.000"),
        (1235.0, {"prec": "-1"}, "1240"),
        (0.2, {"prec": "0", "round": "up"}, "1"),
        (0.8, {"prec": "0", "round": "down"}, "0"),
        (0.5, {"prec": "0", "round": "nearest"}, "1"),
        (-0.5, {"prec": "0"}, "-1"),
        (-0.2, {"prec": "0"}, "0"),
        (float("nan"), {}, "nan"),
        (float("-inf"), {"prec": "2"}, "-inf"),
        (1.5, {"prec": "-1000"}, "0"),
        (1.5, {"prec": "-1000", "round": "up"}, "1" + "0" * 1000),
        (1e-300, {"prec": "2"}, "0.00"),
        (1e-300, {"prec": "2", "round": "up"}, "0.01"),
        (1.5, {"prec": "1000"}, "1.5" + "0" * 999),
    ],
)
def test_float_to_normal(value, options, expected):
    assert util.float_to_normal(value, options) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, options, expected",
    [
        (0.0625, {}, "6.25e-2"),
        (1000.123, {"prec": "2"}, "1.00012e3"),
        (1234567.891, {"prec": "-1"}, "1.23457e6"),
        (1.0, {}, "1e0"),
        (-1500.0, {}, "-1.5e3"),
        (0.0, {}, "0e0"),
        (float("inf"), {}, "inf"),
        (1.5, {"prec": "-1000"}, "0e0"),
        (1.5, {"prec": "-1000", "round": "up"}, "1e1000"),
        (-1.5, {"prec": "-1000", "round": "down"}, "-1e1000"),
    ],
)
def test_float_to_exp(value, options, expected):
    assert util.float_to_exp(value, options) == expected


@pytest.mark.unit
def test_float_options_are_validated_for_non_finite_values():
    with pytest.raises(SingleFmtError):
        util.float_to_normal(float("nan"), {"round": "bogus"})


@pytest.mark.unit
def test_add_sign():
    assert util.add_sign("1", 1, frozenset("+")) == "+1"
    assert util.add_sign("0", 0, frozenset("+")) == "+0"
    assert util.add_sign("-1", -1, frozenset("+")) == "-1"
    assert util.add_sign("1", 1, frozenset()) == "1"
    assert util.add_sign("nan", float("nan"), frozenset("+")) == "nan"
    assert util.add_sign("inf", float("inf"), frozenset("+")) == "+inf"


@pytest.mark.unit
def test_check_known_reports_smallest_flag_then_first_option():
    with pytest.raises(SingleFmtError) as excinfo:
        util.check_known(frozenset("zqa"), {}, frozenset("a"), frozenset())
    assert excinfo.value == SingleFmtError.unknown_flag("q")

    with pytest.raises(SingleFmtError) as excinfo:
        util.check_known(frozenset("a"), {"width": "l1", "foo": "", "bar": ""}, frozenset("a"), frozenset({"width"}))
    assert excinfo.value == SingleFmtError.unknown_option("foo")

    util.check_known(frozenset("a"), {"width": "l1"}, frozenset("a"), frozenset({"width"}))


@pytest.mark.unit
def test_join_name():
    assert util.join_name(("line", "start", "x")) == "line.start.x"


@pytest.mark.unit
def test_truncate_then_pad_on_ten_characters():
    options = {"truncate": "r5", "width": "l10"}
    assert util.apply_common_options("1234567890", options) == "12345     "


@pytest.mark.unit
@pytest.mark.parametrize(
    "convert, options",
    [
        (util.float_to_normal, {"prec": "-1000000"}),
        (util.float_to_exp, {"prec": "-1000000"}),
        (util.float_to_normal, {"prec": "99999999999999999999"}),
        (util.float_to_exp, {"prec": "99999999999999999999"}),
        (util.float_to_normal, {"prec": "1" * 5000}),
    ],
)
def test_precision_beyond_the_limit_is_invalid(convert, options):
    with pytest.raises(SingleFmtError) as excinfo:
        convert(1.5, options)
    assert excinfo.value == SingleFmtError.invalid_option_value("prec", options["prec"])


@pytest.mark.unit
def test_width_beyond_the_limit_is_invalid():
    with pytest.raises(SingleFmtError) as excinfo:
        util.apply_width("x", {"width": "l300000000"})
    assert excinfo.value == SingleFmtError.invalid_option_value("width", "l300000000")
