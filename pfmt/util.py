"""
Option and flag handling shared by the standard Fmts.

Common options (``width``, ``truncate``) apply to every standard Fmt;
common numeric options (``prec``, ``round``) to the numeric ones. Every
malformed value is reported as ``InvalidOptionValue(option, value)``.
"""

from __future__ import annotations

from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    ROUND_CEILING,
    ROUND_FLOOR,
    ROUND_HALF_UP,
    Context,
    Decimal,
)
from enum import Enum
from typing import AbstractSet, FrozenSet, Iterable, Mapping, Sequence
import math
import re

from pfmt.config import current_config
from pfmt.errors import SingleFmtError

_WIDTH_RE = re.compile(r"([lcr])([0-9]+)")
_TRUNCATE_RE = re.compile(r"([lr])([0-9]+)")
_PREC_RE = re.compile(r"[+-]?[0-9]+")

_BASE_FLAGS = (("b", 2, "0b"), ("o", 8, "0o"), ("x", 16, "0x"))
_BASE_FORMATS = {2: "b", 8: "o", 10: "d", 16: "x"}


def join_name(full_name: Sequence[str]) -> str:
    """Rejoin name segments with dots, for diagnostics."""
    return ".".join(full_name)


def _bounded_int(option: str, raw: str, digits: str, limit: int) -> int:
    """The integer in ``digits``; ``raw`` is invalid if its magnitude exceeds ``limit``."""
    try:
        value = int(digits)
    except ValueError:
        # beyond the interpreter's integer string conversion limit
        raise SingleFmtError.invalid_option_value(option, raw) from None
    if abs(value) > limit:
        raise SingleFmtError.invalid_option_value(option, raw)
    return value


# ----------------- general formatting options -----------------


class Justification(Enum):
    LEFT = "l"
    CENTER = "c"
    RIGHT = "r"


class Rounding(str, Enum):
    UP = "up"
    DOWN = "down"
    NEAREST = "nearest"


_DECIMAL_ROUNDING = {
    Rounding.UP: ROUND_CEILING,
    Rounding.DOWN: ROUND_FLOOR,
    Rounding.NEAREST: ROUND_HALF_UP,
}


def apply_common_options(s: str, options: Mapping[str, str]) -> str:
    """Truncate, then pad."""
    s = apply_truncation(s, options)
    return apply_width(s, options)


def apply_width(s: str, options: Mapping[str, str]) -> str:
    width_str = options.get("width")
    if width_str is None:
        return s
    match = _WIDTH_RE.fullmatch(width_str)
    if match is None:
        raise SingleFmtError.invalid_option_value("width", width_str)
    justification = Justification(match.group(1))
    width = _bounded_int("width", width_str, match.group(2), current_config().max_width)
    if len(s) >= width:
        return s
    delta = width - len(s)
    if justification is Justification.LEFT:
        return s + " " * delta
    if justification is Justification.RIGHT:
        return " " * delta + s
    left = delta // 2
    return " " * left + s + " " * (delta - left)


def apply_truncation(s: str, options: Mapping[str, str]) -> str:
    opt_str = options.get("truncate")
    if opt_str is None:
        return s
    match = _TRUNCATE_RE.fullmatch(opt_str)
    if match is None:
        raise SingleFmtError.invalid_option_value("truncate", opt_str)
    keep = int(match.group(2))
    if len(s) <= keep:
        return s
    if match.group(1) == "l":
        # "l": the left part is cut off
        return s[len(s) - keep:]
    return s[:keep]


# ----------------- numeric formatting -----------------


def parse_precision(options: Mapping[str, str]) -> int | None:
    prec = options.get("prec")
    if prec is None:
        return None
    if _PREC_RE.fullmatch(prec) is None:
        raise SingleFmtError.invalid_option_value("prec", prec)
    return _bounded_int("prec", prec, prec, current_config().max_precision)


def parse_rounding(options: Mapping[str, str]) -> Rounding:
    value = options.get("round")
    if value is None:
        return Rounding.NEAREST
    try:
        return Rounding(value)
    except ValueError:
        raise SingleFmtError.invalid_option_value("round", value) from None


def round_int(value: int, base: int, prec: int | None, rounding: Rounding) -> int:
    """Round ``value`` to a multiple of ``base ** -prec`` when ``prec`` is negative."""
    if prec is None or prec >= 0:
        return value
    digits = len(format(abs(value), _BASE_FORMATS[base]))
    toward_zero = Rounding.UP if value < 0 else Rounding.DOWN
    if -prec > digits and rounding in (Rounding.NEAREST, toward_zero):
        # |value| is below half the multiple and rounds to zero
        return 0
    multiple = base ** (-prec)
    if rounding is Rounding.UP:
        return -((-value) // multiple) * multiple
    if rounding is Rounding.DOWN:
        return (value // multiple) * multiple
    quotient, remainder = divmod(abs(value), multiple)
    if 2 * remainder >= multiple:
        quotient += 1
    magnitude = quotient * multiple
    return -magnitude if value < 0 else magnitude


def int_base(flags: AbstractSet[str]) -> tuple[int, str]:
    """Base and prefix selected by the ``b``/``o``/``x`` flags."""
    for flag, base, prefix in _BASE_FLAGS:
        if flag in flags:
            return base, prefix
    return 10, ""


def int_to_str(value: int, flags: AbstractSet[str], options: Mapping[str, str]) -> str:
    base, prefix = int_base(flags)
    value = round_int(value, base, parse_precision(options), parse_rounding(options))
    digits = format(abs(value), _BASE_FORMATS[base])
    if "p" not in flags:
        prefix = ""
    sign = "-" if value < 0 else ""
    return sign + prefix + digits


def _non_finite(value: float) -> str | None:
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return None


def _round_past_magnitude(number: Decimal, prec: int, rounding: Rounding) -> Decimal:
    """``number`` rounded to ``10 ** -prec`` when that exceeds ten times ``|number|``."""
    negative = number.is_signed()
    away_from_zero = Rounding.DOWN if negative else Rounding.UP
    if number and rounding is away_from_zero:
        return Decimal((int(negative), (1,), -prec))
    return Decimal((0, (0,), -max(prec, 0)))


def _quantize(value: float, options: Mapping[str, str]) -> Decimal | None:
    """Round to ``10 ** -prec`` if ``prec`` is set; None otherwise."""
    prec = parse_precision(options)
    rounding = parse_rounding(options)
    if prec is None or not math.isfinite(value):
        return None
    number = Decimal(repr(value))
    if -prec > number.adjusted() + 1:
        return _round_past_magnitude(number, prec, rounding)
    try:
        # enough working digits and exponent range for the quantized coefficient
        context = Context(
            prec=max(28, number.adjusted() + prec + 2), Emax=MAX_EMAX, Emin=MIN_EMIN
        )
        quantized = number.quantize(
            Decimal((0, (1,), -prec)), rounding=_DECIMAL_ROUNDING[rounding], context=context
        )
    except (ArithmeticError, ValueError):
        raise SingleFmtError.invalid_option_value("prec", options["prec"]) from None
    if not quantized:
        quantized = quantized.copy_abs()
    return quantized


def float_to_normal(value: float, options: Mapping[str, str]) -> str:
    special = _non_finite(value)
    quantized = _quantize(value, options)
    if special is not None:
        return special
    if quantized is not None:
        return format(quantized, "f")
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def float_to_exp(value: float, options: Mapping[str, str]) -> str:
    special = _non_finite(value)
    quantized = _quantize(value, options)
    if special is not None:
        return special
    if quantized is None:
        number = Decimal(repr(value)).normalize()
    else:
        number = quantized
    sign, digits, _ = number.as_tuple()
    exponent = number.adjusted()
    if not any(digits):
        digits, exponent = (0,), 0
    mantissa = str(digits[0])
    if len(digits) > 1:
        mantissa += "." + "".join(str(d) for d in digits[1:])
    return ("-" if sign else "") + f"{mantissa}e{exponent}"


def add_sign(s: str, value: float, flags: AbstractSet[str]) -> str:
    """Prefix an explicit "+" to non-negative values when the "+" flag is set."""
    if isinstance(value, float) and math.isnan(value):
        return s
    if "+" in flags and not s.startswith("-") and not value < 0:
        return "+" + s
    return s


# ----------------- strictness -----------------


def check_known(
    flags: Iterable[str],
    options: Mapping[str, str],
    known_flags: FrozenSet[str],
    known_options: FrozenSet[str],
) -> None:
    unknown = sorted(set(flags) - known_flags)
    if unknown:
        raise SingleFmtError.unknown_flag(unknown[0])
    for key in options:
        if key not in known_options:
            raise SingleFmtError.unknown_option(key)
