"""
Assumed Decimal Point Decoder

NORAD packs small signed quantities (second derivative of mean motion, the
B* drag term, eccentricity) into fixed-width fields without a decimal point.
The point sits in front of the first mantissa digit and an optional trailing
exponent carries its own sign:

    " 14141-3"  ->  0.14141e-3
    "-36258-4"  -> -0.36258e-4
    " 00000+0"  ->  0.0
    "0004885"   ->  0.0004885   (eccentricity, no exponent)
"""

import re

from config import DECIMAL_PLACES

_DIGITS = re.compile(r"[0-9]+")


def _exponent_marker(body: str) -> int:
    """Index of the rightmost exponent sign, or -1 when there is none."""
    return max(body.rfind("+"), body.rfind("-"))


def parse_decimal_point_assumed(value: str) -> float:
    """
    Decode an assumed-decimal-point field into a float.

    Args:
        value: Field text; surrounding whitespace is ignored

    Returns:
        mantissa * 10**exponent rounded to DECIMAL_PLACES

    Raises:
        ValueError: If the mantissa or exponent is not a digit string
    """
    text = value.strip()
    if not text:
        raise ValueError("empty assumed-decimal field")

    sign = ""
    body = text
    if body[0] in "+-":
        sign = "-" if body[0] == "-" else ""
        body = body[1:]

    marker = _exponent_marker(body)
    if marker == -1:
        digits, exponent = body, None
    else:
        digits, exponent_text = body[:marker], body[marker:]
        if not _DIGITS.fullmatch(exponent_text[1:]):
            raise ValueError(f"bad exponent in {text!r}")
        exponent = int(exponent_text)

    if not _DIGITS.fullmatch(digits):
        raise ValueError(f"bad mantissa in {text!r}")

    mantissa = float(f"{sign}0.{digits}")
    if mantissa == 0.0:
        return 0.0
    if exponent is None:
        return mantissa

    return round(mantissa * 10.0 ** exponent, DECIMAL_PLACES)
