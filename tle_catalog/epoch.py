"""
TLE Epoch Decoder

Converts the line 1 epoch field (two-digit year followed by a fractional day
of year, e.g. "24169.93801846") into an absolute UTC instant.

Time of day is derived from the fraction's decimal digits with integer
arithmetic, rounded half-up to the millisecond, so no floating-point error
accumulates between hours, minutes and seconds.
"""

import calendar
import re
from datetime import datetime, timedelta, timezone
from typing import NamedTuple

from config import MILLISECONDS_PER_DAY, PIVOT_YEAR
from tle_catalog.exceptions import MalformedRecord, UnsupportedEpochFormat

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_DIGITS = re.compile(r"[0-9]+")


class EpochInstant(NamedTuple):
    """UTC instant of a TLE epoch, held as integer milliseconds since 1970."""

    unix_ms: int

    @property
    def unix_seconds(self) -> int:
        """Whole seconds since the Unix epoch (floored)."""
        return self.unix_ms // 1000

    @property
    def as_datetime(self) -> datetime:
        return UNIX_EPOCH + timedelta(milliseconds=self.unix_ms)

    @property
    def iso8601(self) -> str:
        """RFC 3339 string; milliseconds are shown only when non-zero."""
        timespec = "milliseconds" if self.unix_ms % 1000 else "seconds"
        return self.as_datetime.isoformat(timespec=timespec)


def full_year(two_digit_year: int) -> int:
    """Expand a TLE two-digit year using the 1957 pivot."""
    if two_digit_year < PIVOT_YEAR:
        return 2000 + two_digit_year
    return 1900 + two_digit_year


def fraction_to_milliseconds(fraction_digits: str) -> int:
    """
    Convert the digits after the decimal point of a day fraction into
    milliseconds of day, rounding half-up.

    "5" -> 43_200_000, "18587073" -> 16_059_231
    """
    if not fraction_digits:
        return 0
    scale = 10 ** len(fraction_digits)
    return (int(fraction_digits) * MILLISECONDS_PER_DAY * 2 + scale) // (2 * scale)


def decode_epoch(value: str) -> EpochInstant:
    """
    Decode a TLE epoch field.

    Args:
        value: Epoch text, "YYDDD.FFFFFFFF"; surrounding whitespace is ignored

    Returns:
        EpochInstant for the encoded UTC instant

    Raises:
        UnsupportedEpochFormat: If there is no fractional-day separator
        MalformedRecord: If the year or day of year is not numeric or out of range
    """
    text = value.strip()
    if "." not in text:
        raise UnsupportedEpochFormat(text)

    year_text, day_text = text[:2], text[2:]
    whole, _, fraction = day_text.partition(".")
    whole = whole.strip()

    if not _DIGITS.fullmatch(year_text) or len(year_text) != 2:
        raise MalformedRecord("epoch", f"bad two-digit year in {text!r}")
    if not _DIGITS.fullmatch(whole) or (fraction and not _DIGITS.fullmatch(fraction)):
        raise MalformedRecord("epoch", f"bad day of year in {text!r}")

    year = full_year(int(year_text))
    day_of_year = int(whole)
    days_in_year = 366 if calendar.isleap(year) else 365
    if not 1 <= day_of_year <= days_in_year:
        raise MalformedRecord(
            "epoch", f"day {day_of_year} outside 1..{days_in_year} for {year}"
        )

    anchor_ms = calendar.timegm((year, 1, 1, 0, 0, 0)) * 1000
    unix_ms = (
        anchor_ms
        + (day_of_year - 1) * MILLISECONDS_PER_DAY
        + fraction_to_milliseconds(fraction)
    )
    return EpochInstant(unix_ms)
