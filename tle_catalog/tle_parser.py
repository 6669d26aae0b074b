"""
TLE Parser Module

Decodes NORAD three-line element sets (title line, line 1, line 2) into
OrbitalRecord instances.

The format is fixed-width: every field lives at the same columns regardless of
its content. The column layout is written down once, in LINE1_FIELDS and
LINE2_FIELDS, and a single extraction routine consults it. Column numbers are
1-indexed and inclusive, as in the NORAD documentation:

    1 25544U 98067A   20045.18587073  .00000950  00000-0  25302-4 0  9990
    2 25544  51.6443 242.0161 0004885 264.6060 207.3845 15.49165514212791
"""

import re
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

from pydantic import ValidationError

from config import TLE_LINE_LENGTH
from logging_config import get_logger
from tle_catalog.assumed_decimal import parse_decimal_point_assumed
from tle_catalog.epoch import decode_epoch
from tle_catalog.exceptions import MalformedRecord, TLEError, TruncatedInput
from tle_catalog.models import OrbitalRecord

logger = get_logger(__name__)

# Field decode kinds
INT = "int"
FLOAT = "float"
CHAR = "char"
TEXT = "text"
EPOCH = "epoch"
ASSUMED_DECIMAL = "assumed_decimal"
UNSIGNED_ASSUMED_DECIMAL = "unsigned_assumed_decimal"

_UNSIGNED_INT = re.compile(r"[0-9]+")
_FIXED_POINT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")


class FieldSpec(NamedTuple):
    name: str
    line: int
    start: int
    end: int
    kind: str


LINE1_FIELDS = (
    FieldSpec("catalog_number", 1, 3, 7, INT),
    FieldSpec("classification", 1, 8, 8, CHAR),
    FieldSpec("international_designator", 1, 10, 17, TEXT),
    FieldSpec("epoch", 1, 19, 32, EPOCH),
    FieldSpec("first_derivative_mean_motion", 1, 34, 43, FLOAT),
    FieldSpec("second_derivative_mean_motion", 1, 45, 52, ASSUMED_DECIMAL),
    FieldSpec("drag_term", 1, 54, 61, ASSUMED_DECIMAL),
    FieldSpec("ephemeris_type", 1, 63, 63, INT),
    FieldSpec("element_set_number", 1, 65, 68, INT),
)

LINE2_FIELDS = (
    FieldSpec("catalog_number", 2, 3, 7, INT),
    FieldSpec("inclination", 2, 9, 16, FLOAT),
    FieldSpec("right_ascension", 2, 18, 25, FLOAT),
    FieldSpec("eccentricity", 2, 27, 33, UNSIGNED_ASSUMED_DECIMAL),
    FieldSpec("argument_of_perigee", 2, 35, 42, FLOAT),
    FieldSpec("mean_anomaly", 2, 44, 51, FLOAT),
    FieldSpec("mean_motion", 2, 53, 63, FLOAT),
    FieldSpec("revolution_number", 2, 64, 68, INT),
)


class SplitResult(NamedTuple):
    """Complete three-line groups plus any trailing partial group."""

    groups: List[Tuple[str, str, str]]
    leftover: List[str]

    @property
    def truncation(self) -> Optional[TruncatedInput]:
        return TruncatedInput(self.leftover) if self.leftover else None

    def raise_for_truncation(self) -> None:
        if self.leftover:
            raise TruncatedInput(self.leftover)


class RecordFailure(NamedTuple):
    index: int
    lines: Tuple[str, ...]
    error: TLEError


class BatchResult(NamedTuple):
    records: List[OrbitalRecord]
    failures: List[RecordFailure]

    @property
    def ok(self) -> bool:
        return not self.failures


def split_tle(text: str) -> SplitResult:
    """
    Group a raw TLE blob into (title, line 1, line 2) triples.

    Grouping is positional over the non-blank lines; a trailing group of one
    or two lines is returned in ``leftover`` rather than dropped.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    complete = len(lines) - len(lines) % 3
    groups = [
        (lines[i], lines[i + 1], lines[i + 2]) for i in range(0, complete, 3)
    ]
    return SplitResult(groups, lines[complete:])


def compute_checksum(line: str) -> int:
    """Modulo-10 TLE checksum of the first 68 columns ('-' counts as 1)."""
    checksum = 0
    for char in line[: TLE_LINE_LENGTH - 1]:
        if char.isdigit():
            checksum += int(char)
        elif char == "-":
            checksum += 1
    return checksum % 10


def verify_checksum(line: str, line_number: int) -> None:
    if len(line) < TLE_LINE_LENGTH:
        raise MalformedRecord("checksum", f"line {line_number} has no checksum column")
    expected = line[TLE_LINE_LENGTH - 1]
    actual = compute_checksum(line)
    if expected != str(actual):
        raise MalformedRecord(
            "checksum", f"line {line_number} checksum is {actual}, column 69 says {expected!r}"
        )


def _check_length(line: str, fields: Sequence[FieldSpec]) -> None:
    for spec in fields:
        if len(line) < spec.end:
            raise MalformedRecord(
                spec.name,
                f"line {spec.line} too short: {len(line)} columns, "
                f"field needs columns {spec.start}-{spec.end}",
            )


def extract_field(line: str, spec: FieldSpec) -> Any:
    """Slice one field out of a line and decode it according to its kind."""
    if len(line) < spec.end:
        raise MalformedRecord(spec.name, f"line {spec.line} too short")

    raw = line[spec.start - 1 : spec.end]
    text = raw.strip()

    if spec.kind == INT:
        if not _UNSIGNED_INT.fullmatch(text):
            raise MalformedRecord(spec.name, f"expected an unsigned integer, got {text!r}")
        return int(text)

    if spec.kind == FLOAT:
        if not _FIXED_POINT.fullmatch(text):
            raise MalformedRecord(spec.name, f"expected a decimal number, got {text!r}")
        return float(text)

    if spec.kind == CHAR:
        if not text:
            raise MalformedRecord(spec.name, "missing classification character")
        return raw

    if spec.kind == TEXT:
        return text

    if spec.kind == EPOCH:
        return decode_epoch(raw)

    if spec.kind in (ASSUMED_DECIMAL, UNSIGNED_ASSUMED_DECIMAL):
        if spec.kind == UNSIGNED_ASSUMED_DECIMAL and text[:1] in ("-", "+"):
            raise MalformedRecord(spec.name, f"unsigned field carries a sign: {text!r}")
        try:
            return parse_decimal_point_assumed(text)
        except ValueError as e:
            raise MalformedRecord(spec.name, str(e)) from e

    raise ValueError(f"Unknown field kind {spec.kind!r}")


class TLEParser:
    """
    Parser for three-line element sets.

    Args:
        strict: Also verify the column 69 checksum of both lines
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def parse_tle(self, line1: str, line2: str, name: str = "") -> OrbitalRecord:
        """
        Parse TLE lines into an OrbitalRecord.

        Args:
            line1: First line of TLE
            line2: Second line of TLE
            name: Satellite name from the title line

        Returns:
            Decoded record

        Raises:
            MalformedRecord: If any field is missing or cannot be decoded
            UnsupportedEpochFormat: If the epoch has no fractional day
        """
        line1 = line1.strip()
        line2 = line2.strip()

        for number, line in ((1, line1), (2, line2)):
            if not line.startswith(str(number)):
                raise MalformedRecord(
                    "line_number", f"line {number} starts with {line[:1]!r}"
                )
            if self.strict:
                verify_checksum(line, number)

        _check_length(line1, LINE1_FIELDS)
        _check_length(line2, LINE2_FIELDS)

        values: Dict[str, Any] = {}
        for spec in LINE1_FIELDS:
            values[spec.name] = extract_field(line1, spec)
        for spec in LINE2_FIELDS:
            value = extract_field(line2, spec)
            if spec.name in values and values[spec.name] != value:
                raise MalformedRecord(
                    spec.name,
                    f"line 2 has {value}, line 1 has {values[spec.name]}",
                )
            values[spec.name] = value

        epoch = values.pop("epoch")
        try:
            return OrbitalRecord(
                name=name.strip(),
                epoch_timestamp=epoch.unix_seconds,
                epoch_iso8601=epoch.iso8601,
                **values,
            )
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or "record"
            raise MalformedRecord(field, error["msg"]) from e

    def parse_group(self, lines: Sequence[str]) -> OrbitalRecord:
        """Parse one (title, line 1, line 2) group."""
        if len(lines) != 3:
            raise MalformedRecord("record", f"expected 3 lines, got {len(lines)}")
        name, line1, line2 = lines
        return self.parse_tle(line1, line2, name)

    def parse_batch(self, text: str) -> BatchResult:
        """
        Decode every record in a raw TLE blob.

        A record that fails to decode is reported in ``failures`` and does not
        stop the remaining records. A trailing partial group is reported as a
        TruncatedInput failure.
        """
        split = split_tle(text)
        records: List[OrbitalRecord] = []
        failures: List[RecordFailure] = []

        for index, group in enumerate(split.groups):
            try:
                records.append(self.parse_group(group))
            except TLEError as e:
                logger.warning(
                    "record_rejected",
                    index=index,
                    name=group[0].strip(),
                    field=getattr(e, "field", None),
                    error=str(e),
                )
                failures.append(RecordFailure(index, tuple(group), e))

        truncation = split.truncation
        if truncation is not None:
            logger.warning("input_truncated", leftover=len(split.leftover))
            failures.append(
                RecordFailure(len(split.groups), tuple(split.leftover), truncation)
            )

        logger.info("batch_decoded", records=len(records), failures=len(failures))
        return BatchResult(records, failures)


def parse_tle_batch(text: str, strict: bool = False) -> BatchResult:
    """Decode a raw TLE blob with a default parser."""
    return TLEParser(strict=strict).parse_batch(text)
