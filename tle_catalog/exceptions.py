"""Exception classes for TLE catalog errors."""


class TLEError(Exception):
    """Base exception for TLE catalog errors."""

    pass


class TruncatedInput(TLEError):
    """Input ended part-way through a three-line record."""

    def __init__(self, leftover_lines):
        self.leftover_lines = list(leftover_lines)
        super().__init__(
            f"Input ends with {len(self.leftover_lines)} line(s) that do not "
            f"form a complete three-line record"
        )


class MalformedRecord(TLEError):
    """A TLE field could not be extracted or decoded."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class UnsupportedEpochFormat(TLEError):
    """Epoch field has no fractional-day separator."""

    def __init__(self, value: str):
        self.field = "epoch"
        self.value = value
        super().__init__(f"epoch {value!r} has no fractional-day separator")


class CatalogEntryNotFound(TLEError, KeyError):
    """No record with the requested catalog number is cached."""

    def __init__(self, catalog_number: int):
        self.catalog_number = catalog_number
        super().__init__(f"No TLE cached for satellite #{catalog_number}")

    def __str__(self):
        return self.args[0]
