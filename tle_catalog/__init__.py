"""
TLE Catalog Package

This package retrieves NORAD Two-Line Element sets, decodes them into
structured records and keeps the latest record per satellite in a JSON cache.

Modules:
    assumed_decimal: Assumed-decimal-point number decoding
    epoch: TLE epoch to UTC instant
    tle_parser: Record splitting and fixed-column field extraction
    cache: Keyed cache, merge and snapshot persistence
    fetch: CelesTrak GP queries
    cli: Command-line entry point
"""

__version__ = "1.0.0"
