"""
TLE Catalog Configuration and Constants

This module contains runtime settings, decoding constants and an offline
fallback TLE blob used throughout the project.

Settings:
    Read from environment variables when the module is imported. Every
    setting has a default so the catalog runs without any environment.

Decoding constants:
    PIVOT_YEAR follows the NORAD two-digit year convention: years below 57
    belong to the 2000s, the rest to the 1900s (Sputnik, 1957).

Fallback TLE Data:
    A fixed sample of CelesTrak's weather group for demonstrations and testing
    when live data is unavailable.

    IMPORTANT: This data is a snapshot and goes stale quickly.
    - Low Earth Orbit (LEO) satellites: Update weekly
    - Geostationary (GEO): Update quarterly

    Current TLE epoch: 2024-06-17 (day 169)

    Sources for updated TLEs:
    - CelesTrak.org (public access)
    - Space-Track.org (requires free registration)
"""

import os

# NORAD TLE decoding constants
PIVOT_YEAR: int = 57  # yy < 57 -> 20yy, otherwise 19yy
DECIMAL_PLACES: int = 15  # rounding for assumed-decimal values (double precision)
MILLISECONDS_PER_DAY: int = 86_400_000
TLE_LINE_LENGTH: int = 69  # 68 data columns plus checksum


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class TLECatalogConfig:
    """Environment-driven settings for fetching and caching TLE data."""

    CELESTRAK_BASE = os.getenv("CELESTRAK_API_BASE", "https://celestrak.org")
    DEFAULT_QUERY = os.getenv("TLE_DEFAULT_QUERY", "GROUP=active")
    CACHE_PATH = os.getenv("TLE_CACHE_PATH", "./output/cache.json")
    REQUEST_TIMEOUT = float(os.getenv("TLE_REQUEST_TIMEOUT", "30"))
    STRICT_CHECKSUM = _env_flag("TLE_STRICT_CHECKSUM")
    LOG_JSON = _env_flag("TLE_LOG_JSON")


config = TLECatalogConfig()


# Fallback weather-group TLEs for offline use
# Last updated: 2024-06-17
FALLBACK_TLE_TEXT: str = """NOAA 15
1 25338U 98030A   24169.93801846  .00000329  00000+0  15393-3 0  9999
2 25338  98.5680 197.0492 0009520 328.5342  31.5268 14.26605440357297
DMSP 5D-3 F16 (USA 172)
1 28054U 03048A   24169.92781536  .00000136  00000+0  95636-4 0  9999
2 28054  99.0199 176.4030 0008260  55.9567   4.7973 14.14038707 66403
NOAA 18
1 28654U 05018A   24169.91608596  .00000284  00000+0  17494-3 0  9996
2 28654  98.8743 246.8749 0015146  64.1200 296.1532 14.13233021983273
METEOSAT-9 (MSG-2)
1 28912U 05049B   24169.73676108  .00000141  00000+0  00000+0 0  9994
2 28912   7.6876  60.8679 0001564   4.6631 152.0205  1.00278580 67739
GOES 14
1 35491U 09033A   24169.87063115 -.00000044  00000+0  00000+0 0  9997
2 35491   0.3405 104.0766 0003981 351.0753  16.3310  1.00272898 54803
NOAA 19
1 33591U 09005A   24169.86755025  .00000269  00000+0  16868-3 0  9993
2 33591  99.0469 225.6740 0012750 291.7508  68.2307 14.13028542791466
METEOSAT-11 (MSG-4)
1 40732U 15034A   24169.65792878  .00000086  00000+0  00000+0 0  9995
2 40732   1.3873  69.1260 0001841 153.0686 290.5885  1.00279233   539
ARKTIKA-M 1
1 47719U 21016A   24169.25177733  .00000188  00000+0  00000+0 0  9990
2 47719  63.1394 151.7679 6941537 268.6991  17.9346  2.00610662 24142
METEOR-M2 4
1 59051U 24039A   24169.90863199  .00000061  00000+0  46727-4 0  9991
2 59051  98.5975 131.7840 0008077 117.8947 242.3050 14.22232617 15594
"""
