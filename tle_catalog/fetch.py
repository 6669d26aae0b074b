"""
CelesTrak GP fetch.

Retrieves raw TLE text from the CelesTrak general perturbations endpoint:

    https://celestrak.org/NORAD/elements/gp.php?GROUP=active&FORMAT=tle

Exactly one selector picks the element sets: a named group, a catalog number,
an international designator, a name fragment or a special data set.
"""

from typing import Optional

import requests

from config import config
from logging_config import get_logger

logger = get_logger(__name__)

GP_PATH = "/NORAD/elements/gp.php"


def build_query(
    group: Optional[str] = None,
    catnr: Optional[int] = None,
    intdes: Optional[str] = None,
    name: Optional[str] = None,
    special: Optional[str] = None,
) -> str:
    """
    Build a GP query string from a single selector.

    >>> build_query(group="active")
    'GROUP=active'
    >>> build_query(catnr=25544)
    'CATNR=25544'
    """
    selectors = {
        "GROUP": group,
        "CATNR": catnr,
        "INTDES": intdes,
        "NAME": name,
        "SPECIAL": special,
    }
    chosen = {key: value for key, value in selectors.items() if value is not None}
    if len(chosen) != 1:
        raise ValueError(
            f"Exactly one of group, catnr, intdes, name, special is required; got {len(chosen)}"
        )
    (key, value), = chosen.items()
    if key == "CATNR" and (not isinstance(value, int) or value < 0):
        raise ValueError(f"Catalog number must be a non-negative integer, got {value!r}")
    value = str(value).strip()
    if not value:
        raise ValueError(f"{key} selector is empty")
    return f"{key}={value}"


def gp_url(query: str, base_url: Optional[str] = None) -> str:
    base = (base_url or config.CELESTRAK_BASE).rstrip("/")
    return f"{base}{GP_PATH}?{query}&FORMAT=tle"


def fetch_tle(
    query: str,
    session: Optional[requests.Session] = None,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> str:
    """
    Fetch raw three-line TLE text for a GP query.

    Args:
        query: Query string such as "GROUP=active" (see ``build_query``)
        session: Optional requests session to reuse connections
        base_url: CelesTrak base URL (default from config)
        timeout: Request timeout in seconds (default from config)

    Returns:
        Response body as text

    Raises:
        requests.RequestException: On transport errors or HTTP error status
    """
    url = gp_url(query, base_url)
    http = session or requests
    try:
        response = http.get(url, timeout=timeout or config.REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error("fetch_failed", url=url, error=str(e))
        raise

    logger.info("fetch_complete", url=url, bytes=len(response.text))
    return response.text
