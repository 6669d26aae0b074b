"""
TLE Cache

Keeps the most recent OrbitalRecord per catalog number and persists the set
as a JSON snapshot:

    {"last_bulk_update": 1718748281, "tles": [{...}, {...}]}

Records are keyed by catalog number; a merge replaces an existing entry in
place (its position in the snapshot is kept) and appends unseen satellites.
"""

import time
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, Optional, Union

from config import config
from logging_config import get_logger
from tle_catalog.exceptions import CatalogEntryNotFound
from tle_catalog.fetch import fetch_tle
from tle_catalog.models import CacheSnapshot, OrbitalRecord
from tle_catalog.tle_parser import BatchResult, TLEParser

logger = get_logger(__name__)

PathLike = Union[str, Path]
Fetcher = Callable[[], str]


def _now() -> int:
    return int(time.time())


def default_fetcher(query: Optional[str] = None) -> Fetcher:
    """Fetcher bound to the configured CelesTrak query."""
    return lambda: fetch_tle(query or config.DEFAULT_QUERY)


class TLECache:
    """
    Keyed collection of decoded TLEs.

    Args:
        records: Initial records; later duplicates replace earlier ones
        last_bulk_update: Unix time of the last full merge, 0 if never merged
    """

    def __init__(
        self,
        records: Iterable[OrbitalRecord] = (),
        last_bulk_update: int = 0,
    ):
        self._records: Dict[int, OrbitalRecord] = {}
        for record in records:
            self._records[record.catalog_number] = record
        self.last_bulk_update = last_bulk_update
        # Decode result of the most recent update(), None until one runs
        self.last_result: Optional[BatchResult] = None

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, catalog_number) -> bool:
        return catalog_number in self._records

    def __iter__(self) -> Iterator[OrbitalRecord]:
        return iter(self._records.values())

    @property
    def records(self):
        return list(self._records.values())

    def get_tle(self, catalog_number: int) -> OrbitalRecord:
        """Return the cached record for a catalog number."""
        try:
            return self._records[catalog_number]
        except KeyError:
            raise CatalogEntryNotFound(catalog_number) from None

    def merge(self, records: Iterable[OrbitalRecord], now: Optional[int] = None) -> "TLECache":
        """
        Upsert a decoded batch by catalog number, then stamp the bulk update.

        Existing entries are replaced wholesale, never merged field by field.
        """
        added = replaced = 0
        for record in records:
            if record.catalog_number in self._records:
                replaced += 1
            else:
                added += 1
            self._records[record.catalog_number] = record

        self.last_bulk_update = _now() if now is None else now
        logger.info(
            "cache_merged",
            added=added,
            replaced=replaced,
            total=len(self._records),
            last_bulk_update=self.last_bulk_update,
        )
        return self

    def update(self, fetcher: Optional[Fetcher] = None, strict: bool = False) -> BatchResult:
        """
        Fetch fresh TLE text, decode it and merge the successful records.

        Returns:
            The decode result, so callers can report rejected records
        """
        fetcher = fetcher or default_fetcher()
        result = TLEParser(strict=strict).parse_batch(fetcher())
        self.merge(result.records)
        self.last_result = result
        return result

    def to_snapshot(self) -> CacheSnapshot:
        return CacheSnapshot(last_bulk_update=self.last_bulk_update, tles=self.records)

    @classmethod
    def from_snapshot(cls, snapshot: CacheSnapshot) -> "TLECache":
        return cls(snapshot.tles, last_bulk_update=snapshot.last_bulk_update)

    def to_file(self, path: PathLike) -> None:
        """Write the cache as pretty-printed JSON, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_snapshot().model_dump_json(by_alias=True, indent=4))
        logger.info("cache_saved", path=str(path), records=len(self))

    @classmethod
    def from_file(cls, path: PathLike) -> "TLECache":
        """Read a cache snapshot written by ``to_file``."""
        snapshot = CacheSnapshot.model_validate_json(Path(path).read_text())
        cache = cls.from_snapshot(snapshot)
        logger.info("cache_loaded", path=str(path), records=len(cache))
        return cache


def load_tle_cache(
    path: Optional[PathLike] = None,
    fetcher: Optional[Fetcher] = None,
    strict: bool = False,
) -> TLECache:
    """
    Load the cache snapshot at ``path``, or build a new cache from a fetch.

    A fresh cache is built when no path is given or the file does not exist.
    Records rejected during that first decode are skipped; they are available
    as ``cache.last_result.failures``. A loaded snapshot has no ``last_result``.
    """
    if path is not None and Path(path).exists():
        return TLECache.from_file(path)

    logger.info("cache_bootstrap", path=str(path) if path is not None else None)
    cache = TLECache()
    cache.update(fetcher, strict=strict)
    return cache
