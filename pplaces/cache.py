"""Repository cache backed by a JSON file."""

import json
import logging
from datetime import datetime
from pathlib import Path

from pplaces.urls import InvalidRemoteURLError, canonical_suffix
from pplaces.vcs.base import RepositoryRecord

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = ".cache.json"

# json.JSONDecodeError is a ValueError
_LOAD_ERRORS = (ValueError, KeyError, TypeError, AttributeError)


class CacheNotFoundError(FileNotFoundError):
    """No usable cache exists where one is required."""


def _read_records(cache_path: Path) -> list[RepositoryRecord]:
    data = json.loads(cache_path.read_text())
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array in {cache_path}")
    return [RepositoryRecord.from_json(entry) for entry in data]


class RepoCache:
    """Cache of known local repositories, keyed by path."""

    def __init__(self, cache_path: Path, records: list[RepositoryRecord] | None = None):
        """Initialize cache from file, falling back to an empty cache."""
        self.cache_path = cache_path
        self._records: list[RepositoryRecord] = []

        if records is not None:
            self._records = list(records)
        elif cache_path.exists():
            try:
                self._records = _read_records(cache_path)
            except _LOAD_ERRORS as e:
                logger.warning(f"Ignoring unreadable cache {cache_path}: {e}")
                self._records = []

    @classmethod
    def require(cls, cache_path: Path) -> "RepoCache":
        """Load an existing cache, failing if there is none to load."""
        hint = f"No cache found at {cache_path}, run `pplaces scan <path>` first"
        if not cache_path.exists():
            raise CacheNotFoundError(hint)
        try:
            records = _read_records(cache_path)
        except _LOAD_ERRORS as e:
            raise CacheNotFoundError(f"{hint} ({e})") from e
        return cls(cache_path, records=records)

    @property
    def records(self) -> tuple[RepositoryRecord, ...]:
        """Current records in cache order."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, path: str) -> RepositoryRecord | None:
        """Return the record for a path, if any."""
        for record in self._records:
            if record.path == path:
                return record
        return None

    def merge(self, record: RepositoryRecord) -> None:
        """Insert a record, replacing any existing record with the same path."""
        for i, existing in enumerate(self._records):
            if existing.path == record.path:
                self._records[i] = record
                return
        self._records.append(record)

    def sort(self) -> None:
        """Order records newest commit first, records without commits last."""
        self._records.sort(
            key=lambda r: (r.last_commit is not None, r.last_commit or datetime.min),
            reverse=True,
        )

    def recent(self, since: datetime) -> list[RepositoryRecord]:
        """Records whose last commit is at or after `since`."""
        return [r for r in self._records if r.last_commit is not None and r.last_commit >= since]

    def find_by_canonical(self, suffix: str) -> RepositoryRecord | None:
        """Find the first record with a remote matching a canonical suffix."""
        for record in self._records:
            for remote in record.remotes:
                try:
                    if canonical_suffix(remote) == suffix:
                        return record
                except InvalidRemoteURLError:
                    # local path or other non-URL remote
                    continue
        return None

    def save(self) -> None:
        """Save cache to file."""
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        data = [record.to_json() for record in self._records]
        self.cache_path.write_text(json.dumps(data, indent=2))
