"""Repository scanner: finds git repositories under a directory."""

import logging
import os
from pathlib import Path

from pplaces.cache import RepoCache
from pplaces.vcs.base import RepositoryRecord, VcsBackend

logger = logging.getLogger(__name__)

GIT_DIR_NAME = ".git"


def is_repository(path: Path) -> bool:
    """A directory is a repository when it directly contains a `.git` directory."""
    return (path / GIT_DIR_NAME).is_dir()


def find_repositories(root: Path) -> list[Path]:
    """Find repository roots under root, depth-first in name order.

    A recognized repository ends that branch of the walk. Filesystem
    errors are not caught.
    """
    root = Path(root)
    if is_repository(root):
        return [root]

    found: list[Path] = []
    with os.scandir(root) as it:
        entries = sorted(it, key=lambda e: e.name)

    for entry in entries:
        if entry.name == GIT_DIR_NAME or not entry.is_dir():
            continue
        found.extend(find_repositories(Path(entry.path)))
    return found


def scan(root: Path, backend: VcsBackend) -> list[RepositoryRecord]:
    """Fetch a record for every repository under root."""
    records = []
    for repo_path in find_repositories(root):
        logger.debug(f"Found repository {repo_path}")
        records.append(backend.fetch_record(repo_path))
    return records


def scan_into(root: Path, cache: RepoCache, backend: VcsBackend) -> list[RepositoryRecord]:
    """Scan root and fold the results into cache, then re-sort it.

    Returns:
        The records produced by this scan
    """
    records = scan(root, backend)
    for record in records:
        cache.merge(record)
    cache.sort()
    logger.info(f"Scanned {len(records)} repositories under {root}, {len(cache)} in cache")
    return records
