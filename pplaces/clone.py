"""Clone guard that skips repositories already present locally."""

import logging
from dataclasses import dataclass

from pplaces.cache import RepoCache
from pplaces.urls import canonical_suffix, is_remote_url
from pplaces.vcs.base import VcsBackend

logger = logging.getLogger(__name__)


class CloneUsageError(ValueError):
    """Clone arguments contain no remote URL."""


@dataclass
class CloneResult:
    """Outcome of a guarded clone."""

    url: str
    existing_path: str | None = None
    returncode: int = 0
    stderr: str = ""

    @property
    def skipped(self) -> bool:
        return self.existing_path is not None


def find_url_argument(args: list[str]) -> str:
    """Return the first argument that looks like a remote URL."""
    for arg in args:
        if is_remote_url(arg):
            return arg
    raise CloneUsageError("No repository URL (http... or git@...) found in clone arguments")


def guarded_clone(args: list[str], cache: RepoCache, backend: VcsBackend) -> CloneResult:
    """Clone unless a cached repository already has the same remote.

    Args:
        args: Arguments for `git clone`, forwarded verbatim
        cache: Cache of known repositories
        backend: Backend that performs the clone

    Returns:
        CloneResult with existing_path set when the clone was skipped
    """
    url = find_url_argument(args)
    suffix = canonical_suffix(url)

    existing = cache.find_by_canonical(suffix)
    if existing is not None:
        logger.info(f"{suffix} already cloned at {existing.path}")
        return CloneResult(url=url, existing_path=existing.path)

    outcome = backend.clone(args)
    if outcome.returncode == 0:
        # the new clone is not added to the cache
        logger.info(f"Cloned {url}; run `pplaces scan` to add it to the cache")
    return CloneResult(url=url, returncode=outcome.returncode, stderr=outcome.stderr)
