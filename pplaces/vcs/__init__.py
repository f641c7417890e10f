"""Version control backends package."""

from pplaces.vcs.base import CloneOutcome, RepositoryRecord, VcsBackend
from pplaces.vcs.git import (
    GitCLI,
    GitError,
    GitOutputError,
    parse_commit_timestamp,
    parse_remote_lines,
)

__all__ = [
    "CloneOutcome",
    "RepositoryRecord",
    "VcsBackend",
    "GitCLI",
    "GitError",
    "GitOutputError",
    "parse_commit_timestamp",
    "parse_remote_lines",
]
