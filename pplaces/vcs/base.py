"""VCS backend interface and base types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path


@dataclass
class RepositoryRecord:
    """Cached metadata for one local repository."""

    path: str
    remotes: list[str] = field(default_factory=list)
    last_commit: datetime | None = None

    @classmethod
    def from_json(cls, data: dict) -> "RepositoryRecord":
        """Create RepositoryRecord from a cache file entry."""
        remotes = data.get("upstream")
        if remotes is None:
            remotes = data.get("remotes") or []
        latest = data.get("latest_commit")
        return cls(
            path=data["path"],
            remotes=list(remotes),
            last_commit=datetime.fromisoformat(latest) if latest else None,
        )

    def to_json(self) -> dict:
        """Serialize to the cache file entry format."""
        return {
            "path": self.path,
            "upstream": list(self.remotes),
            "latest_commit": self.last_commit.isoformat() if self.last_commit else None,
        }


@dataclass
class CloneOutcome:
    """Result of running the external clone command."""

    returncode: int
    stderr: str = ""


class VcsBackend(ABC):
    """Abstract base class for the tool that answers repository queries."""

    @abstractmethod
    def remotes(self, repo_path: Path) -> list[str]:
        """List remotes as `<url> (<direction>)` strings, in tool order."""
        pass

    @abstractmethod
    def latest_commit(self, repo_path: Path) -> datetime | None:
        """Return the timestamp of the newest commit, or None without commits."""
        pass

    @abstractmethod
    def clone(self, args: list[str]) -> CloneOutcome:
        """Run a clone with the given arguments passed through untouched."""
        pass

    def fetch_record(self, repo_path: Path) -> RepositoryRecord:
        """Build the record for a repository root.

        Args:
            repo_path: Directory that contains the `.git` directory

        Returns:
            RepositoryRecord with remotes and last commit filled in
        """
        remotes = self.remotes(repo_path)
        last_commit = self.latest_commit(repo_path)
        return RepositoryRecord(path=str(repo_path), remotes=remotes, last_commit=last_commit)
