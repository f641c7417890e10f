"""Git command line backend."""

import logging
import subprocess
from datetime import datetime
from pathlib import Path

from pplaces.vcs.base import CloneOutcome, VcsBackend

logger = logging.getLogger(__name__)

COMMIT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class GitError(RuntimeError):
    """Git could not be run or reported a failure."""


class GitOutputError(GitError):
    """Git produced output of an unexpected shape."""


def parse_remote_lines(output: str) -> list[str]:
    """Parse `git remote -v` output into `<url> (<direction>)` strings.

    Every non-empty line is kept, so a remote usually shows up twice
    (once for fetch, once for push).

    Raises:
        GitOutputError: If a non-empty line has no tab separator
    """
    remotes = []
    for line in output.split("\n"):
        if not line:
            continue
        _, sep, rest = line.partition("\t")
        if not sep:
            raise GitOutputError(f"Unexpected `git remote -v` line: {line!r}")
        remotes.append(rest)
    return remotes


def parse_commit_timestamp(output: str) -> datetime | None:
    """Parse `%ci` output (`YYYY-MM-DD HH:MM:SS +ZZZZ`) into a naive datetime.

    The timezone offset is discarded. Empty output means the repository
    has no commits and yields None.

    Raises:
        GitOutputError: If the output does not have that shape
    """
    text = output.strip()
    if not text:
        return None

    parts = text.split(" ")
    if len(parts) != 3:
        raise GitOutputError(f"Unexpected commit timestamp: {text!r}")

    try:
        return datetime.strptime(f"{parts[0]} {parts[1]}", COMMIT_DATE_FORMAT)
    except ValueError as e:
        raise GitOutputError(f"Unexpected commit timestamp: {text!r}") from e


class GitCLI(VcsBackend):
    """Backend that shells out to the git executable."""

    def __init__(self, executable: str = "git"):
        """Initialize with the git executable name or path."""
        self.executable = executable

    def _run(self, args: list[str], **kwargs) -> subprocess.CompletedProcess:
        cmd = [self.executable, *args]
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            return subprocess.run(cmd, text=True, check=False, **kwargs)
        except OSError as e:
            raise GitError(f"Failed to run {self.executable}: {e}") from e

    def _query(self, repo_path: Path, args: list[str]) -> subprocess.CompletedProcess:
        git_dir = str(Path(repo_path) / ".git")
        return self._run(
            ["--git-dir", git_dir, *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )

    def remotes(self, repo_path: Path) -> list[str]:
        """List remotes with `git remote -v`."""
        result = self._query(repo_path, ["remote", "-v"])
        if result.returncode != 0:
            raise GitError(
                f"git remote -v failed in {repo_path} ({result.returncode}): {result.stderr.strip()}"
            )
        return parse_remote_lines(result.stdout)

    def latest_commit(self, repo_path: Path) -> datetime | None:
        """Read the newest commit date with `git log -n 1 --format=%ci`."""
        # git exits with 128 on an unborn branch; empty stdout covers that case
        result = self._query(repo_path, ["log", "-n", "1", "--format=%ci"])
        return parse_commit_timestamp(result.stdout)

    def clone(self, args: list[str]) -> CloneOutcome:
        """Run `git clone` with the arguments verbatim, capturing stderr only."""
        result = self._run(["clone", *args], stderr=subprocess.PIPE)
        return CloneOutcome(returncode=result.returncode, stderr=result.stderr or "")
