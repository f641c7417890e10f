"""pplaces - Main entry point."""

import argparse
import json
import logging
import re
import sys
from datetime import datetime, timedelta
from pathlib import Path

from dateutil.relativedelta import relativedelta

from pplaces.cache import CacheNotFoundError, RepoCache
from pplaces.clone import CloneUsageError, guarded_clone
from pplaces.config import Config, default_config_dir, load_config
from pplaces.scanner import scan_into
from pplaces.urls import InvalidRemoteURLError
from pplaces.vcs import GitCLI, GitError, RepositoryRecord

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

GLOBAL_OPTIONS_WITH_VALUE = {"-d", "--days-to-show", "--since", "--config-dir"}


def parse_since(since_value: str, now: datetime | None = None) -> datetime:
    """Parse --since value to the earliest commit time still shown.

    Supports:
    - Relative time: 7d (days), 12h (hours), 1m (months)
    - ISO date: 2024-12-10

    Raises:
        ValueError: If the value matches neither form
    """
    now = now or datetime.now()

    match = re.match(r"^(\d+)([hdm])$", since_value.lower())
    if match:
        amount = int(match.group(1))
        unit = match.group(2)

        if unit == "h":
            return now - timedelta(hours=amount)
        elif unit == "d":
            return now - timedelta(days=amount)
        return now - relativedelta(months=amount)

    return datetime.fromisoformat(since_value)


def print_paths(records) -> None:
    for record in records:
        print(record.path)


def print_full(records: list[RepositoryRecord]) -> None:
    print(json.dumps([r.to_json() for r in records], indent=2))


def run_scan(path: Path, config: Config, since: datetime) -> int:
    """Scan path, update the cache on disk and print recent repositories."""
    if not path.is_dir():
        raise NotADirectoryError(f"{path} is not a directory")

    cache = RepoCache(config.cache_path)
    backend = GitCLI(config.git_executable)
    scan_into(path, cache, backend)
    cache.save()

    print_paths(cache.recent(since))
    return EXIT_OK


def run_show(config: Config, since: datetime, full: bool = False) -> int:
    """Print cached repositories."""
    cache = RepoCache.require(config.cache_path)
    if full:
        print_full(list(cache.records))
    else:
        print_paths(cache.recent(since))
    return EXIT_OK


def run_clone(args: list[str], config: Config) -> int:
    """Clone unless the repository is already known."""
    cache = RepoCache.require(config.cache_path)
    result = guarded_clone(args, cache, GitCLI(config.git_executable))

    if result.skipped:
        print(f"Repository already cloned at {result.existing_path}")
        return EXIT_OK

    if result.stderr:
        print(result.stderr, end="", file=sys.stderr)
    return result.returncode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pplaces",
        description="Keep track of local git repositories",
    )
    parser.add_argument("-d", "--days-to-show", type=int, default=None, help="Show repos with a commit in the last N days")
    parser.add_argument("--since", type=str, help="Time range: relative (7d, 12h, 1m) or ISO date (YYYY-MM-DD)")
    parser.add_argument("--config-dir", type=str, default=None, help="Directory holding config.json and the cache")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan", help="Recursively look for git repositories in given path")
    scan_parser.add_argument("path", type=str)

    show_parser = subparsers.add_parser("show", help="Show cached git repos")
    show_parser.add_argument("--full", action="store_true", help="Print every cached record with its metadata")

    subparsers.add_parser("clone", help="Wrapper around git clone that skips repos already cloned")

    return parser


def split_clone_args(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split off everything after the `clone` command so it reaches git untouched.

    argparse.REMAINDER cannot start with an option-like argument such as
    --depth, so clone arguments never go through the parser.
    """
    i = 0
    while i < len(argv):
        token = argv[i]
        if token in GLOBAL_OPTIONS_WITH_VALUE:
            i += 2
            continue
        if token.startswith("-"):
            i += 1
            continue
        if token == "clone":
            return argv[: i + 1], argv[i + 1 :]
        break
    return argv, []


def main(argv: list[str] | None = None) -> int:
    """Run the pplaces command line."""
    argv = sys.argv[1:] if argv is None else list(argv)

    argv, clone_args = split_clone_args(argv)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config_dir = Path(args.config_dir).expanduser() if args.config_dir else default_config_dir()

    try:
        config = load_config(config_dir)

        if args.since:
            since = parse_since(args.since)
        else:
            days = args.days_to_show if args.days_to_show is not None else config.days_to_show
            since = datetime.now() - timedelta(days=days)
        logger.debug(f"Showing repos with commits since {since}")

        if args.command == "scan":
            return run_scan(Path(args.path), config, since)
        elif args.command == "show":
            return run_show(config, since, full=args.full)
        return run_clone(clone_args, config)
    except (CloneUsageError, InvalidRemoteURLError, NotADirectoryError) as e:
        logger.error(str(e))
        return EXIT_USAGE
    except ValueError as e:
        logger.error(f"Invalid option or config: {e}")
        return EXIT_USAGE
    except (CacheNotFoundError, GitError) as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except OSError as e:
        logger.error(f"Scan aborted: {e}")
        return EXIT_FAILURE
    except Exception as e:
        logger.exception(f"pplaces failed: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
