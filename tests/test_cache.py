"""Tests for repository cache."""

import json
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from pplaces.cache import CacheNotFoundError, RepoCache
from pplaces.vcs.base import RepositoryRecord


@pytest.fixture
def cache_path():
    """Path to a cache file inside a temporary directory."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp) / "pplaces" / ".cache.json"


def test_cache_missing_file_is_empty(cache_path):
    """Cache starts empty when there is no file."""
    cache = RepoCache(cache_path)
    assert len(cache) == 0


def test_cache_corrupt_file_is_empty(cache_path):
    """Unparsable cache file is treated as empty."""
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text("{not json")

    cache = RepoCache(cache_path)
    assert cache.records == ()


def test_cache_wrong_shape_is_empty(cache_path):
    """A JSON object instead of an array is treated as empty."""
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text(json.dumps({"owner/repo": "2024-01-01"}))

    assert len(RepoCache(cache_path)) == 0


def test_cache_round_trip(cache_path):
    """Saving and reloading reproduces identical records."""
    records = [
        RepositoryRecord("/src/a", ["git@github.com:me/a.git (fetch)", "git@github.com:me/a.git (push)"], datetime(2024, 2, 3, 4, 5, 6)),
        RepositoryRecord("/src/b", [], None),
    ]
    cache = RepoCache(cache_path, records=records)
    cache.save()

    cache2 = RepoCache(cache_path)
    assert list(cache2.records) == records


def test_cache_file_format(cache_path):
    """Cache file is a JSON array with path, upstream and latest_commit."""
    RepoCache(cache_path, records=[RepositoryRecord("/src/a", ["x (fetch)"], datetime(2024, 1, 1, 0, 0, 0))]).save()

    assert json.loads(cache_path.read_text()) == [
        {"path": "/src/a", "upstream": ["x (fetch)"], "latest_commit": "2024-01-01T00:00:00"}
    ]


def test_merge_replaces_same_path(cache_path):
    """Merging a record with a known path replaces the old one."""
    cache = RepoCache(cache_path)
    cache.merge(RepositoryRecord("/src/a", ["old (fetch)"], datetime(2020, 1, 1)))
    cache.merge(RepositoryRecord("/src/b", [], None))
    cache.merge(RepositoryRecord("/src/a", ["new (fetch)"], datetime(2021, 1, 1)))

    assert len(cache) == 2
    assert cache.get("/src/a").remotes == ["new (fetch)"]
    assert cache.get("/src/a").last_commit == datetime(2021, 1, 1)


def test_sort_newest_first_missing_last(cache_path):
    """Sort puts the newest commit first and records without commits last."""
    cache = RepoCache(cache_path, records=[
        RepositoryRecord("/none1"),
        RepositoryRecord("/old", last_commit=datetime(2019, 1, 1)),
        RepositoryRecord("/new", last_commit=datetime(2024, 6, 1)),
        RepositoryRecord("/none2"),
        RepositoryRecord("/mid", last_commit=datetime(2022, 3, 1)),
    ])
    cache.sort()

    assert [r.path for r in cache.records] == ["/new", "/mid", "/old", "/none1", "/none2"]


def test_recent_filters_by_commit_time(cache_path):
    """recent() keeps records with a commit at or after the cutoff."""
    cache = RepoCache(cache_path, records=[
        RepositoryRecord("/new", last_commit=datetime(2024, 6, 1)),
        RepositoryRecord("/edge", last_commit=datetime(2024, 5, 1)),
        RepositoryRecord("/old", last_commit=datetime(2019, 1, 1)),
        RepositoryRecord("/none"),
    ])

    assert [r.path for r in cache.recent(datetime(2024, 5, 1))] == ["/new", "/edge"]


def test_find_by_canonical_across_protocols(cache_path):
    """Remote lookup matches SSH remotes against HTTPS suffixes."""
    cache = RepoCache(cache_path, records=[
        RepositoryRecord("/src/local", ["/srv/git/local.git (fetch)"]),
        RepositoryRecord("/src/bar", ["git@github.com:foo/bar.git (fetch)", "git@github.com:foo/bar.git (push)"]),
    ])

    assert cache.find_by_canonical("foo/bar").path == "/src/bar"
    assert cache.find_by_canonical("foo/baz") is None


def test_require_missing_cache(cache_path):
    """Strict load fails with a hint to scan first."""
    with pytest.raises(CacheNotFoundError, match="run `pplaces scan"):
        RepoCache.require(cache_path)


def test_require_corrupt_cache(cache_path):
    """Strict load also fails on a corrupt file."""
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text("[{\"path\": ")

    with pytest.raises(CacheNotFoundError):
        RepoCache.require(cache_path)


def test_require_loads_existing_cache(cache_path):
    """Strict load returns the saved records."""
    RepoCache(cache_path, records=[RepositoryRecord("/src/a")]).save()

    assert [r.path for r in RepoCache.require(cache_path).records] == ["/src/a"]
