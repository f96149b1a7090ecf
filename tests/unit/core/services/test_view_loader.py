from __future__ import annotations

"""
Unit tests for the Compiled View Loader.

Covers local and remote sources, cache behavior and the distinction between
missing views and transient load failures.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from orgviz.core.services.view_loader import ViewLoader
from orgviz.domain.errors import ViewLoadError, ViewNotFoundError
from orgviz.infra.network import RemoteArtifactMissing, RemoteFetchError


def _publish(output_dir: Path, name: str, payload) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / f"{name}.json").write_text(json.dumps(payload), encoding="utf-8")


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "generated"
    _publish(out, "Engineering", {
        "name": "Engineering",
        "description": "Engineering segment",
        "children": [{"name": "Web Team", "description": "Web Team segment", "size": 250}],
    })
    _publish(out, "People", {"name": "People", "description": "People segment", "size": 1000})
    _publish(out, "index", {"Engineering": {}, "People": {}})
    return out


# -----------------------------------------------------------------------------
# LOCAL SOURCE
# -----------------------------------------------------------------------------

def test_load_view_returns_tree(output_dir: Path):
    node = ViewLoader(str(output_dir)).load_view("Engineering")

    assert node.name == "Engineering"
    assert node.children[0].size == 250


def test_load_view_is_cached(output_dir: Path):
    loader = ViewLoader(str(output_dir))
    first = loader.load_view("People")

    (output_dir / "People.json").unlink()

    assert loader.load_view("People") is first
    assert loader.cached_views() == ["People"]


def test_invalidate_forces_reload(output_dir: Path):
    loader = ViewLoader(str(output_dir))
    loader.load_view("People")

    _publish(output_dir, "People", {"name": "People", "description": "new", "size": 5})
    loader.invalidate()

    assert loader.cached_views() == []
    assert loader.load_view("People").description == "new"


def test_cache_evicts_least_recently_used(output_dir: Path):
    _publish(output_dir, "Sales", {"name": "Sales", "description": "s", "size": 1})
    loader = ViewLoader(str(output_dir), max_entries=2)

    loader.load_view("Engineering")
    loader.load_view("People")
    loader.load_view("Engineering")
    loader.load_view("Sales")

    assert loader.cached_views() == ["Engineering", "Sales"]


def test_zero_cache_size_disables_caching(output_dir: Path):
    loader = ViewLoader(str(output_dir), max_entries=0)
    loader.load_view("People")
    assert loader.cached_views() == []


def test_missing_view_raises_not_found(output_dir: Path):
    with pytest.raises(ViewNotFoundError) as exc_info:
        ViewLoader(str(output_dir)).load_view("Finance")

    assert exc_info.value.view_name == "Finance"
    assert 'View "Finance" not found' in str(exc_info.value)


@pytest.mark.parametrize("name", ["", "..", "../People", ".hidden", "a/b", "index"])
def test_non_view_names_are_not_found(output_dir: Path, name: str):
    with pytest.raises(ViewNotFoundError):
        ViewLoader(str(output_dir)).load_view(name)


def test_corrupt_artifact_raises_load_error(output_dir: Path):
    (output_dir / "People.json").write_text("{ truncated", encoding="utf-8")

    with pytest.raises(ViewLoadError) as exc_info:
        ViewLoader(str(output_dir)).load_view("People")

    assert not isinstance(exc_info.value, ViewNotFoundError)


def test_non_numeric_size_raises_load_error(output_dir: Path):
    _publish(output_dir, "People", {"name": "People", "description": "p", "size": "abc"})

    with pytest.raises(ViewLoadError):
        ViewLoader(str(output_dir)).load_view("People")


def test_invalidate_during_read_does_not_cache_stale_tree(output_dir: Path):
    """A rebuild that lands while a view is being read must win."""
    loader = ViewLoader(str(output_dir))
    real_load = json.load

    def load_then_rebuild(f):
        data = real_load(f)
        _publish(output_dir, "People", {"name": "People", "description": "new", "size": 5})
        loader.invalidate()
        return data

    with patch("orgviz.core.services.view_loader.json.load", side_effect=load_then_rebuild):
        assert loader.load_view("People").description == "People segment"

    assert loader.cached_views() == []
    assert loader.load_view("People").description == "new"


def test_malformed_tree_raises_load_error(output_dir: Path):
    _publish(output_dir, "People", {"name": "People", "description": "p"})

    with pytest.raises(ViewLoadError):
        ViewLoader(str(output_dir)).load_view("People")


def test_available_views_reads_index(output_dir: Path):
    assert ViewLoader(str(output_dir)).available_views() == ["Engineering", "People"]


def test_available_views_without_index(tmp_path: Path):
    with pytest.raises(ViewLoadError):
        ViewLoader(str(tmp_path)).available_views()


# -----------------------------------------------------------------------------
# REMOTE SOURCE
# -----------------------------------------------------------------------------

FETCH = "orgviz.core.services.view_loader.fetch_compiled_document"


def test_remote_load_builds_url():
    payload = {"name": "People", "description": "p", "size": 3}

    with patch(FETCH, return_value=payload) as fetch:
        node = ViewLoader("https://org.example.com/generated/").load_view("People")

    fetch.assert_called_once_with("https://org.example.com/generated/People.json")
    assert node.size == 3


def test_remote_missing_maps_to_not_found():
    with patch(FETCH, side_effect=RemoteArtifactMissing("gone")):
        with pytest.raises(ViewNotFoundError):
            ViewLoader("http://localhost:8000").load_view("People")


def test_remote_failure_maps_to_load_error_and_is_retryable():
    payload = {"name": "People", "description": "p", "size": 3}
    loader = ViewLoader("http://localhost:8000")

    with patch(FETCH, side_effect=[RemoteFetchError("timed out"), payload]):
        with pytest.raises(ViewLoadError):
            loader.load_view("People")
        assert loader.load_view("People").name == "People"
