from __future__ import annotations

"""
Unit tests for the Directory Discovery Service.
"""

import logging
import os
import sys
from pathlib import Path

import pytest

from orgviz.core.services.scanner import is_qualifying_name, list_subdirectories, list_views
from orgviz.domain.errors import ViewCompileError


def test_list_views_missing_root_returns_empty(tmp_path: Path, caplog):
    with caplog.at_level(logging.WARNING):
        views = list_views(str(tmp_path / "nope"))

    assert views == []
    assert "Data directory not found" in caplog.text


def test_list_views_sorted_and_filtered(tmp_path: Path, build_tree):
    root = build_tree(tmp_path / "data", {"Sales": {}, "Engineering": {}, ".hidden": {}, "people": {}})
    (root / "notes.txt").write_text("not a view", encoding="utf-8")

    assert list_views(str(root)) == ["Engineering", "Sales", "people"]


def test_list_views_keeps_node_modules_named_view(tmp_path: Path, build_tree):
    """Only hidden entries are filtered at the view level."""
    root = build_tree(tmp_path / "data", {"node_modules": {}})
    assert list_views(str(root)) == ["node_modules"]


def test_list_views_empty_root_warns(tmp_path: Path, caplog):
    (tmp_path / "data").mkdir()
    with caplog.at_level(logging.WARNING):
        assert list_views(str(tmp_path / "data")) == []
    assert "no views" in caplog.text


def test_list_views_on_a_file_returns_empty(tmp_path: Path):
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")
    assert list_views(str(target)) == []


def test_list_subdirectories_excludes_defaults(tmp_path: Path, build_tree):
    build_tree(tmp_path, {"b": {}, "a": {}, ".git": {}, "node_modules": {}})
    assert list_subdirectories(str(tmp_path)) == ["a", "b"]


def test_list_subdirectories_missing_dir_raises(tmp_path: Path):
    with pytest.raises(ViewCompileError):
        list_subdirectories(str(tmp_path / "missing"))


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
def test_list_subdirectories_skips_symlinks(tmp_path: Path, build_tree):
    build_tree(tmp_path, {"real": {}})
    os.symlink(tmp_path / "real", tmp_path / "link", target_is_directory=True)

    assert list_subdirectories(str(tmp_path)) == ["real"]


def test_is_qualifying_name():
    assert is_qualifying_name("team", ["node_modules"]) is True
    assert is_qualifying_name(".git", []) is False
    assert is_qualifying_name("node_modules", ["node_modules"]) is False
