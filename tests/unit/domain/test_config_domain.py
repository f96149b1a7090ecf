from __future__ import annotations

"""
Unit tests for the Configuration Domain.

Verifies default values and the loading of project configuration files,
including the fallbacks for missing, corrupted and partial files.
"""

import json
import logging
from pathlib import Path

from orgviz.domain import constants as const
from orgviz.domain.config import get_default_config, load_config


def test_default_config_values():
    cfg = get_default_config()

    assert cfg["metadata_filename"] == "_settings.json"
    assert cfg["default_leaf_size"] == 1000
    assert cfg["excluded_dirs"] == ["node_modules"]
    assert cfg["indent"] == const.DEFAULT_JSON_INDENT


def test_default_config_returns_fresh_copies():
    """Mutating one default dict must not leak into the next."""
    first = get_default_config()
    first["excluded_dirs"].append("vendor")

    assert get_default_config()["excluded_dirs"] == ["node_modules"]


def test_load_config_missing_file_returns_defaults(tmp_path: Path):
    assert load_config(str(tmp_path / "absent.json")) == get_default_config()


def test_load_config_merges_file_values(tmp_path: Path):
    path = tmp_path / "orgviz.json"
    path.write_text(json.dumps({"data_dir": "org/data", "default_leaf_size": 10}), encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg["data_dir"] == "org/data"
    assert cfg["default_leaf_size"] == 10
    assert cfg["output_dir"] == const.DEFAULT_OUTPUT_DIR


def test_load_config_corrupted_file_returns_defaults(tmp_path: Path, caplog):
    path = tmp_path / "orgviz.json"
    path.write_text("{ not json", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        cfg = load_config(str(path))

    assert cfg == get_default_config()
    assert "Failed to load config" in caplog.text


def test_load_config_non_object_root_returns_defaults(tmp_path: Path):
    path = tmp_path / "orgviz.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert load_config(str(path)) == get_default_config()


def test_load_config_ignores_unknown_keys(tmp_path: Path, caplog):
    path = tmp_path / "orgviz.json"
    path.write_text(json.dumps({"theme": "dark", "indent": 4}), encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        cfg = load_config(str(path))

    assert "theme" not in cfg
    assert cfg["indent"] == 4
    assert "theme" in caplog.text


def test_load_config_defaults_to_working_directory(tmp_path: Path, monkeypatch):
    (tmp_path / "orgviz.json").write_text(json.dumps({"output_dir": "public/data"}), encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert load_config()["output_dir"] == "public/data"
