from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A builder fixture that materializes data trees from nested dicts.
3. Logging cleanup so CLI tests never leak handlers into other tests.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterator

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from orgviz.infra.logging import shutdown_logging  # noqa: E402

SETTINGS = "_settings.json"


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Detach orgviz handlers after every test."""
    yield
    shutdown_logging()


@pytest.fixture
def build_tree() -> Callable[[Path, Dict[str, Any]], Path]:
    """
    Return a helper that creates directories from a nested mapping.

    Keys are directory names. A value may be:
      - a dict: nested subdirectories;
      - a dict holding the special key SETTINGS: its value is written as the
        metadata document (a dict is JSON-encoded, a str is written raw).

    Example:
        build_tree(tmp_path, {"ViewA": {"alpha": {}, "beta": {SETTINGS: {"description": "b"}}}})
    """
    def _build(root: Path, layout: Dict[str, Any]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for name, value in layout.items():
            if name == SETTINGS:
                content = value if isinstance(value, str) else json.dumps(value)
                (root / SETTINGS).write_text(content, encoding="utf-8")
                continue
            _build(root / name, value or {})
        return root

    return _build


@pytest.fixture
def sample_data_dir(tmp_path: Path, build_tree) -> Path:
    """
    A small data root with two views.

    Structure:
    /data
      /Engineering
        _settings.json      (name override, color)
        /platform-team
          /.git
          /node_modules
        /web-team           (size 250)
      /people
        /time-and-attendance
        /payments           (description only)
    """
    return build_tree(tmp_path / "data", {
        "Engineering": {
            SETTINGS: {"name": "Engineering Org", "nodeColor": "#af4c91"},
            "platform-team": {".git": {}, "node_modules": {"left-pad": {}}},
            "web-team": {SETTINGS: {"size": 250, "owner": "Web Guild", "contactEmail": "web@example.com"}},
        },
        "people": {
            "time-and-attendance": {},
            "payments": {SETTINGS: {"description": "x"}},
        },
    })
