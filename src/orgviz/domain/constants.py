from __future__ import annotations

"""
Global Constants and Compiler Defaults.

Centralizes the naming conventions of the data tree (metadata document,
hidden prefix, excluded directories) and the layout of generated artifacts.
"""

from typing import FrozenSet, Tuple

# -----------------------------------------------------------------------------
# APPLICATION METADATA
# -----------------------------------------------------------------------------
APP_NAME = "orgviz"
CURRENT_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# SOURCE TREE CONVENTIONS
# -----------------------------------------------------------------------------
DEFAULT_DATA_DIR = "src/data"
DEFAULT_OUTPUT_DIR = "src/generated"
METADATA_FILENAME = "_settings.json"

HIDDEN_PREFIX = "."
DEFAULT_EXCLUDED_DIRS: Tuple[str, ...] = ("node_modules",)

DEFAULT_LEAF_SIZE = 1000

# Keys accepted in a metadata document
STRING_METADATA_KEYS: Tuple[str, ...] = (
    "name",
    "description",
    "nodeColor",
    "owner",
    "contactEmail",
)
NUMERIC_METADATA_KEYS: Tuple[str, ...] = ("size",)
RECOGNIZED_METADATA_KEYS: FrozenSet[str] = frozenset(STRING_METADATA_KEYS + NUMERIC_METADATA_KEYS)

# -----------------------------------------------------------------------------
# GENERATED ARTIFACTS
# -----------------------------------------------------------------------------
OUTPUT_EXTENSION = ".json"
INDEX_NAME = "index"
DEFAULT_JSON_INDENT = 2

# -----------------------------------------------------------------------------
# RUNTIME TUNING
# -----------------------------------------------------------------------------
DEFAULT_WATCH_INTERVAL = 1.0
DEFAULT_DEBOUNCE_SECONDS = 0.3
DEFAULT_VIEW_CACHE_SIZE = 32
