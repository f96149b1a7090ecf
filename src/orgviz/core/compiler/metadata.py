from __future__ import annotations

"""
Directory Metadata Loader.

Reads the optional JSON document colocated with a directory and validates
it key by key. Every failure is local to one node: it is logged with the
offending path and the node falls back to defaults.
"""

import json
import logging
import math
import os
from typing import Any, Dict, List, Tuple

from orgviz.domain import constants as const
from orgviz.domain.hierarchy_models import NodeMetadata

logger = logging.getLogger(__name__)

# Serialized key -> NodeMetadata attribute
_FIELD_MAP: Dict[str, str] = {
    "name": "name",
    "description": "description",
    "nodeColor": "node_color",
    "owner": "owner",
    "contactEmail": "contact_email",
    "size": "size",
}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def load_node_metadata(
        dir_path: str,
        filename: str = const.METADATA_FILENAME,
) -> Tuple[NodeMetadata, List[str]]:
    """
    Load and validate the metadata document of a directory.

    The file is read fresh on every call, so edits are always picked up.
    A missing file, an empty file, '{}' and 'null' all mean "no metadata".

    Args:
        dir_path: Directory owning the document.
        filename: Metadata document file name.

    Returns:
        Tuple[NodeMetadata, List[str]]: Validated metadata and the warnings
                                        raised while loading it.
    """
    path = os.path.join(dir_path, filename)
    if not os.path.isfile(path):
        return NodeMetadata(), []

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        return NodeMetadata(), [_warn(f"Failed to load settings from {path}: {e}")]

    if not raw_text.strip():
        return NodeMetadata(), []

    try:
        data = json.loads(raw_text)
    except ValueError as e:
        return NodeMetadata(), [_warn(f"Failed to load settings from {path}: {e}")]

    if data is None:
        return NodeMetadata(), []

    if not isinstance(data, dict):
        return NodeMetadata(), [_warn(
            f"Failed to load settings from {path}: expected an object, "
            f"got {type(data).__name__}"
        )]

    return parse_metadata(data, source=path)


def parse_metadata(data: Dict[str, Any], source: str = "<memory>") -> Tuple[NodeMetadata, List[str]]:
    """
    Validate a decoded metadata mapping.

    Recognized keys with invalid values are dropped; unknown keys are
    reported and ignored.

    Args:
        data: Decoded JSON object.
        source: Label used in warnings (usually the file path).

    Returns:
        Tuple[NodeMetadata, List[str]]: Validated metadata and warnings.
    """
    warnings: List[str] = []
    values: Dict[str, Any] = {}

    unknown = sorted(k for k in data if k not in const.RECOGNIZED_METADATA_KEYS)
    if unknown:
        warnings.append(_warn(f"Ignoring unknown settings keys in {source}: {', '.join(unknown)}"))

    for key in const.STRING_METADATA_KEYS:
        if key not in data or data[key] is None:
            continue
        value = data[key]
        if not isinstance(value, str):
            warnings.append(_warn(
                f"Invalid '{key}' in {source}: expected string, got {type(value).__name__}"
            ))
            continue
        # Empty strings count as "not supplied"
        if value.strip():
            values[_FIELD_MAP[key]] = value

    if data.get("size") is not None:
        size = data["size"]
        valid = isinstance(size, (int, float)) and not isinstance(size, bool)
        if not valid or not math.isfinite(size) or size <= 0:
            warnings.append(_warn(f"Invalid 'size' in {source}: expected a positive number, got {size!r}"))
        else:
            values["size"] = size

    return NodeMetadata(**values), warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _warn(msg: str) -> str:
    logger.warning(msg)
    return msg
