from __future__ import annotations

"""
Artifact Serialization and Persistence.

Turns compiled trees into stable JSON documents (one per view plus the
combined index) and publishes them to the output directory as one set.
"""

import json
import logging
import os
from typing import Any, Dict, Mapping

from orgviz.domain import constants as const
from orgviz.domain.hierarchy_models import Node
from orgviz.infra.fs import replace_files_atomically

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# SERIALIZATION
# -----------------------------------------------------------------------------

def serialize_document(payload: Any, indent: int = const.DEFAULT_JSON_INDENT) -> str:
    """
    Render a JSON document deterministically.

    Key order is preserved from the payload (never re-sorted), non-ASCII text
    is kept verbatim and the document ends with a newline.
    """
    return json.dumps(payload, ensure_ascii=False, indent=indent, allow_nan=False) + "\n"


def artifact_path(output_dir: str, name: str) -> str:
    """Return the output path of a named artifact ('<name>.json')."""
    return os.path.join(output_dir, f"{name}{const.OUTPUT_EXTENSION}")


def render_artifacts(
        views: Mapping[str, Node],
        output_dir: str,
        indent: int = const.DEFAULT_JSON_INDENT,
) -> Dict[str, str]:
    """
    Serialize every view and the combined index without touching disk.

    Args:
        views: Compiled trees keyed by view name.
        output_dir: Directory the artifacts will be written to.
        indent: JSON indentation width.

    Returns:
        Dict[str, str]: Target path -> document text, index last.
    """
    documents: Dict[str, str] = {}
    combined: Dict[str, Any] = {}

    for view_name, root in views.items():
        tree = root.to_dict()
        combined[view_name] = tree
        documents[artifact_path(output_dir, view_name)] = serialize_document(tree, indent)

    documents[artifact_path(output_dir, const.INDEX_NAME)] = serialize_document(combined, indent)
    return documents


# -----------------------------------------------------------------------------
# PERSISTENCE
# -----------------------------------------------------------------------------

def write_artifacts(
        views: Mapping[str, Node],
        output_dir: str,
        indent: int = const.DEFAULT_JSON_INDENT,
) -> Dict[str, str]:
    """
    Write one document per view plus the combined index.

    Existing files are fully replaced. Either the whole set is published or,
    on failure, the previous set stays in place.

    Args:
        views: Compiled trees keyed by view name.
        output_dir: Existing output directory.
        indent: JSON indentation width.

    Returns:
        Dict[str, str]: View name (or 'index') -> written path.

    Raises:
        OutputWriteError: If any artifact cannot be written.
    """
    documents = render_artifacts(views, output_dir, indent)
    replace_files_atomically(documents)

    generated: Dict[str, str] = {}
    for view_name in views:
        generated[view_name] = artifact_path(output_dir, view_name)
    generated[const.INDEX_NAME] = artifact_path(output_dir, const.INDEX_NAME)

    for path in generated.values():
        logger.info(f"Generated: {path}")

    return generated
