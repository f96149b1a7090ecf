from __future__ import annotations

"""
Hierarchy Tree Builder.

Translates one view directory into a fully normalized Node tree. The walk
uses an explicit worklist instead of call-stack recursion, so nesting depth
is bounded only by the filesystem.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from orgviz.core.compiler.metadata import load_node_metadata
from orgviz.core.services.scanner import list_subdirectories
from orgviz.domain import constants as const
from orgviz.domain.hierarchy_models import Node, NodeMetadata

logger = logging.getLogger(__name__)

_WORD_START_RX = re.compile(r"(^|\s)(\S)")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def compile_view(
        view_root: str,
        view_name: Optional[str] = None,
        *,
        metadata_filename: str = const.METADATA_FILENAME,
        excluded_dirs: Optional[Iterable[str]] = None,
        default_leaf_size: float = const.DEFAULT_LEAF_SIZE,
        warnings: Optional[List[str]] = None,
) -> Node:
    """
    Build the Node tree of a view directory.

    Directories are visited depth-first in sorted order. Each one becomes a
    leaf (no qualifying subdirectories, carries `size`) or a branch (carries
    `children` sorted by resolved display name).

    Args:
        view_root: Path to the view directory.
        view_name: Directory name used for display-name formatting.
                   Defaults to the base name of `view_root`.
        metadata_filename: Name of the per-directory metadata document.
        excluded_dirs: Directory names never traversed (besides hidden ones).
        default_leaf_size: Size assigned to leaves without a 'size' override.
        warnings: Optional list collecting metadata warnings.

    Returns:
        Node: The root of the compiled tree.

    Raises:
        ViewCompileError: If a directory in the view cannot be listed.
    """
    excluded = list(const.DEFAULT_EXCLUDED_DIRS if excluded_dirs is None else excluded_dirs)
    root_name = view_name or os.path.basename(os.path.normpath(view_root))

    # 1. Pre-order discovery: parents always precede their descendants
    frames: List[_Frame] = []
    pending = [_Frame(path=view_root, dir_name=root_name, parent=-1, slot=0)]

    while pending:
        frame = pending.pop()
        index = len(frames)
        frames.append(frame)

        frame.metadata, meta_warnings = load_node_metadata(frame.path, metadata_filename)
        if warnings is not None:
            warnings.extend(meta_warnings)

        subdirs = list_subdirectories(frame.path, excluded_dirs=excluded)
        frame.children = [None] * len(subdirs)

        # Reversed so the first subdirectory is discovered first
        for slot in range(len(subdirs) - 1, -1, -1):
            name = subdirs[slot]
            pending.append(
                _Frame(path=os.path.join(frame.path, name), dir_name=name, parent=index, slot=slot)
            )

    # 2. Post-order assembly: every child is built before its parent
    for frame in reversed(frames):
        node = _make_node(frame, default_leaf_size)
        if frame.parent < 0:
            return node
        frames[frame.parent].children[frame.slot] = node

    raise AssertionError("unreachable: the view root is always the first frame")


def format_node_name(folder_name: str) -> str:
    """
    Convert a folder name into a display name.

    Hyphens become spaces and the first letter of every whitespace-separated
    word is uppercased; the rest of each word is left as is.

    Example:
        'time-and-attendance' -> 'Time And Attendance'
    """
    spaced = folder_name.replace("-", " ")
    return _WORD_START_RX.sub(lambda m: m.group(1) + m.group(2).upper(), spaced)


# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

@dataclass
class _Frame:
    """Worklist entry for one directory."""
    path: str
    dir_name: str
    parent: int
    slot: int
    metadata: NodeMetadata = field(default_factory=NodeMetadata)
    children: List[Optional[Node]] = field(default_factory=list)


def _make_node(frame: _Frame, default_leaf_size: float) -> Node:
    """Merge metadata over defaults and attach size or sorted children."""
    meta = frame.metadata
    name = meta.name or format_node_name(frame.dir_name)
    description = meta.description or f"{name} segment"

    if not frame.children:
        return Node(
            name=name,
            description=description,
            node_color=meta.node_color,
            owner=meta.owner,
            contact_email=meta.contact_email,
            size=meta.size if meta.size is not None else default_leaf_size,
        )

    if meta.size is not None:
        logger.debug(f"Ignoring 'size' on branch directory: {frame.path}")

    # Stable sort: equal display names keep directory-name order
    children = sorted((c for c in frame.children if c is not None), key=lambda c: c.name)

    return Node(
        name=name,
        description=description,
        node_color=meta.node_color,
        owner=meta.owner,
        contact_email=meta.contact_email,
        children=tuple(children),
    )
