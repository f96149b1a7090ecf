from __future__ import annotations

"""
Directory Discovery Service.

Enumerates views under the data root and the qualifying subdirectories of
any directory in a view. Hidden entries and dependency-manager artifact
directories never qualify, and symbolic links are not followed.
"""

import logging
import os
from typing import Iterable, List, Optional

from orgviz.domain import constants as const
from orgviz.domain.errors import ViewCompileError

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def list_views(data_dir: str) -> List[str]:
    """
    Return the names of all views under the data root, sorted ascending.

    A missing data root is a setup condition, not a crash: it is logged as a
    warning and an empty list is returned.

    Args:
        data_dir: Path to the data root.

    Returns:
        List[str]: Immediate, non-hidden subdirectory names.
    """
    if not os.path.isdir(data_dir):
        logger.warning(f"Data directory not found: {data_dir}")
        return []

    try:
        views = list_subdirectories(data_dir, excluded_dirs=())
    except ViewCompileError as e:
        logger.warning(f"Data directory could not be listed: {e}")
        return []

    if not views:
        logger.warning(f"Data directory contains no views: {data_dir}")
    return views


def list_subdirectories(
        dir_path: str,
        excluded_dirs: Optional[Iterable[str]] = None,
) -> List[str]:
    """
    List the qualifying immediate subdirectories of a directory, sorted.

    Args:
        dir_path: Directory to inspect.
        excluded_dirs: Exact directory names to skip. Defaults to the
                       dependency-artifact names ('node_modules').

    Returns:
        List[str]: Sorted subdirectory base names.

    Raises:
        ViewCompileError: If the directory cannot be listed.
    """
    excluded = set(const.DEFAULT_EXCLUDED_DIRS if excluded_dirs is None else excluded_dirs)

    try:
        with os.scandir(dir_path) as entries:
            names = [
                entry.name
                for entry in entries
                if entry.is_dir(follow_symlinks=False)
                and is_qualifying_name(entry.name, excluded)
            ]
    except OSError as e:
        raise ViewCompileError(dir_path, str(e)) from e

    names.sort()
    return names


def is_qualifying_name(name: str, excluded_dirs: Iterable[str]) -> bool:
    """Check a directory name against the hidden prefix and the exclusion set."""
    return not name.startswith(const.HIDDEN_PREFIX) and name not in excluded_dirs
