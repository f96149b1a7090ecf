from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation, directory creation and the
all-or-nothing file replacement used to publish generated artifacts.
"""

import os
import tempfile
from typing import Dict, List, Optional, Tuple

from orgviz.domain.errors import OutputWriteError

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "orgviz"
UNIX_APP_DIR_NAME = ".orgviz"
STAGING_PREFIX = ".orgviz-"
STAGING_SUFFIX = ".tmp"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/orgviz
    - Linux/Mac: ~/.orgviz

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def is_within(path: str, parent: str) -> bool:
    """Check whether `path` is `parent` itself or nested below it."""
    path_abs = os.path.abspath(path)
    parent_abs = os.path.abspath(parent)
    try:
        return os.path.commonpath([path_abs, parent_abs]) == parent_abs
    except ValueError:
        # Different drives on Windows
        return False

# -----------------------------------------------------------------------------
# FILESYSTEM OPERATIONS API
# -----------------------------------------------------------------------------

def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)


def replace_files_atomically(contents: Dict[str, str]) -> List[str]:
    """
    Publish a set of text files so that either all of them are replaced or none.

    Every document is first staged to a hidden temporary file next to its
    target. Only after all staging writes succeeded are the temporaries
    renamed over their targets. On a staging failure every temporary is
    removed and the previous files are left untouched.

    Args:
        contents: Target path -> UTF-8 text.

    Returns:
        List[str]: The written target paths, in input order.

    Raises:
        OutputWriteError: If a document cannot be staged or published.
    """
    staged: List[Tuple[str, str]] = []

    try:
        for target, text in contents.items():
            try:
                fd, tmp_path = tempfile.mkstemp(
                    prefix=STAGING_PREFIX,
                    suffix=STAGING_SUFFIX,
                    dir=os.path.dirname(os.path.abspath(target)),
                )
            except OSError as e:
                raise OutputWriteError(target, str(e)) from e

            staged.append((tmp_path, target))
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                    f.write(text)
                # mkstemp creates owner-only files; artifacts are served to others
                os.chmod(tmp_path, 0o644)
            except OSError as e:
                raise OutputWriteError(target, str(e)) from e

        written: List[str] = []
        for tmp_path, target in staged:
            try:
                os.replace(tmp_path, target)
            except OSError as e:
                raise OutputWriteError(target, str(e)) from e
            written.append(target)
        return written

    finally:
        for tmp_path, _ in staged:
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
