from __future__ import annotations

"""
Configuration Domain Management.

Handles the compiler configuration: built-in defaults and an optional
project-level JSON file. Type coercion is delegated to the validator.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from orgviz.domain import constants as const

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILENAME = "orgviz.json"


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Relative paths are resolved against the working directory at compile time.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "data_dir": const.DEFAULT_DATA_DIR,
        "output_dir": const.DEFAULT_OUTPUT_DIR,

        # Source tree conventions
        "metadata_filename": const.METADATA_FILENAME,
        "excluded_dirs": list(const.DEFAULT_EXCLUDED_DIRS),
        "default_leaf_size": const.DEFAULT_LEAF_SIZE,

        # Serialization
        "indent": const.DEFAULT_JSON_INDENT,

        # Watch mode and consumers
        "watch_interval": const.DEFAULT_WATCH_INTERVAL,
        "debounce_seconds": const.DEFAULT_DEBOUNCE_SECONDS,
        "view_cache_size": const.DEFAULT_VIEW_CACHE_SIZE,

        # Diagnostics
        "log_file": "",
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a JSON file merged over the defaults.

    A missing file is not an error. Unreadable or corrupted files are logged
    and the defaults are returned.

    Args:
        path: Config file location. Defaults to 'orgviz.json' in the working directory.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    config = get_default_config()
    config_path = path or os.path.join(os.getcwd(), CONFIG_FILENAME)

    if not os.path.exists(config_path):
        logger.debug(f"Config file not found at {config_path}. Using defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Corrupted config file {config_path}. Using defaults.")
        return config

    unknown = sorted(k for k in data if k not in config)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {config_path}: {', '.join(unknown)}")

    config.update({k: v for k, v in data.items() if k in config})
    logger.debug(f"Configuration loaded from {config_path}")
    return config
