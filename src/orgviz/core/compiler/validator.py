from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper for the compiler, ensuring that the configuration
dictionary conforms to the expected schema. Handles type coercion and
default value injection so a bad value never aborts a build.
"""

import logging
import math
from typing import Any, Dict, List, Tuple

from orgviz.domain.config import get_default_config

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Converts untrusted inputs (config file, CLI) into strictly typed
    parameters and fills missing keys with domain defaults.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and a
                                          list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if config is None:
        return defaults, warnings

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Schema Definition
    string_fields = ["data_dir", "output_dir", "metadata_filename"]
    positive_number_fields = ["default_leaf_size", "watch_interval"]
    non_negative_number_fields = ["debounce_seconds"]
    int_fields = ["indent", "view_cache_size"]

    # 3. Field Processing & Normalization
    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["log_file"] = _as_str(merged.get("log_file"), "", "log_file", warnings, strict)

    for field in positive_number_fields:
        merged[field] = _as_number(
            merged.get(field), defaults[field], field, warnings, strict, allow_zero=False
        )

    for field in non_negative_number_fields:
        merged[field] = _as_number(
            merged.get(field), defaults[field], field, warnings, strict, allow_zero=True
        )

    for field in int_fields:
        merged[field] = _as_int(merged.get(field), defaults[field], field, warnings, strict)

    merged["excluded_dirs"] = _as_list_str(
        merged.get("excluded_dirs"), defaults["excluded_dirs"], "excluded_dirs", warnings, strict
    )

    # 4. Domain-Specific Normalization
    merged["metadata_filename"] = _normalize_filename(
        merged["metadata_filename"], defaults["metadata_filename"], warnings, strict
    )

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _fail(msg: str, warnings: List[str], strict: bool) -> None:
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    _fail(f"Invalid field '{field}': expected str, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_number(
        value: Any,
        fallback: float,
        field: str,
        warnings: List[str],
        strict: bool,
        *,
        allow_zero: bool,
) -> float:
    """Accept ints and floats (not bools) within the allowed range."""
    if value is None:
        return fallback

    if not strict and isinstance(value, str):
        try:
            coerced = float(value.strip())
            warnings.append(f"Field '{field}' converted from '{value}' to number.")
            value = int(coerced) if coerced.is_integer() else coerced
        except ValueError:
            pass

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        _fail(f"Invalid field '{field}': expected number, received {type(value).__name__}.", warnings, strict)
        return fallback

    if not math.isfinite(value) or value < 0 or (value == 0 and not allow_zero):
        _fail(f"Invalid field '{field}': {value} is out of range.", warnings, strict)
        return fallback

    return value


def _as_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Accept non-negative integers only."""
    if value is None:
        return fallback
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        _fail(f"Invalid field '{field}': expected non-negative int, received {value!r}.", warnings, strict)
        return fallback
    return value


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    # An explicit empty list is meaningful here: exclude nothing
    if isinstance(value, str) and not strict:
        warnings.append(f"Field '{field}' converted from CSV string to list.")
        return [x.strip() for x in value.split(",") if x.strip()]

    if isinstance(value, list):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str) and item.strip():
                out.append(item.strip())
            else:
                msg = f"Invalid item in '{field}[{i}]': expected non-empty str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    _fail(f"Invalid field '{field}': expected list[str], received {type(value).__name__}.", warnings, strict)
    return list(fallback)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_filename(name: str, fallback: str, warnings: List[str], strict: bool) -> str:
    """The metadata document must be a bare file name, never a path."""
    if "/" in name or "\\" in name or name in (".", ".."):
        msg = f"Invalid metadata filename '{name}': must be a plain file name."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{fallback}'.")
        return fallback
    return name
