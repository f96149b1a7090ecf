from __future__ import annotations

"""
Core compile orchestration.

This module coordinates a full rebuild of the generated data models:
1. Validates configuration and normalizes paths.
2. Ensures the output directory exists.
3. Enumerates the views under the data root.
4. Compiles every view into a Node tree, sequentially.
5. Publishes one artifact per view plus the combined index as one set.

Nothing is written unless every view compiled, so a failed run always
leaves the previous run's output in place.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from orgviz.core.compiler.builder import compile_view
from orgviz.core.compiler.validator import validate_config
from orgviz.core.compiler.writer import write_artifacts
from orgviz.core.services.scanner import list_views
from orgviz.domain import constants as const
from orgviz.domain.compile_models import (
    CompileResult,
    create_error_result,
    create_success_result,
)
from orgviz.domain.errors import OutputWriteError, ViewCompileError
from orgviz.domain.hierarchy_models import Node
from orgviz.infra.fs import is_within, normalize_path, safe_mkdir

logger = logging.getLogger(__name__)


def compile_all(
        config: Optional[Dict[str, Any]] = None,
        *,
        data_dir: Optional[str] = None,
        output_dir: Optional[str] = None,
) -> CompileResult:
    """
    Rebuild every view under the data root and publish the artifacts.

    Args:
        config: The configuration dictionary (raw or partial).
        data_dir: Optional override of config['data_dir'].
        output_dir: Optional override of config['output_dir'].

    Returns:
        CompileResult: Status, compiled trees, written files and warnings.
    """
    logger.info("Generating data models from directory structure...")

    # -------------------------------------------------------------------------
    # 1) Config & Path Normalization
    # -------------------------------------------------------------------------
    raw: Dict[str, Any] = dict(config or {})
    if data_dir is not None:
        raw["data_dir"] = data_dir
    if output_dir is not None:
        raw["output_dir"] = output_dir

    cfg, warnings = validate_config(raw, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    cwd = os.getcwd()
    data_path = normalize_path(cfg["data_dir"], cwd)
    output_path = normalize_path(cfg["output_dir"], cwd)

    logger.debug(f"Data directory: {data_path}")
    logger.debug(f"Output directory: {output_path}")

    # -------------------------------------------------------------------------
    # 2) Output Directory
    # -------------------------------------------------------------------------
    ok, err = safe_mkdir(output_path)
    if not ok:
        msg = f"Failed to create output directory {output_path}: {err}"
        logger.critical(msg)
        return create_error_result(msg, data_path, output_path, warnings)

    # -------------------------------------------------------------------------
    # 3) View Discovery
    # -------------------------------------------------------------------------
    view_names = _select_views(data_path, output_path, warnings)

    # -------------------------------------------------------------------------
    # 4) Compilation
    # -------------------------------------------------------------------------
    views: Dict[str, Node] = {}
    for view_name in view_names:
        view_path = os.path.join(data_path, view_name)
        try:
            views[view_name] = compile_view(
                view_path,
                view_name,
                metadata_filename=cfg["metadata_filename"],
                excluded_dirs=cfg["excluded_dirs"],
                default_leaf_size=cfg["default_leaf_size"],
                warnings=warnings,
            )
        except ViewCompileError as e:
            msg = f"Failed to compile view '{view_name}': {e}"
            logger.error(msg)
            return create_error_result(msg, data_path, output_path, warnings)
        logger.debug(f"Compiled view: {view_name}")

    # -------------------------------------------------------------------------
    # 5) Publication
    # -------------------------------------------------------------------------
    try:
        generated = write_artifacts(views, output_path, indent=cfg["indent"])
    except OutputWriteError as e:
        msg = f"Failed to generate data models: {e}"
        logger.error(msg)
        return create_error_result(msg, data_path, output_path, warnings)

    result = create_success_result(data_path, output_path, views, generated, warnings)
    logger.info(
        f"Data models generated successfully: {result.summary['views']} views, "
        f"{result.summary['nodes']} nodes."
    )
    return result


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _select_views(data_path: str, output_path: str, warnings: List[str]) -> List[str]:
    """
    List the views to compile, skipping names that cannot be published.

    A view named like the combined index would overwrite it, and an output
    directory placed directly in the data root is not a view.
    """
    if not os.path.isdir(data_path):
        warnings.append(f"Data directory not found: {data_path}")
    view_names = list_views(data_path)

    if not view_names and os.path.isdir(data_path):
        warnings.append(f"Data directory contains no views: {data_path}")

    selected: List[str] = []
    for name in view_names:
        view_path = os.path.join(data_path, name)
        if name == const.INDEX_NAME:
            msg = f"Skipping view '{name}': the name is reserved for the combined index."
            logger.warning(msg)
            warnings.append(msg)
            continue
        if os.path.normcase(view_path) == os.path.normcase(output_path):
            logger.debug(f"Skipping output directory inside data root: {view_path}")
            continue
        if is_within(output_path, view_path):
            msg = f"Output directory {output_path} is nested in view '{name}' and will be compiled into it."
            logger.warning(msg)
            warnings.append(msg)
        selected.append(name)
    return selected
