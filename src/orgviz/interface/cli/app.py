from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of configuration
sources (defaults, config file, CLI overrides), action dispatch (compile,
list, show, watch) and result rendering.
"""

import json
import os
import sys
import threading
from typing import Any, Dict, List, Optional

from orgviz.core.compiler.engine import compile_all
from orgviz.core.compiler.validator import validate_config
from orgviz.core.services.scanner import list_views
from orgviz.core.services.view_loader import ViewLoader
from orgviz.core.services.watcher import WatchSession
from orgviz.domain.compile_models import CompileResult
from orgviz.domain.config import load_config
from orgviz.domain.errors import ViewLoadError, ViewNotFoundError
from orgviz.infra.fs import normalize_path
from orgviz.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
)
from orgviz.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 compile/load failure, 2 bad input).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Resolve configuration hierarchy
    base_conf = load_config(args.config_path)
    overrides = cli_args.args_to_overrides(args)
    cfg, warnings = validate_config(_merge_config(base_conf, overrides), strict=False)

    # 3. Logging bootstrap (console stderr, optional rotating file)
    log_file = cfg["log_file"] or None
    if args.log_file == "default":
        log_file = get_default_log_path()
    configure_logging(LoggingConfig(level="DEBUG" if args.debug else "INFO", console=True, log_file=log_file))

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # 4. Action dispatch
    if args.dump_config:
        print(json.dumps(cfg, ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.list_views:
        return _run_list_views(cfg, args.json_output)

    if args.show_view is not None:
        return _run_show(cfg, args.show_view, args.source)

    if args.watch:
        return _run_watch(cfg)

    return _run_compile(cfg, args.json_output)

# -----------------------------------------------------------------------------
# ACTIONS
# -----------------------------------------------------------------------------

def _run_compile(cfg: Dict[str, Any], json_output: bool) -> int:
    try:
        result = compile_all(cfg)
    except KeyboardInterrupt:
        logger.warning("Compilation interrupted by user.")
        return 130

    if json_output:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return EXIT_OK if result.ok else EXIT_FAILURE


def _run_list_views(cfg: Dict[str, Any], json_output: bool) -> int:
    views = list_views(normalize_path(cfg["data_dir"], os.getcwd()))
    if json_output:
        print(json.dumps(views))
    else:
        for name in views:
            print(name)
    return EXIT_OK


def _run_show(cfg: Dict[str, Any], view_name: str, source: Optional[str]) -> int:
    origin = source or normalize_path(cfg["output_dir"], os.getcwd())
    loader = ViewLoader(origin, cfg["view_cache_size"])
    try:
        node = loader.load_view(view_name)
    except ViewNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE
    except ViewLoadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(json.dumps(node.to_dict(), ensure_ascii=False, indent=cfg["indent"]))
    return EXIT_OK


def _run_watch(cfg: Dict[str, Any]) -> int:
    session = WatchSession(cfg)
    result = session.start()
    if isinstance(result, CompileResult):
        _print_human_summary(result)

    logger.info("Watching for changes. Press Ctrl+C to stop.")
    idle = threading.Event()
    try:
        while not idle.wait(1.0):
            pass
    except KeyboardInterrupt:
        logger.info("Stopping watcher...")
    finally:
        session.stop()
    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge override values into the base configuration.

    Only keys already known to the base configuration are merged, and None
    means "not provided".
    """
    out = dict(base)
    for k, v in overrides.items():
        if k in out and v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: CompileResult) -> None:
    """Print a compile result as a short terminal report."""
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    print("✓ Data generation complete!")
    print(f"Data directory: {result.data_dir}")
    print(f"Output directory: {result.output_dir}")

    summary = result.summary
    print(f"Views: {summary.get('views', 0)}  Nodes: {summary.get('nodes', 0)}  "
          f"Leaves: {summary.get('leaves', 0)}")

    if result.generated_files:
        print("\nGenerated files:")
        for name, path in result.generated_files.items():
            print(f"  - {name}: {path}")

    if result.warnings:
        print(f"\nWarnings: {len(result.warnings)} (see log)")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
