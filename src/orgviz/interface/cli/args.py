from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from orgviz.domain.constants import CURRENT_VERSION

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the orgviz CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="orgviz",
        description="Compile a folder hierarchy into JSON trees for circle-packing views.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {CURRENT_VERSION}")

    # --- Path Management ---
    p.add_argument(
        "-d", "--data-dir",
        dest="data_dir",
        default=None,
        help="Data root containing one directory per view.",
    )
    p.add_argument(
        "-o", "--output-dir",
        dest="output_dir",
        default=None,
        help="Directory receiving the generated JSON artifacts.",
    )
    p.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="JSON configuration file (default: ./orgviz.json if present).",
    )

    # --- Source Tree Conventions ---
    p.add_argument(
        "--metadata-file",
        dest="metadata_filename",
        default=None,
        help="Name of the per-directory metadata document.",
    )
    p.add_argument(
        "--leaf-size",
        dest="default_leaf_size",
        type=float,
        default=None,
        help="Size given to leaves without a 'size' override.",
    )
    p.add_argument(
        "--exclude-dir",
        dest="excluded_dirs",
        default=None,
        help="Comma-separated directory names never traversed.",
    )
    p.add_argument(
        "--indent",
        type=int,
        default=None,
        help="JSON indentation width of the artifacts.",
    )

    # --- Actions ---
    p.add_argument(
        "--list-views",
        action="store_true",
        help="Print the views found under the data root and exit.",
    )
    p.add_argument(
        "--show",
        dest="show_view",
        metavar="VIEW",
        default=None,
        help="Print a compiled view and exit.",
    )
    p.add_argument(
        "--source",
        default=None,
        help="Where --show reads artifacts from: a directory or an http(s) base URL.",
    )
    p.add_argument(
        "--watch",
        action="store_true",
        help="Compile, then rebuild whenever the data root changes.",
    )
    p.add_argument("--interval", dest="watch_interval", type=float, default=None,
                   help="Seconds between polls in watch mode.")
    p.add_argument("--debounce", dest="debounce_seconds", type=float, default=None,
                   help="Quiet period before a rebuild in watch mode.")

    # --- Output and Diagnostics ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print results as JSON.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const="default",
        default=None,
        help="Also log to a rotating file (default location when no path is given).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Options the user did not pass map to None and are skipped by the merge.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {
        "data_dir": args.data_dir,
        "output_dir": args.output_dir,
        "metadata_filename": args.metadata_filename,
        "indent": args.indent,
        "watch_interval": args.watch_interval,
        "debounce_seconds": args.debounce_seconds,
    }

    if args.default_leaf_size is not None:
        size = args.default_leaf_size
        overrides["default_leaf_size"] = int(size) if size.is_integer() else size

    if args.excluded_dirs is not None:
        overrides["excluded_dirs"] = _split_csv(args.excluded_dirs)

    if args.log_file is not None and args.log_file != "default":
        overrides["log_file"] = args.log_file

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Convert a comma-separated string into a list of trimmed strings."""
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
