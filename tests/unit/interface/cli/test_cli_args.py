from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Mapping of CLI flags to configuration keys.
2. CSV string parsing logic.
3. Handling of boolean action flags (store_true).
"""

import pytest

from orgviz.interface.cli.args import args_to_overrides, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_cli_path_mapping():
    """Verify path options are mapped to config overrides."""
    args = parse_args(["-d", "org/data", "--output-dir", "public/generated", "--config", "cfg.json"])

    overrides = args_to_overrides(args)

    assert overrides["data_dir"] == "org/data"
    assert overrides["output_dir"] == "public/generated"
    assert args.config_path == "cfg.json"


def test_cli_defaults_are_none():
    """Options not passed must not override the config file."""
    overrides = args_to_overrides(parse_args([]))

    assert all(v is None for v in overrides.values())
    assert "excluded_dirs" not in overrides
    assert "default_leaf_size" not in overrides


def test_cli_csv_list_parsing():
    """Verify comma-separated strings are parsed into lists."""
    args = parse_args(["--exclude-dir", "node_modules, vendor,,dist"])
    overrides = args_to_overrides(args)
    assert overrides["excluded_dirs"] == ["node_modules", "vendor", "dist"]


def test_cli_leaf_size_integral_values_stay_integers():
    assert args_to_overrides(parse_args(["--leaf-size", "500"]))["default_leaf_size"] == 500
    assert isinstance(args_to_overrides(parse_args(["--leaf-size", "500"]))["default_leaf_size"], int)
    assert args_to_overrides(parse_args(["--leaf-size", "2.5"]))["default_leaf_size"] == 2.5


def test_cli_action_flags():
    """Verify action flags are parsed."""
    args = parse_args(["--watch", "--json", "--debug", "--interval", "0.5", "--debounce", "0"])

    assert args.watch is True
    assert args.json_output is True
    assert args.debug is True

    overrides = args_to_overrides(args)
    assert overrides["watch_interval"] == 0.5
    assert overrides["debounce_seconds"] == 0


def test_cli_show_and_source():
    args = parse_args(["--show", "Engineering", "--source", "https://org.example.com/generated"])
    assert args.show_view == "Engineering"
    assert args.source == "https://org.example.com/generated"


def test_cli_log_file_variants():
    """A bare --log-file selects the default location, not a config override."""
    assert "log_file" not in args_to_overrides(parse_args(["--log-file"]))
    assert parse_args(["--log-file"]).log_file == "default"
    assert args_to_overrides(parse_args(["--log-file", "run.log"]))["log_file"] == "run.log"


def test_cli_rejects_bad_numbers():
    with pytest.raises(SystemExit):
        parse_args(["--indent", "two"])
