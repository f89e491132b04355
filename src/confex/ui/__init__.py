"""Command-line surface for confex."""

from confex.ui.cli import CLIError, build_parser, load_runner, run_cli

__all__ = ["CLIError", "build_parser", "load_runner", "run_cli"]
