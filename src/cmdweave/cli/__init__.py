"""
CLI module for the cmdweave package.

Provides the command-line entry point and the interactive REPL.
"""

from cmdweave.cli.args import build_parser, parse_command_args
from cmdweave.cli.main import load_registry, main, run_command

__all__ = [
    "main",
    "load_registry",
    "run_command",
    "build_parser",
    "parse_command_args",
]
