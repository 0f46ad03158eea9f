"""
Argument parsing for a resolved command.

The resolver only ever sees the command token; everything after it is parsed
here with argparse, using the parser hook stored on the descriptor.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from cmdweave.core import CommandDescriptor, CommandUsageError


class CommandArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting the process."""

    def error(self, message: str):
        raise CommandUsageError(f"{self.prog}: {message}")


def build_parser(descriptor: CommandDescriptor) -> CommandArgumentParser:
    """Parser for one command.

    Commands without a ``configure_parser`` hook accept free positional
    words, exposed as ``args``.
    """
    parser = CommandArgumentParser(
        prog=descriptor.name,
        description=descriptor.about,
        add_help=False,
    )
    if descriptor.configure_parser is not None:
        descriptor.configure_parser(parser)
    else:
        parser.add_argument("args", nargs="*")
    return parser


def parse_command_args(descriptor: CommandDescriptor, argv: Sequence[str]) -> argparse.Namespace:
    """Parse the words after the command token.

    Raises:
        CommandUsageError: if the words do not fit the command's parser.
    """
    return build_parser(descriptor).parse_args(list(argv))
