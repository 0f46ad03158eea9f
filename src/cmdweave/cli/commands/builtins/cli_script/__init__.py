"""Script command - run CLI commands from a file."""
from __future__ import annotations

import shlex
from argparse import ArgumentParser
from pathlib import Path
from typing import TYPE_CHECKING

from cmdweave.cli.commands.registry import default_commands
from cmdweave.core import CommandUsageError
from cmdweave.engine import Single

if TYPE_CHECKING:
    from argparse import Namespace

    from cmdweave.dispatch import DispatchContext

SCRIPT_PROMPT = "script> "


def _arguments(parser: ArgumentParser) -> None:
    parser.add_argument("file", help="Script file with one command per line")


def script_lines(text: str) -> list[str]:
    """Command lines of a script: stripped, without blanks or '#' comments."""
    lines = (line.strip() for line in text.splitlines())
    return [line for line in lines if line and not line.startswith("#")]


@default_commands.command(
    "cli.script",
    "Run commands from a script file",
    usage="cli.script <file>",
    configure_parser=_arguments,
)
def cmd_script(args: "Namespace", ctx: "DispatchContext") -> str:
    """Run each line as if typed at the REPL; a failing line does not stop the script."""
    from cmdweave.cli.main import run_command

    text = Path(args.file).expanduser().read_text()
    registry, dispatcher = ctx.registry, ctx.dispatcher

    output = []
    for line in script_lines(text):
        output.append(f"{SCRIPT_PROMPT}{line}")
        try:
            words = shlex.split(line)
        except ValueError as e:
            output.append(f"error: {e}")
            continue
        if not words:
            continue

        result = dispatcher.resolver.resolve(words[0], registry)
        if isinstance(result, Single) and result.name == "cli.script":
            output.append("error: cli.script cannot be nested")
            continue

        try:
            outcome = run_command(words[0], words[1:], registry, dispatcher, ctx)
        except CommandUsageError as e:
            output.append(f"error: {e}")
            continue
        rendered = outcome.render()
        if rendered:
            output.append(rendered)
    return "\n".join(output)
