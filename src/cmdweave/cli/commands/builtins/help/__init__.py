"""Help command - list commands or describe one."""
from __future__ import annotations

from argparse import ArgumentParser
from typing import TYPE_CHECKING

from cmdweave.cli.commands.registry import default_commands

if TYPE_CHECKING:
    from argparse import Namespace

    from cmdweave.dispatch import DispatchContext


def _arguments(parser: ArgumentParser) -> None:
    parser.add_argument("command", nargs="?", help="Command to describe")


@default_commands.command(
    "help",
    "Show available commands",
    usage="help [command]",
    configure_parser=_arguments,
)
def cmd_help(args: "Namespace", ctx: "DispatchContext") -> str:
    """List visible commands, or show usage for one command."""
    registry = ctx.registry
    name = getattr(args, "command", None)

    if name:
        descriptor = registry.get(name)
        if descriptor is None:
            return f"No such command: {name}"
        return f"{descriptor.get_usage()}\n  {descriptor.about}"

    lines = ["Commands:"]
    for descriptor in registry:
        if descriptor.hidden:
            continue
        lines.append(f"  {descriptor.get_usage():<20} - {descriptor.about}")
    return "\n".join(lines)
