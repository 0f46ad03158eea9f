"""CLI commands - status and debug mode."""
from __future__ import annotations

from argparse import ArgumentParser
from typing import TYPE_CHECKING

from cmdweave.cli.commands.registry import default_commands

if TYPE_CHECKING:
    from argparse import Namespace

    from cmdweave.dispatch import DispatchContext


@default_commands.command("cli.status", "Show current CLI state")
def cmd_status(args: "Namespace", ctx: "DispatchContext") -> str:
    registry = ctx.registry
    hidden = sum(1 for descriptor in registry if descriptor.hidden)
    lines = [
        f"Commands: {len(registry)} ({hidden} hidden)",
        f"Diagnostics: {len(registry.diagnostics)}",
    ]
    lines.extend(f"  {diagnostic}" for diagnostic in registry.diagnostics)
    lines.append(f"Debug: {'on' if ctx.debug else 'off'}")
    if ctx.settings:
        lines.append("Settings:")
        lines.extend(f"  {key}: {value}" for key, value in sorted(ctx.settings.items()))
    return "\n".join(lines)


def _debug_arguments(parser: ArgumentParser) -> None:
    parser.add_argument("mode", nargs="?", choices=["on", "off"])


@default_commands.command(
    "cli.debug",
    "Show or set debug mode",
    usage="cli.debug [on|off]",
    configure_parser=_debug_arguments,
)
def cmd_debug(args: "Namespace", ctx: "DispatchContext") -> str:
    """Debug mode is saved to config and applies from the next command on."""
    from cmdweave.config import get_config_manager

    mode = getattr(args, "mode", None)
    if mode is None:
        return f"Debug mode is {'on' if ctx.debug else 'off'}"

    get_config_manager().set("debug", mode == "on")
    return f"Debug mode set to {mode}"
