"""About command - show application information."""
from __future__ import annotations

from typing import TYPE_CHECKING

from cmdweave.cli.commands.registry import default_commands

if TYPE_CHECKING:
    from argparse import Namespace

    from cmdweave.dispatch import DispatchContext


@default_commands.command("about", "Show information about this CLI")
def cmd_about(args: "Namespace", ctx: "DispatchContext") -> str:
    """Show the merged application metadata."""
    info = ctx.registry.config if ctx.registry is not None else {}
    lines = [
        info.get("about", ""),
        info.get("description", ""),
        info.get("url", ""),
        f"{info.get('name', '')} {info.get('version', '')}".strip(),
    ]
    return "\n".join(line for line in lines if line)
