"""Hidden debug command - echo arguments back."""
from __future__ import annotations

from typing import TYPE_CHECKING

from cmdweave.cli.commands.registry import default_commands

if TYPE_CHECKING:
    from argparse import Namespace

    from cmdweave.dispatch import DispatchContext


@default_commands.command("dbg.echo", "Echo arguments", hidden=True, usage="dbg.echo [words...]")
def cmd_echo(args: "Namespace", ctx: "DispatchContext") -> str:
    return " ".join(getattr(args, "args", None) or [])
