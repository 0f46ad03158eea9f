"""Run an OS command from within the CLI."""
from __future__ import annotations

import argparse
import subprocess
from typing import TYPE_CHECKING

from cmdweave.cli.commands.registry import default_commands

if TYPE_CHECKING:
    from cmdweave.dispatch import DispatchContext


def _arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("argv", nargs=argparse.REMAINDER, help="OS command and its arguments")


@default_commands.command(
    "sys.cmd",
    "Run an OS command and return its output",
    usage="sys.cmd <command> [args...]",
    configure_parser=_arguments,
)
def cmd_sys_cmd(args: argparse.Namespace, ctx: "DispatchContext") -> str:
    """Run the command without a shell; a non-zero exit is an error."""
    argv = list(getattr(args, "argv", None) or [])
    if not argv:
        return "Usage: sys.cmd <command> [args...]"

    proc = subprocess.run(
        argv,
        capture_output=True,
        text=True,
        timeout=ctx.timeout,
    )
    if proc.returncode != 0:
        detail = proc.stderr.strip() or proc.stdout.strip()
        raise RuntimeError(f"{argv[0]} exited with status {proc.returncode}: {detail}")
    return proc.stdout.rstrip("\n")
