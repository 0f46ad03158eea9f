"""System information command."""
from __future__ import annotations

import platform
import sys
from typing import TYPE_CHECKING

from cmdweave.cli.commands.registry import default_commands

if TYPE_CHECKING:
    from argparse import Namespace

    from cmdweave.dispatch import DispatchContext


@default_commands.command("sys.info", "Display system information")
def cmd_sys_info(args: "Namespace", ctx: "DispatchContext") -> str:
    return "\n".join([
        "System Information:",
        f"Python Version: {platform.python_version()} ({platform.python_implementation()})",
        f"Platform: {platform.platform()}",
        f"Architecture: {platform.machine()}",
        f"Executable: {sys.executable}",
    ])
