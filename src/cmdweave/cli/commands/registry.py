"""
Built-in default source module.

Each builtin lives in its own subdirectory and declares its commands on the
shared ``default_commands`` builder:

    from cmdweave.cli.commands.registry import default_commands

    @default_commands.command("sys.info", "Display system information")
    def sys_info(args, ctx):
        ...
"""

from __future__ import annotations

from cmdweave import __version__
from cmdweave.core import ModuleBuilder

DEFAULT_MODULE_ID = "cmdweave.defaults"

default_commands = ModuleBuilder(
    DEFAULT_MODULE_ID,
    sorted=True,
    name="cmdweave",
    about="cmdweave - namespaced commands with forgiving lookup",
    description="Run commands by full name, suffix, namespace or abbreviation.",
    url="https://pypi.org/project/cmdweave/",
    version=__version__,
    author="cmdweave contributors",
)
