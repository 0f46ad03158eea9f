"""
Command sources for the cmdweave CLI.

Source modules come from:
1. Package builtins (the default module)
2. ~/.cmdweave/modules/ (user-hackable)
3. "package.module:attribute" specs listed in config
"""

from __future__ import annotations

from cmdweave.cli.commands.loader import (
    load_builtin_commands,
    load_configured_modules,
    load_module_spec,
    load_user_modules,
)
from cmdweave.cli.commands.registry import DEFAULT_MODULE_ID, default_commands
from cmdweave.core import SourceModule


def default_module() -> SourceModule:
    """The built-in default source module."""
    load_builtin_commands()
    return default_commands.build()


__all__ = [
    "DEFAULT_MODULE_ID",
    "default_commands",
    "default_module",
    "load_builtin_commands",
    "load_configured_modules",
    "load_module_spec",
    "load_user_modules",
]
