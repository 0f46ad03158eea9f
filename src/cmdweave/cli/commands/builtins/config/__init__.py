"""Config commands - list/get/set/unset/reset configuration."""
from __future__ import annotations

import json
from argparse import ArgumentParser
from typing import TYPE_CHECKING, Any

from cmdweave.cli.commands.registry import default_commands
from cmdweave.config import DEFAULTS, get_config_manager

if TYPE_CHECKING:
    from argparse import Namespace

    from cmdweave.dispatch import DispatchContext


def _key_argument(parser: ArgumentParser) -> None:
    parser.add_argument("key", help="Config key")


def _key_value_arguments(parser: ArgumentParser) -> None:
    parser.add_argument("key", help="Config key")
    parser.add_argument("value", help="New value (JSON literals are decoded)")


def parse_value(text: str) -> Any:
    """Decode JSON literals (true, 3, 0.5, ["a"], null), else keep the string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


@default_commands.command("config.list", "Show customized settings")
def cmd_config_list(args: "Namespace", ctx: "DispatchContext") -> str:
    cfg_mgr = get_config_manager()
    settings = cfg_mgr.list_settings()
    lines = [f"Config file: {cfg_mgr.CONFIG_FILE}"]
    if settings:
        lines.extend(f"  {key}: {value}" for key, value in settings.items())
    else:
        lines.append("  (no custom settings)")
    return "\n".join(lines)


@default_commands.command(
    "config.get",
    "Show one setting",
    usage="config.get <key>",
    configure_parser=_key_argument,
)
def cmd_config_get(args: "Namespace", ctx: "DispatchContext") -> str:
    cfg_mgr = get_config_manager()
    if args.key not in cfg_mgr.effective_settings():
        raise ValueError(f"Unknown config key: {args.key}")
    return f"{args.key}: {cfg_mgr.get(args.key)}"


@default_commands.command(
    "config.set",
    "Change a setting",
    usage="config.set <key> <value>",
    configure_parser=_key_value_arguments,
)
def cmd_config_set(args: "Namespace", ctx: "DispatchContext") -> str:
    value = parse_value(args.value)
    get_config_manager().set(args.key, value)
    return f"Set {args.key} = {value}"


@default_commands.command(
    "config.unset",
    "Reset one setting to its default",
    usage="config.unset <key>",
    configure_parser=_key_argument,
)
def cmd_config_unset(args: "Namespace", ctx: "DispatchContext") -> str:
    get_config_manager().unset(args.key)
    return f"Deleted {args.key} (default: {DEFAULTS.get(args.key)})"


@default_commands.command("config.reset", "Reset every setting to its default")
def cmd_config_reset(args: "Namespace", ctx: "DispatchContext") -> str:
    cfg_mgr = get_config_manager()
    cfg_mgr.reset()
    return f"Removed {cfg_mgr.CONFIG_FILE}"
