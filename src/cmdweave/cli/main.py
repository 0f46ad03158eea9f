#!/usr/bin/env python3
"""
CLI entry point (cmdweave command).

Usage:
    cmdweave                  # start the REPL
    cmdweave sys.info         # run one command
    cmdweave info             # same, resolved by suffix
    cmdweave --list           # list commands
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from cmdweave.cli.args import parse_command_args
from cmdweave.cli.commands import default_module, load_configured_modules, load_user_modules
from cmdweave.config import Config, get_config_manager
from cmdweave.core import CommandUsageError, Registry, build_registry
from cmdweave.dispatch import DispatchContext, Dispatcher, Outcome, OutcomeStatus
from cmdweave.engine import Resolver, Single
from cmdweave.logging import configure_logging, log_diagnostics

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

_EXIT_CODES = {
    OutcomeStatus.OK: EXIT_OK,
    OutcomeStatus.FAILED: EXIT_FAILED,
    OutcomeStatus.AMBIGUOUS: EXIT_USAGE,
    OutcomeStatus.NAMESPACE: EXIT_USAGE,
    OutcomeStatus.NOT_FOUND: EXIT_USAGE,
}


def load_registry(config: Config, include_user_modules: bool = True) -> Registry:
    """Build the registry from the default, user and configured modules."""
    modules = [default_module()]
    if include_user_modules:
        modules.extend(load_user_modules(Path(config.get("modules_dir")).expanduser()))
    modules.extend(load_configured_modules(config.get("modules")))

    registry, diagnostics = build_registry(modules)
    log_diagnostics(diagnostics)
    return registry


def make_dispatcher(config: Config) -> Dispatcher:
    resolver = Resolver(
        fuzzy_threshold=config.get("fuzzy_threshold"),
        suggestion_threshold=config.get("suggestion_threshold"),
    )
    return Dispatcher(
        resolver=resolver,
        timeout=config.get("dispatch_timeout"),
    )


def make_context(config: Config, registry: Registry, debug: bool | None = None) -> DispatchContext:
    return DispatchContext(
        debug=config.get("debug") if debug is None else debug,
        settings=get_config_manager().list_settings(),
        timeout=config.get("dispatch_timeout"),
        max_suggestions=config.get("max_suggestions"),
        registry=registry,
    )


def run_command(
    text: str,
    argv: Sequence[str],
    registry: Registry,
    dispatcher: Dispatcher,
    ctx: DispatchContext,
) -> Outcome:
    """Parse arguments for the resolved command, then dispatch it.

    Raises:
        CommandUsageError: if the arguments do not fit the command.
    """
    parsed = argparse.Namespace(args=list(argv))
    result = dispatcher.resolver.resolve(text, registry)
    if isinstance(result, Single):
        parsed = parse_command_args(registry.get(result.name), argv)
    return dispatcher.dispatch(text, parsed, registry, ctx)


def print_outcome(outcome: Outcome) -> None:
    text = outcome.render()
    if not text:
        return
    print(text, file=sys.stdout if outcome.ok else sys.stderr)


def exit_code(outcome: Outcome) -> int:
    return _EXIT_CODES[outcome.status]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmdweave",
        description="Run namespaced commands; partial names are resolved for you.",
    )
    parser.add_argument("--debug", action="store_true", default=None,
                        help="Show debug information with errors")
    parser.add_argument("--list", "-l", action="store_true",
                        help="List available commands and exit")
    parser.add_argument("--no-user-modules", action="store_true",
                        help="Skip modules from the user modules directory")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("command", nargs="?", help="Command to run (omit for the REPL)")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for the command")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = get_config_manager().config
    configure_logging(args.log_level or config.get("log_level"), config.get("log_file"))

    registry = load_registry(config, include_user_modules=not args.no_user_modules)
    ctx = make_context(config, registry, debug=args.debug)

    if args.list:
        for descriptor in registry:
            if not descriptor.hidden:
                print(f"  {descriptor.name:<20} - {descriptor.about}")
        return EXIT_OK

    with make_dispatcher(config) as dispatcher:
        if args.command is None:
            from cmdweave.cli._repl import repl
            repl(registry, dispatcher, ctx, config)
            return EXIT_OK

        try:
            outcome = run_command(args.command, args.args, registry, dispatcher, ctx)
        except CommandUsageError as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_USAGE

    print_outcome(outcome)
    return exit_code(outcome)


if __name__ == "__main__":
    sys.exit(main())
