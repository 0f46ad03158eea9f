"""
Registry builder: merges source modules into one conflict-checked registry.

Source modules are declared with a ``ModuleBuilder`` and evaluated once at
process start:

    builder = ModuleBuilder("myapp", sorted=True, author="Me")

    @builder.command("sys.info", "Show system information")
    def sys_info(args, ctx):
        return platform.platform()

    registry, diagnostics = build_registry([builder.build(), default_module()])
"""

from __future__ import annotations

import inspect
import logging
from argparse import ArgumentParser
from collections import Counter
from typing import Any, Callable, Iterable, Optional

from cmdweave.core.datamodels import (
    CommandDescriptor,
    Diagnostic,
    DiagnosticKind,
    SourceModule,
)
from cmdweave.core.exceptions import CommandDefinitionError
from cmdweave.core.helpers import merge_metadata, normalize_name
from cmdweave.core.registry import Registry

logger = logging.getLogger(__name__)


def _first_doc_line(func: Callable) -> str:
    doc = inspect.getdoc(func) or ""
    return doc.split("\n\n", 1)[0].strip()


class ModuleBuilder:
    """Collects command declarations for one source module."""

    def __init__(self, id: str, *, sorted: Optional[bool] = None, **metadata: Any):
        self.id = id
        self.sorted = sorted
        self.metadata = metadata
        self._commands: dict[str, CommandDescriptor] = {}

    def add(
        self,
        name: str,
        handler: Callable[..., Any],
        about: str | None = None,
        *,
        hidden: bool = False,
        usage: str | None = None,
        configure_parser: Callable[[ArgumentParser], None] | None = None,
    ) -> CommandDescriptor:
        """Register a command handler under ``name``.

        Raises:
            CommandDefinitionError: if the name is invalid or already declared
                in this module.
        """
        canonical = normalize_name(name)
        if canonical in self._commands:
            raise CommandDefinitionError(
                f"Command '{canonical}' declared twice in module '{self.id}'"
            )
        if not callable(handler):
            raise CommandDefinitionError(f"Handler for '{canonical}' is not callable")

        descriptor = CommandDescriptor(
            name=canonical,
            about=about if about is not None else _first_doc_line(handler),
            hidden=hidden,
            handler=handler,
            declared_in=self.id,
            usage=usage,
            configure_parser=configure_parser,
        )
        self._commands[canonical] = descriptor
        return descriptor

    def command(
        self,
        name: str,
        about: str | None = None,
        *,
        hidden: bool = False,
        usage: str | None = None,
        configure_parser: Callable[[ArgumentParser], None] | None = None,
    ) -> Callable:
        """Decorator form of ``add``.

        Example:
            @builder.command("cli.status", "Show current CLI state")
            def cli_status(args, ctx):
                return f"{len(ctx.registry)} commands"
        """
        def decorator(func: Callable) -> Callable:
            self.add(
                name,
                func,
                about,
                hidden=hidden,
                usage=usage,
                configure_parser=configure_parser,
            )
            return func
        return decorator

    def build(self) -> SourceModule:
        return SourceModule(
            id=self.id,
            commands=tuple(self._commands.values()),
            sorted=self.sorted,
            metadata=dict(self.metadata),
        )

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: str) -> bool:
        return name.strip().lower() in self._commands


def _reject_duplicate_modules(
    modules: list[SourceModule],
) -> tuple[list[SourceModule], list[Diagnostic]]:
    """Drop every copy of any module supplied more than once."""
    counts = Counter(m.id for m in modules)
    diagnostics = []
    reported: set[str] = set()
    for module in modules:
        n = counts[module.id]
        if n > 1 and module.id not in reported:
            reported.add(module.id)
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.DUPLICATE_SOURCE_MODULE,
                subject=module.id,
                detail=f"Source module '{module.id}' supplied {n} times; all copies rejected",
                sources=(module.id,),
            ))
    return [m for m in modules if counts[m.id] == 1], diagnostics


def build_registry(modules: Iterable[SourceModule]) -> tuple[Registry, list[Diagnostic]]:
    """Merge an ordered list of source modules into one registry.

    Never raises on conflicts. Duplicate modules are excluded entirely,
    duplicate command names are kept (last registered wins) and both are
    reported as diagnostics.

    Returns:
        Tuple of (Registry, diagnostics)
    """
    surviving, diagnostics = _reject_duplicate_modules(list(modules))

    config = merge_metadata(m.metadata for m in surviving)

    by_name: dict[str, list[CommandDescriptor]] = {}
    declaration_order: list[str] = []
    for module in surviving:
        for descriptor in module.commands:
            if descriptor.name not in by_name:
                by_name[descriptor.name] = []
                declaration_order.append(descriptor.name)
            by_name[descriptor.name].append(descriptor)

    for name, descs in by_name.items():
        if len(descs) > 1:
            sources = tuple(d.declared_in for d in descs)
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.DUPLICATE_COMMAND_NAME,
                subject=name,
                detail=(
                    f"Command '{name}' declared by {', '.join(sources)}; "
                    f"using the one from '{sources[-1]}'"
                ),
                sources=sources,
            ))

    sort_names = True
    if surviving and surviving[0].sorted is not None:
        sort_names = surviving[0].sorted

    if sort_names:
        display_order = sorted(by_name, key=str.lower)
    else:
        display_order = declaration_order

    logger.debug(
        f"Built registry: {len(by_name)} commands from {len(surviving)} modules, "
        f"{len(diagnostics)} diagnostics"
    )
    registry = Registry(by_name, display_order, config, diagnostics)
    return registry, diagnostics
