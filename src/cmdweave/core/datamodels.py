"""
Data models for command declarations and build diagnostics.
"""

from __future__ import annotations

from argparse import ArgumentParser
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field, field_validator

from cmdweave.core.exceptions import CommandDefinitionError
from cmdweave.core.helpers import normalize_name


class CommandDescriptor(BaseModel):
    """Immutable metadata for one command.

    The handler is stored directly on the descriptor and is called as
    ``handler(parsed_args, ctx)`` by the dispatcher.
    """
    name: str
    about: str = ""
    hidden: bool = False
    handler: Callable[..., Any] = Field(exclude=True)
    declared_in: str
    usage: Optional[str] = None
    configure_parser: Optional[Callable[[ArgumentParser], None]] = Field(default=None, exclude=True)

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @field_validator("name")
    @classmethod
    def _canonical_name(cls, value: str) -> str:
        try:
            return normalize_name(value)
        except CommandDefinitionError as e:
            raise ValueError(str(e)) from e

    @property
    def segments(self) -> list[str]:
        return self.name.split(".")

    def get_usage(self) -> str:
        """Usage line, falling back to the bare command name."""
        return self.usage or self.name


class SourceModule(BaseModel):
    """A named, ordered bundle of command descriptors.

    ``sorted`` is ``None`` when the module does not state a display preference.
    Two modules with the same ``id`` are the same module.
    """
    id: str
    commands: tuple[CommandDescriptor, ...] = ()
    sorted: Optional[bool] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    def command_names(self) -> list[str]:
        return [c.name for c in self.commands]


class DiagnosticKind(str, Enum):
    """Kinds of non-fatal problems found while building a registry."""
    DUPLICATE_SOURCE_MODULE = "duplicate_source_module"
    DUPLICATE_COMMAND_NAME = "duplicate_command_name"


class Diagnostic(BaseModel):
    """A non-fatal problem found while building a registry."""
    kind: DiagnosticKind
    subject: str
    detail: str
    sources: tuple[str, ...] = ()

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.detail}"
