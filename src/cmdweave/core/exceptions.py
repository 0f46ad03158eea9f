"""
Exception classes for the command registry and dispatcher.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmdweave.dispatch.errors import CommandFailure


class CommandError(Exception):
    """Base exception for command-related errors."""


class CommandDefinitionError(CommandError):
    """Command declaration is invalid (bad name, duplicate within a module)."""


class ModuleLoadError(CommandError):
    """A source module could not be loaded."""


class _EnvelopeError(CommandError):
    """Error raised from a dispatch outcome, carrying its failure envelope."""

    def __init__(self, envelope: "CommandFailure"):
        super().__init__(envelope.reason)
        self.envelope = envelope


class CommandNotFoundError(_EnvelopeError):
    """No registered command matches the input."""


class AmbiguousCommandError(_EnvelopeError):
    """More than one registered command matches the input."""


class HandlerFailure(_EnvelopeError):
    """A command handler raised or timed out during dispatch."""


class CommandUsageError(CommandError):
    """Arguments for a command could not be parsed."""
