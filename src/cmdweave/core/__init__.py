"""
Core module for the cmdweave package.

Provides command descriptors, source modules, and the registry builder.
"""

from cmdweave.core.builder import ModuleBuilder, build_registry
from cmdweave.core.datamodels import (
    CommandDescriptor,
    Diagnostic,
    DiagnosticKind,
    SourceModule,
)
from cmdweave.core.exceptions import (
    AmbiguousCommandError,
    CommandDefinitionError,
    CommandError,
    CommandNotFoundError,
    CommandUsageError,
    HandlerFailure,
    ModuleLoadError,
)
from cmdweave.core.helpers import normalize_name
from cmdweave.core.registry import Registry

__all__ = [
    # Registry
    "Registry",
    "ModuleBuilder",
    "build_registry",
    # Models
    "CommandDescriptor",
    "SourceModule",
    "Diagnostic",
    "DiagnosticKind",
    # Exceptions
    "CommandError",
    "CommandDefinitionError",
    "CommandNotFoundError",
    "CommandUsageError",
    "AmbiguousCommandError",
    "HandlerFailure",
    "ModuleLoadError",
    # Helpers
    "normalize_name",
]
