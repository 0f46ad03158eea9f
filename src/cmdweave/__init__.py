"""
cmdweave - command registry and forgiving command resolution.

Commands are declared in source modules, merged into one conflict-checked
registry, and looked up by exact name, suffix, namespace, abbreviation or
edit distance.

Example usage:
    from cmdweave import ModuleBuilder, build_registry, dispatch

    builder = ModuleBuilder("myapp")

    @builder.command("sys.info", "Show system information")
    def sys_info(args, ctx):
        return "all good"

    registry, diagnostics = build_registry([builder.build()])
    outcome = dispatch("info", None, registry)
    print(outcome.render())
"""

__version__ = "0.1.0"

from cmdweave.core import (
    AmbiguousCommandError,
    CommandDefinitionError,
    CommandDescriptor,
    CommandError,
    CommandNotFoundError,
    CommandUsageError,
    Diagnostic,
    DiagnosticKind,
    HandlerFailure,
    ModuleBuilder,
    ModuleLoadError,
    Registry,
    SourceModule,
    build_registry,
)
from cmdweave.dispatch import (
    DispatchContext,
    Dispatcher,
    Outcome,
    OutcomeStatus,
    dispatch,
    format_error,
    format_multiple_matches,
)
from cmdweave.engine import (
    Ambiguous,
    Exact,
    NoMatch,
    ResolutionResult,
    Resolver,
    Single,
    edit_distance,
    resolve,
    score_match,
)

__all__ = [
    # Version
    "__version__",
    # Registry
    "ModuleBuilder",
    "build_registry",
    "Registry",
    "CommandDescriptor",
    "SourceModule",
    "Diagnostic",
    "DiagnosticKind",
    # Resolution
    "Resolver",
    "resolve",
    "score_match",
    "edit_distance",
    "ResolutionResult",
    "Exact",
    "Single",
    "Ambiguous",
    "NoMatch",
    # Dispatch
    "Dispatcher",
    "DispatchContext",
    "Outcome",
    "OutcomeStatus",
    "dispatch",
    "format_error",
    "format_multiple_matches",
    # Exceptions
    "CommandError",
    "CommandDefinitionError",
    "CommandNotFoundError",
    "CommandUsageError",
    "AmbiguousCommandError",
    "HandlerFailure",
    "ModuleLoadError",
]
