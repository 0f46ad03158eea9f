"""Dispatching resolved commands to their handlers."""

from cmdweave.dispatch.dispatcher import (
    DispatchContext,
    Dispatcher,
    Outcome,
    OutcomeStatus,
    dispatch,
    get_dispatcher,
)
from cmdweave.dispatch.errors import (
    CommandFailure,
    DebugInfo,
    ErrorKind,
    create_error,
    format_error,
)
from cmdweave.dispatch.formatting import (
    format_multiple_matches,
    format_namespace,
    format_suggestions,
)

__all__ = [
    "Dispatcher",
    "DispatchContext",
    "Outcome",
    "OutcomeStatus",
    "dispatch",
    "get_dispatcher",
    "CommandFailure",
    "DebugInfo",
    "ErrorKind",
    "create_error",
    "format_error",
    "format_multiple_matches",
    "format_namespace",
    "format_suggestions",
]
