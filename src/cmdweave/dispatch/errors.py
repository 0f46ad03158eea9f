"""
Uniform error envelope for dispatch failures.

Every failure the dispatcher reports (unknown command, ambiguity, handler
crash, timeout) is normalized into a ``CommandFailure`` carrying optional
debug information. ``format_error`` renders it, adding the debug block only
when asked to.
"""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

MAX_STACK_FRAMES = 10


class ErrorKind(str, Enum):
    """Types of errors the dispatcher reports."""
    COMMAND_NOT_FOUND = "command_not_found"
    AMBIGUOUS_COMMAND = "ambiguous_command"
    COMMAND_FAILED = "command_failed"
    COMMAND_TIMEOUT = "command_timeout"


class DebugInfo(BaseModel):
    """Debug context attached to a failure."""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    error_location: Optional[str] = None
    original_error: Any = Field(default=None, exclude=True)
    stack_trace: Optional[list[str]] = None

    model_config = {"arbitrary_types_allowed": True}


class CommandFailure(BaseModel):
    """Error envelope returned inside a dispatch outcome."""
    kind: ErrorKind
    reason: str
    command: Optional[str] = None
    debug: Optional[DebugInfo] = None


def _frames(exc: BaseException) -> list[traceback.FrameSummary]:
    return traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []


def create_error(
    kind: ErrorKind,
    reason: str,
    *,
    command: str | None = None,
    original_error: BaseException | None = None,
    error_location: str | None = None,
) -> CommandFailure:
    """Build a failure envelope, capturing the traceback of ``original_error``."""
    stack_trace = None
    if original_error is not None:
        frames = _frames(original_error)
        stack_trace = [f"{f.name} ({f.filename}:{f.lineno})" for f in frames]
        if error_location is None and frames:
            last = frames[-1]
            error_location = f"{last.name} ({last.filename}:{last.lineno})"

    return CommandFailure(
        kind=kind,
        reason=reason,
        command=command,
        debug=DebugInfo(
            error_location=error_location,
            original_error=original_error,
            stack_trace=stack_trace,
        ),
    )


def format_error(failure: CommandFailure, debug: bool = False) -> str:
    """Format a failure for display.

    Example:
        >>> format_error(create_error(ErrorKind.COMMAND_FAILED, "boom"))
        'Error (command_failed): boom'
    """
    base = f"Error ({failure.kind.value}): {failure.reason}"
    if debug and failure.debug is not None:
        return base + "\n" + _format_debug_info(failure.debug)
    return base


def _format_debug_info(info: DebugInfo) -> str:
    lines = [
        "Debug Information:",
        f"  Time: {info.timestamp.isoformat()}",
    ]
    if info.error_location:
        lines.append(f"  Location: {info.error_location}")
    if info.original_error is not None:
        lines.append(f"  Original error: {info.original_error!r}")
    lines.append("  Stack trace:")
    if info.stack_trace is None:
        lines.append("    <not available>")
    elif not info.stack_trace:
        lines.append("    <empty stack trace>")
    else:
        lines.extend(f"    {frame}" for frame in info.stack_trace[-MAX_STACK_FRAMES:])
    return "\n".join(lines)
