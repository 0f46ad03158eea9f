"""
Dispatcher: turn a resolution into a handler call or a user-facing error.

Each handler runs on its own daemon thread so a crashing or hanging handler
never takes down the caller. A handler that outlives its timeout is abandoned:
it keeps no capacity and is not waited for at shutdown. Handler exceptions,
including ``SystemExit``, are caught here and normalized into a
``CommandFailure``; resolution problems are returned as values.
"""

from __future__ import annotations

import atexit
import logging
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from cmdweave.core.exceptions import (
    AmbiguousCommandError,
    CommandNotFoundError,
    HandlerFailure,
)
from cmdweave.core.registry import Registry
from cmdweave.dispatch.errors import CommandFailure, ErrorKind, create_error, format_error
from cmdweave.dispatch.formatting import (
    format_multiple_matches,
    format_namespace,
    format_suggestions,
)
from cmdweave.engine.matcher import Ambiguous, Exact, Resolver, Single

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchContext:
    """Per-invocation context handed to every handler."""
    debug: bool = False
    settings: dict[str, Any] = field(default_factory=dict)
    timeout: Optional[float] = None
    max_suggestions: int = 5
    registry: Optional[Registry] = None
    dispatcher: Optional[Dispatcher] = None


class OutcomeStatus(str, Enum):
    OK = "ok"
    AMBIGUOUS = "ambiguous"
    NAMESPACE = "namespace"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class Outcome(BaseModel):
    """Result of a dispatch."""
    status: OutcomeStatus
    command: Optional[str] = None
    output: Any = None
    message: Optional[str] = None
    error: Optional[CommandFailure] = None
    candidates: list[str] = Field(default_factory=list)

    model_config = {"arbitrary_types_allowed": True}

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    def raise_for_error(self) -> None:
        """Raise the matching CommandError if this outcome is a failure."""
        if self.ok or self.error is None:
            return
        if self.status is OutcomeStatus.AMBIGUOUS:
            raise AmbiguousCommandError(self.error)
        if self.status is OutcomeStatus.FAILED:
            raise HandlerFailure(self.error)
        raise CommandNotFoundError(self.error)

    def render(self) -> str:
        """Text to show the user."""
        if self.ok:
            return "" if self.output is None else str(self.output)
        return self.message or ""


class Dispatcher:
    """Resolve input and invoke the winning handler on its own thread."""

    def __init__(
        self,
        resolver: Resolver | None = None,
        timeout: float | None = None,
    ):
        self.resolver = resolver or Resolver()
        self.timeout = timeout
        self._lock = threading.Lock()
        self._running: set[threading.Thread] = set()
        self._closed = False

    def dispatch(
        self,
        text: str,
        parsed_args: Any,
        registry: Registry,
        ctx: DispatchContext | None = None,
    ) -> Outcome:
        """Resolve ``text`` against ``registry`` and act on the result."""
        ctx = ctx or DispatchContext()
        if ctx.registry is None:
            ctx = replace(ctx, registry=registry)
        if ctx.dispatcher is None:
            ctx = replace(ctx, dispatcher=self)

        result = self.resolver.resolve(text, registry)

        if isinstance(result, Single):
            if not isinstance(result, Exact):
                logger.info(f"Resolved '{text}' to '{result.name}'")
            return self._invoke(result.name, parsed_args, registry, ctx)

        if isinstance(result, Ambiguous):
            return Outcome(
                status=OutcomeStatus.AMBIGUOUS,
                command=text,
                message=format_multiple_matches(result.names),
                error=create_error(
                    ErrorKind.AMBIGUOUS_COMMAND,
                    f"'{text}' matches {len(result.names)} commands",
                    command=text,
                ),
                candidates=list(result.names),
            )

        return self._no_match(text, registry, ctx)

    def _start(
        self,
        name: str,
        handler: Callable[..., Any],
        parsed_args: Any,
        ctx: DispatchContext,
    ) -> tuple[threading.Thread, Future]:
        """Run ``handler`` on a fresh daemon thread, reporting through a Future."""
        future: Future = Future()

        def run() -> None:
            future.set_running_or_notify_cancel()
            error = None
            try:
                output = handler(parsed_args, ctx)
            except BaseException as e:
                # SystemExit and KeyboardInterrupt from a handler are failures too
                error = e
            self._forget(threading.current_thread())
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(output)

        thread = threading.Thread(target=run, name=f"cmdweave-dispatch-{name}", daemon=True)
        with self._lock:
            if self._closed:
                raise RuntimeError("cannot dispatch after shutdown")
            self._running.add(thread)
        thread.start()
        return thread, future

    def _forget(self, thread: threading.Thread) -> None:
        with self._lock:
            self._running.discard(thread)

    def _invoke(
        self,
        name: str,
        parsed_args: Any,
        registry: Registry,
        ctx: DispatchContext,
    ) -> Outcome:
        descriptor = registry.get(name)
        timeout = ctx.timeout if ctx.timeout is not None else self.timeout

        thread, future = self._start(name, descriptor.handler, parsed_args, ctx)
        try:
            output = future.result(timeout=timeout)
        except BaseException as e:
            if future.done() and future.exception() is e:
                logger.error(f"Error executing command {name}: {e!r}")
                logger.debug(f"Traceback for {name}", exc_info=e)
                failure = create_error(
                    ErrorKind.COMMAND_FAILED,
                    f"command execution failed: {e!r}",
                    command=name,
                    original_error=e,
                )
            else:
                self._forget(thread)
                if not isinstance(e, FutureTimeoutError):
                    # interrupted while waiting, not a handler failure
                    raise
                logger.error(f"Command {name} timed out after {timeout}s")
                failure = create_error(
                    ErrorKind.COMMAND_TIMEOUT,
                    f"command timed out after {timeout}s",
                    command=name,
                )
        else:
            return Outcome(status=OutcomeStatus.OK, command=name, output=output)

        return Outcome(
            status=OutcomeStatus.FAILED,
            command=name,
            message=format_error(failure, debug=ctx.debug),
            error=failure,
        )

    def _no_match(self, text: str, registry: Registry, ctx: DispatchContext) -> Outcome:
        token = (text or "").strip()

        if token and "." not in token:
            members = registry.namespace_members(token)
            if members:
                return Outcome(
                    status=OutcomeStatus.NAMESPACE,
                    command=token,
                    message=format_namespace(token, members),
                    error=create_error(
                        ErrorKind.COMMAND_NOT_FOUND,
                        f"{token} is a command namespace",
                        command=token,
                    ),
                    candidates=members,
                )

        suggestions = self.resolver.suggest(token, registry.visible_names(), ctx.max_suggestions)
        if suggestions:
            logger.info(f"Suggestions for unknown command '{token}': {', '.join(suggestions)}")

        failure = create_error(
            ErrorKind.COMMAND_NOT_FOUND,
            f"unknown command: {token}",
            command=token,
        )
        message = format_error(failure, debug=ctx.debug)
        if suggestions:
            message += "\n" + format_suggestions(suggestions)
        return Outcome(
            status=OutcomeStatus.NOT_FOUND,
            command=token,
            message=message,
            error=failure,
            candidates=suggestions,
        )

    def running(self) -> int:
        """Handlers still running that a caller is waiting on."""
        with self._lock:
            return len(self._running)

    def shutdown(self, wait: bool = True, timeout: float | None = None) -> None:
        """Refuse new dispatches; optionally wait for handlers still being awaited.

        Abandoned (timed-out) handlers are never waited for.
        """
        with self._lock:
            self._closed = True
            threads = list(self._running)
        if wait:
            for thread in threads:
                thread.join(timeout)

    def __enter__(self) -> Dispatcher:
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()


# Singleton instance
_dispatcher: Optional[Dispatcher] = None
_dispatcher_lock = threading.Lock()


def get_dispatcher() -> Dispatcher:
    """Get the shared default Dispatcher."""
    global _dispatcher
    with _dispatcher_lock:
        if _dispatcher is None:
            _dispatcher = Dispatcher()
            atexit.register(_dispatcher.shutdown, wait=False)
        return _dispatcher


def dispatch(
    text: str,
    parsed_args: Any,
    registry: Registry,
    ctx: DispatchContext | None = None,
) -> Outcome:
    """Resolve and run a command with the shared default dispatcher."""
    return get_dispatcher().dispatch(text, parsed_args, registry, ctx)
