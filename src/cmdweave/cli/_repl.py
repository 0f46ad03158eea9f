"""
Interactive REPL implementation using prompt_toolkit.

Provides command history, tab completion over command names and the same
resolution rules as one-shot invocation.
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import TYPE_CHECKING

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import FileHistory
from prompt_toolkit.styles import Style

from cmdweave.cli.main import print_outcome, run_command
from cmdweave.core import CommandUsageError

if TYPE_CHECKING:
    from cmdweave.config import Config
    from cmdweave.core import Registry
    from cmdweave.dispatch import DispatchContext, Dispatcher


QUIT_WORDS = {"quit", "exit", "q!"}


class CommandCompleter(Completer):
    """Completer for visible command names."""

    def __init__(self, registry: "Registry"):
        self._entries = [
            (descriptor.name, descriptor.about)
            for descriptor in registry
            if not descriptor.hidden
        ]

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        # Only the command token is completed
        if " " in text:
            return
        lowered = text.lower()
        for name, about in self._entries:
            if name.startswith(lowered):
                yield Completion(name, start_position=-len(text), display_meta=about)


def get_style() -> Style:
    """Get the prompt style."""
    return Style.from_dict({
        "prompt": "ansicyan bold",
    })


def eval_line(
    line: str,
    registry: "Registry",
    dispatcher: "Dispatcher",
    ctx: "DispatchContext",
) -> None:
    """Run one REPL line and print the result."""
    try:
        words = shlex.split(line)
    except ValueError as e:
        print(f"error: {e}")
        return
    if not words:
        return
    if words[0] == "repl":
        print("The repl is already running.")
        return

    try:
        outcome = run_command(words[0], words[1:], registry, dispatcher, ctx)
    except CommandUsageError as e:
        print(f"error: {e}")
        return
    print_outcome(outcome)


def repl(
    registry: "Registry",
    dispatcher: "Dispatcher",
    ctx: "DispatchContext",
    config: "Config",
) -> None:
    """Run the interactive REPL until quit or Ctrl+D."""
    history_file = Path(config.get("history_file")).expanduser()
    history_file.parent.mkdir(parents=True, exist_ok=True)

    session: PromptSession = PromptSession(
        history=FileHistory(str(history_file)),
        completer=CommandCompleter(registry),
        auto_suggest=AutoSuggestFromHistory(),
        style=get_style(),
        complete_while_typing=True,
        enable_history_search=True,
    )

    about = registry.config.get("about")
    if about:
        print(about)
    print("Tab: completion | Ctrl+R: search history | 'help' for commands | 'quit' to exit")

    prompt = config.get("prompt_symbol")
    while True:
        try:
            line = session.prompt([("class:prompt", prompt)]).strip()
        except KeyboardInterrupt:
            continue
        except EOFError:
            break

        if line in QUIT_WORDS:
            break
        eval_line(line, registry, dispatcher, ctx)

    print("Goodbye!")
