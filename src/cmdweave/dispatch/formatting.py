"""User-facing messages for ambiguous and unknown commands."""

from __future__ import annotations

from typing import Sequence


def format_multiple_matches(matches: Sequence[str]) -> str:
    """Numbered suggestion list for an ambiguous input.

    >>> print(format_multiple_matches(["ll.agent.create", "ll.agent.engage"]))
    ? Did you mean:
      1. ll.agent.create
      2. ll.agent.engage
    """
    lines = [f"  {idx}. {name}" for idx, name in enumerate(matches, 1)]
    return "? Did you mean:\n" + "\n".join(lines)


def format_namespace(namespace: str, members: Sequence[str]) -> str:
    """Explain that the input is a namespace and list its commands."""
    return (
        f"{namespace} is a command namespace. Available commands:\n"
        f"{', '.join(members)}\n"
        f"Try '{namespace}.<command>' to run a specific command in this namespace."
    )


def format_suggestions(suggestions: Sequence[str]) -> str:
    if not suggestions:
        return ""
    return "Did you mean: " + ", ".join(suggestions) + "?"
