"""
Helper functions for command names and module metadata.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

from cmdweave.core.exceptions import CommandDefinitionError

_WHITESPACE = re.compile(r"\s")


def normalize_name(name: str) -> str:
    """Canonicalize a command name: stripped and lower-cased.

    Raises:
        CommandDefinitionError: if the name is empty, contains whitespace,
            or has an empty dot-segment.
    """
    canonical = (name or "").strip().lower()
    if not canonical:
        raise CommandDefinitionError("Command name must not be empty")
    if _WHITESPACE.search(canonical):
        raise CommandDefinitionError(f"Command name contains whitespace: {name!r}")
    if "" in canonical.split("."):
        raise CommandDefinitionError(f"Command name has an empty segment: {name!r}")
    return canonical


def merge_metadata(maps: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Merge metadata maps left to right.

    List values present on both sides are concatenated (earlier first);
    any other value is replaced by the later one.
    """
    merged: dict[str, Any] = {}
    for mapping in maps:
        for key, value in mapping.items():
            current = merged.get(key)
            if isinstance(current, list) and isinstance(value, list):
                merged[key] = current + value
            elif isinstance(value, list):
                merged[key] = list(value)
            else:
                merged[key] = value
    return merged
