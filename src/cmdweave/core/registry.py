"""
Immutable command registry produced by ``build_registry``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterator, Mapping, Sequence

from cmdweave.core.datamodels import CommandDescriptor, Diagnostic


class Registry:
    """Conflict-checked mapping from canonical command names to descriptors.

    ``by_name`` keeps every contributing descriptor per name; the last one
    registered is the one used for dispatch. Nothing here mutates after
    construction, so a registry can be shared between threads freely.
    """

    def __init__(
        self,
        by_name: Mapping[str, Sequence[CommandDescriptor]] | None = None,
        display_order: Sequence[str] = (),
        config: Mapping[str, Any] | None = None,
        diagnostics: Sequence[Diagnostic] = (),
    ):
        self._by_name = MappingProxyType(
            {name: tuple(descs) for name, descs in (by_name or {}).items()}
        )
        self._display_order = tuple(display_order)
        self._config = MappingProxyType(dict(config or {}))
        self._diagnostics = tuple(diagnostics)

    @classmethod
    def empty(cls) -> Registry:
        return cls()

    @property
    def by_name(self) -> Mapping[str, tuple[CommandDescriptor, ...]]:
        return self._by_name

    @property
    def display_order(self) -> tuple[str, ...]:
        return self._display_order

    @property
    def config(self) -> Mapping[str, Any]:
        return self._config

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self._diagnostics

    def get(self, name: str) -> CommandDescriptor | None:
        """Winning (last-registered) descriptor for a name, if any."""
        descs = self._by_name.get((name or "").strip().lower())
        return descs[-1] if descs else None

    def contributors(self, name: str) -> tuple[CommandDescriptor, ...]:
        """All descriptors declared for a name, in registration order."""
        return self._by_name.get((name or "").strip().lower(), ())

    def names(self) -> tuple[str, ...]:
        return self._display_order

    def visible_names(self) -> list[str]:
        """Names of non-hidden commands, in display order."""
        return [name for name in self._display_order if not self._by_name[name][-1].hidden]

    def namespace_members(self, namespace: str, include_hidden: bool = False) -> list[str]:
        """Sorted names that live under ``namespace.``."""
        prefix = namespace.strip().lower() + "."
        return sorted(
            name for name, descs in self._by_name.items()
            if name.startswith(prefix) and (include_hidden or not descs[-1].hidden)
        )

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._by_name

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return (self._by_name[name][-1] for name in self._display_order)

    def __len__(self) -> int:
        return len(self._by_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Registry):
            return NotImplemented
        return (
            dict(self._by_name) == dict(other._by_name)
            and self._display_order == other._display_order
            and dict(self._config) == dict(other._config)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Registry({len(self)} commands, {len(self._diagnostics)} diagnostics)"
