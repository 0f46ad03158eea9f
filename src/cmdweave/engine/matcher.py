"""
Command resolution: map a typed token onto registered command names.

Strategies run in priority order against every registered name:

- exact:           "sys.info"    -> "sys.info" (short-circuits)
- suffix:          "engage"      -> "ll.agent.engage"
- partial ns:      "world.load"  -> "ll.world.load"
- namespace:       "sys"         -> "sys.info", "sys.flush"
- abbreviation:    "llm.conf"    -> "ll.llm.config"
- edit distance:   "sys.inof"    -> "sys.info"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable, Sequence, Union

from cmdweave.engine.similarity import name_similarity

if TYPE_CHECKING:
    from cmdweave.core.registry import Registry

logger = logging.getLogger(__name__)

FUZZY_THRESHOLD = 0.7
SUGGESTION_THRESHOLD = 0.5
NAMESPACE_SCORE = 0.7


# ============================================================================
# Resolution results
# ============================================================================

@dataclass(frozen=True, eq=False)
class Single:
    """Input resolved to exactly one command."""
    name: str

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Single):
            return self.name == other.name
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("single", self.name))


@dataclass(frozen=True, eq=False)
class Exact(Single):
    """Input equals a registered name (case-insensitive)."""


@dataclass(frozen=True)
class Ambiguous:
    """Input matched several commands, best first."""
    names: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "names", tuple(self.names))


@dataclass(frozen=True)
class NoMatch:
    """Nothing matched."""


ResolutionResult = Union[Exact, Single, Ambiguous, NoMatch]


# ============================================================================
# Match predicates
# ============================================================================

def _split(text: str) -> list[str]:
    return text.lower().split(".")


def suffix_match(text: str, candidate: str) -> bool:
    """Input equals the final segment of a namespaced candidate."""
    parts = _split(candidate)
    return len(parts) > 1 and parts[-1] == text.lower()


def partial_namespace_match(text: str, candidate: str) -> bool:
    """Input segments are the trailing segments of the candidate.

    >>> partial_namespace_match("agent.create", "ll.agent.create")
    True
    >>> partial_namespace_match("ll.agent.create.extra", "ll.agent.create")
    False
    """
    text_parts = _split(text)
    cand_parts = _split(candidate)
    if len(text_parts) > len(cand_parts):
        return False
    return cand_parts[-len(text_parts):] == text_parts


def namespace_match(text: str, candidate: str) -> bool:
    """Input names a namespace the candidate lives in.

    The input segments must equal a contiguous run of the candidate's
    namespace segments (everything but the final one), so "sys" matches
    "sys.info" and "agent" matches "ll.agent.create".
    """
    text_parts = _split(text)
    namespace = _split(candidate)[:-1]
    n = len(text_parts)
    return any(
        namespace[start:start + n] == text_parts
        for start in range(len(namespace) - n + 1)
    )


def abbreviation_match(text: str, candidate: str) -> bool:
    """Each input segment prefixes the aligned trailing candidate segment.

    >>> abbreviation_match("llm.conf", "ll.llm.config")
    True
    """
    text_parts = _split(text)
    cand_parts = _split(candidate)
    if len(text_parts) > len(cand_parts):
        return False
    aligned = cand_parts[-len(text_parts):]
    return all(part and seg.startswith(part) for part, seg in zip(text_parts, aligned))


# ============================================================================
# Strategies
# ============================================================================

def _suffix_score(text: str, candidate: str) -> float:
    if not suffix_match(text, candidate):
        return 0.0
    return 0.9 + 0.1 * len(text) / len(candidate)


def _partial_namespace_score(text: str, candidate: str) -> float:
    if "." not in text or not partial_namespace_match(text, candidate):
        return 0.0
    return 0.6 + 0.2 * len(_split(text)) / len(_split(candidate))


def _namespace_score(text: str, candidate: str) -> float:
    return NAMESPACE_SCORE if namespace_match(text, candidate) else 0.0


def _abbreviation_score(text: str, candidate: str) -> float:
    if not abbreviation_match(text, candidate):
        return 0.0
    n = len(_split(text))
    typed = len(text.replace(".", ""))
    full = sum(len(seg) for seg in _split(candidate)[-n:])
    return 0.5 + 0.1 * typed / full


@dataclass(frozen=True)
class Strategy:
    """A named scoring function with an acceptance floor."""
    name: str
    scorer: Callable[[str, str], float]
    floor: float = 0.0

    def score(self, text: str, candidate: str) -> float:
        value = self.scorer(text, candidate)
        return value if value > self.floor else 0.0


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    Strategy("suffix", _suffix_score),
    Strategy("partial_namespace", _partial_namespace_score),
    Strategy("namespace", _namespace_score),
    Strategy("abbreviation", _abbreviation_score),
)


class Resolver:
    """Resolve free-text input against a registry.

    Stateless after construction; one instance can serve any number of
    callers concurrently.
    """

    def __init__(
        self,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
        fuzzy_threshold: float = FUZZY_THRESHOLD,
        suggestion_threshold: float = SUGGESTION_THRESHOLD,
    ):
        self.fuzzy_threshold = fuzzy_threshold
        self.suggestion_threshold = suggestion_threshold
        self.strategies = tuple(strategies) + (
            Strategy("edit_distance", name_similarity, floor=fuzzy_threshold),
        )

    def score_match(self, text: str, candidate: str) -> float:
        """Score in [0, 1]: 1.0 for exact, else the best strategy score."""
        text = text.strip().lower()
        candidate = candidate.strip().lower()
        if not text or not candidate:
            return 0.0
        if text == candidate:
            return 1.0
        return max(s.score(text, candidate) for s in self.strategies)

    def rank(self, text: str, names: Iterable[str]) -> list[tuple[str, float]]:
        """Names with a positive score, best first, ties alphabetical."""
        scored = {}
        for name in names:
            score = self.score_match(text, name)
            if score > 0.0:
                scored[name] = score
        return sorted(scored.items(), key=lambda item: (-item[1], item[0]))

    def resolve(self, text: str, registry: "Registry") -> ResolutionResult:
        text = (text or "").strip()
        if not text:
            return NoMatch()

        key = text.lower()
        if key in registry.by_name:
            return Exact(key)

        ranked = self.rank(key, registry.by_name)
        logger.debug(f"Resolved {text!r}: {ranked[:5]}")
        if not ranked:
            return NoMatch()
        if len(ranked) == 1:
            return Single(ranked[0][0])
        return Ambiguous(tuple(name for name, _ in ranked))

    def suggest(self, text: str, names: Iterable[str], limit: int = 5) -> list[str]:
        """Advisory edit-distance suggestions, best first.

        Uses the same similarity as the edit-distance strategy but the looser
        ``suggestion_threshold``, so input too far off to resolve still gets a
        "did you mean" hint.
        """
        text = (text or "").strip().lower()
        if not text or limit <= 0:
            return []
        scored = [(name, name_similarity(text, name)) for name in names]
        scored = [item for item in scored if item[1] > self.suggestion_threshold]
        scored.sort(key=lambda item: (-item[1], item[0]))
        return [name for name, _ in scored[:limit]]


_default_resolver = Resolver()


def resolve(text: str, registry: "Registry") -> ResolutionResult:
    """Resolve input against a registry using the default strategies."""
    return _default_resolver.resolve(text, registry)


def score_match(text: str, candidate: str) -> float:
    """Score how well ``text`` matches ``candidate`` (0.0 to 1.0)."""
    return _default_resolver.score_match(text, candidate)


def suggest(text: str, names: Iterable[str], limit: int = 5) -> list[str]:
    return _default_resolver.suggest(text, names, limit)
