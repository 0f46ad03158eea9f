"""Command matching engine: edit distance, strategies and resolution."""

from cmdweave.engine.matcher import (
    DEFAULT_STRATEGIES,
    FUZZY_THRESHOLD,
    Ambiguous,
    Exact,
    NoMatch,
    ResolutionResult,
    Resolver,
    Single,
    Strategy,
    abbreviation_match,
    namespace_match,
    partial_namespace_match,
    resolve,
    score_match,
    suffix_match,
    suggest,
)
from cmdweave.engine.similarity import edit_distance, name_similarity, similarity

__all__ = [
    "Resolver",
    "Strategy",
    "DEFAULT_STRATEGIES",
    "FUZZY_THRESHOLD",
    "ResolutionResult",
    "Exact",
    "Single",
    "Ambiguous",
    "NoMatch",
    "resolve",
    "score_match",
    "suggest",
    "suffix_match",
    "partial_namespace_match",
    "namespace_match",
    "abbreviation_match",
    "edit_distance",
    "similarity",
    "name_similarity",
]
