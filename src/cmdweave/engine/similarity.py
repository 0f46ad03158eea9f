"""String similarity for command matching.

Levenshtein edit distance and the normalized similarity derived from it.
"""
from __future__ import annotations


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between two strings.

    Minimum number of single-character insertions, deletions or
    substitutions needed to turn ``a`` into ``b``.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Keep the shorter string on the inner loop
    if len(a) < len(b):
        a, b = b, a

    prev_row = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        row = [i]
        for j, char_b in enumerate(b, 1):
            cost = 0 if char_a == char_b else 1
            row.append(min(
                row[j - 1] + 1,         # insertion
                prev_row[j] + 1,        # deletion
                prev_row[j - 1] + cost,  # substitution
            ))
        prev_row = row
    return prev_row[-1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity in [0, 1]: ``1 - distance / max_len``."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1.0 - edit_distance(a, b) / max_len


def name_similarity(text: str, name: str) -> float:
    """Best similarity of ``text`` against a full name and its final segment."""
    text = text.lower()
    name = name.lower()
    last = name.rsplit(".", 1)[-1]
    return max(similarity(text, name), similarity(text, last))
