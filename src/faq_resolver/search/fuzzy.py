"""Fuzzy title matching for typo-tolerant FAQ lookup.

Scores candidate titles with a normalized Levenshtein ratio:

    ratio = 1 - distance / max(len(a), len(b))

The ratio is symmetric, deterministic, lies in [0, 1], and is exactly 1.0
only for strings that are equal ignoring case. A title is accepted only when
its ratio is strictly greater than the threshold (0.5 by default).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


DEFAULT_THRESHOLD = 0.5


@dataclass(frozen=True, slots=True)
class FuzzyMatch:
    """A candidate title together with its similarity score."""

    title: str
    score: float


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Uses dynamic programming for O(m*n) time complexity, with optional
    early termination when distance exceeds max_distance.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return max_distance+1 early when
            distance is guaranteed to exceed this threshold.

    Returns:
        The minimum number of single-character edits (insertions,
        deletions, substitutions) needed to change s1 into s2.
        If max_distance is set and exceeded, returns max_distance+1.

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("bluprint", "blueprint")
        1
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Shorter string as columns
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)

    if max_distance is not None and abs(m - n) > max_distance:
        return max_distance + 1

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = curr_row[0]
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
            row_min = min(row_min, curr_row[i])

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def similarity_ratio(a: str, b: str) -> float:
    """Return a case-insensitive similarity score in [0, 1].

    Examples:
        >>> similarity_ratio("Blueprint", "blueprint")
        1.0
        >>> similarity_ratio("abc", "xyz")
        0.0
    """
    a_lower = a.lower()
    b_lower = b.lower()
    longest = max(len(a_lower), len(b_lower))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a_lower, b_lower) / longest


def best_match(
    candidate: str,
    titles: Iterable[str],
    threshold: float = DEFAULT_THRESHOLD,
) -> FuzzyMatch | None:
    """Find the single best title for ``candidate``.

    Every title is scored; the highest scorer wins and the first title seen
    keeps the win on ties. The winner is returned only if its score is
    strictly greater than ``threshold``.

    Returns:
        The winning ``FuzzyMatch``, or None when ``titles`` is empty or no
        title clears the threshold.
    """
    best: FuzzyMatch | None = None
    for title in titles:
        score = similarity_ratio(candidate, title)
        if best is None or score > best.score:
            best = FuzzyMatch(title=title, score=score)

    if best is None or best.score <= threshold:
        return None
    return best


def rank_matches(
    candidate: str,
    titles: Iterable[str],
    limit: int = 10,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[FuzzyMatch]:
    """Return up to ``limit`` titles above ``threshold``, best first.

    Sorting is stable, so equal scores keep their input order.
    """
    if limit <= 0:
        return []

    scored = [FuzzyMatch(title=title, score=similarity_ratio(candidate, title)) for title in titles]
    accepted = [match for match in scored if match.score > threshold]
    accepted.sort(key=lambda match: match.score, reverse=True)
    return accepted[:limit]
