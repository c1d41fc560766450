"""Edit-distance helpers for fuzzy term matching."""

from __future__ import annotations

from collections.abc import Iterable


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return max_distance+1 early when
            distance is guaranteed to exceed this threshold.

    Returns:
        The minimum number of single-character insertions, deletions or
        substitutions turning s1 into s2 (capped at max_distance+1).

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)

    if max_distance is not None and n - m > max_distance:
        return max_distance + 1

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = j
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,
                curr_row[i - 1] + 1,
                prev_row[i - 1] + cost,
            )
            row_min = min(row_min, curr_row[i])

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def similarity(term: str, candidate: str) -> float:
    """Similarity in [0, 1]: ``1 - distance / min(len(term), len(candidate))``.

    Shorter strings tolerate fewer edits. Identical strings score 1.0 and
    an empty side scores 0.0 unless both are empty.
    """
    if term == candidate:
        return 1.0
    shortest = min(len(term), len(candidate))
    if shortest == 0:
        return 0.0
    # Anything beyond `shortest` edits already maps to similarity <= 0
    distance = levenshtein_distance(term, candidate, shortest)
    return max(0.0, 1.0 - distance / shortest)


def find_similar_terms(
    term: str,
    vocabulary: Iterable[str],
    min_similarity: float,
) -> list[tuple[str, float]]:
    """Vocabulary terms at least ``min_similarity`` similar to ``term``.

    Returns:
        (candidate, similarity) tuples, most similar first.
    """
    matches: list[tuple[str, float]] = []
    for candidate in vocabulary:
        score = similarity(term, candidate)
        if score >= min_similarity and score > 0:
            matches.append((candidate, score))

    matches.sort(key=lambda x: (-x[1], x[0]))
    return matches
