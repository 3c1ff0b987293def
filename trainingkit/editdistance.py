"""Bounded Levenshtein distance."""

from __future__ import annotations


def edit_distance(s1: str, s2: str, max_dist: int) -> int:
    """Levenshtein distance between ``s1`` and ``s2``.

    Once it is certain the distance exceeds ``max_dist`` the computation stops
    early and returns ``max_dist + 1``.
    """
    len2 = len(s2)
    if abs(len(s1) - len2) > max_dist:
        return max_dist + 1

    previous = list(range(len2 + 1))
    for i, c1 in enumerate(s1, 1):
        current = [i] * (len2 + 1)
        for j, c2 in enumerate(s2, 1):
            if c1 == c2:
                current[j] = previous[j - 1]
            else:
                current[j] = 1 + min(previous[j], current[j - 1], previous[j - 1])
        if min(current) > max_dist:
            return max_dist + 1
        previous = current
    return previous[len2]