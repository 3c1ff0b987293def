"""Ordered collection of spelling suggestions ranked by relevance."""

from __future__ import annotations

from bisect import bisect_left
from typing import List, Tuple


class SuggestionTree:
    """Keeps suggestions ordered by relevance.

    A suggestion ranks higher when its edit distance is lower, then when its
    frequency is higher, and finally in alphabetical order. Inserting an entry
    equal in all three respects to an existing one has no effect.
    """

    def __init__(self) -> None:
        self._entries: List[Tuple[int, int, str]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def insert(self, word: str, edit_distance: int, freq: int) -> None:
        key = (edit_distance, -freq, word)
        index = bisect_left(self._entries, key)
        if index < len(self._entries) and self._entries[index] == key:
            return
        self._entries.insert(index, key)

    def suggestions(self) -> List[str]:
        """Words from most to least relevant."""
        return [word for _, _, word in self._entries]

    def clear(self) -> None:
        self._entries.clear()