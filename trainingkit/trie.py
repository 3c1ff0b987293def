"""Prefix tree with word frequencies and autocompletion."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import islice
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass
class _TrieNode:
    children: Dict[str, "_TrieNode"] = field(default_factory=dict)
    is_word: bool = False
    freq: int = 0


class Trie:
    """Stores words and how many times each was inserted."""

    def __init__(self) -> None:
        self._root = _TrieNode()

    def _walk(self, text: str) -> Optional[_TrieNode]:
        node = self._root
        for char in text:
            node = node.children.get(char)
            if node is None:
                return None
        return node

    def insert(self, word: str) -> None:
        """Add ``word``, counting repeats."""
        node = self._root
        for char in word:
            node = node.children.setdefault(char, _TrieNode())
        node.is_word = True
        node.freq += 1

    def search(self, word: str) -> Tuple[bool, int]:
        """Whether ``word`` was inserted, and how many times."""
        node = self._walk(word)
        if node is None:
            return False, 0
        return node.is_word, node.freq

    def starts_with(self, prefix: str) -> bool:
        return self._walk(prefix) is not None

    def autocomplete(self, prefix: str, limit: int) -> Tuple[List[str], List[int]]:
        """Up to ``limit`` words beginning with ``prefix`` and their frequencies."""
        node = self._walk(prefix)
        if node is None:
            return [], []
        found = list(islice(self._words_under(prefix, node), max(limit, 0)))
        return [word for word, _ in found], [freq for _, freq in found]

    def _words_under(self, so_far: str, node: _TrieNode) -> Iterator[Tuple[str, int]]:
        if node.is_word:
            yield so_far, node.freq
        for char, child in node.children.items():
            yield from self._words_under(so_far + char, child)