"""Hierarchical item categories."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence


class CategoryNotFoundError(LookupError):
    """Raised when a category path does not exist."""


@dataclass
class CategoryNode:
    name: str
    subcategories: Dict[str, "CategoryNode"] = field(default_factory=dict)

    def add_subcategory(self, name: str) -> "CategoryNode":
        """Return the child called ``name``, creating it if needed."""
        return self.subcategories.setdefault(name, CategoryNode(name))

    def find(self, path: Sequence[str]) -> "CategoryNode":
        """Follow ``path`` down from this node."""
        node = self
        for depth, name in enumerate(path):
            child = node.subcategories.get(name)
            if child is None:
                raise CategoryNotFoundError(f"category {' > '.join(path[depth:])} not found")
            node = child
        return node

    def find_by_name(self, name: str) -> Optional["CategoryNode"]:
        """First node called ``name`` in this subtree, or ``None``."""
        if self.name == name:
            return self
        for child in self.subcategories.values():
            found = child.find_by_name(name)
            if found is not None:
                return found
        return None

    def all_names(self) -> List[str]:
        """This node's name followed by every name beneath it."""
        names = [self.name]
        for child in self.subcategories.values():
            names.extend(child.all_names())
        return names

    def render(self, indent: str = "") -> str:
        lines = [f"{indent}{self.name}"]
        lines.extend(child.render(indent + "  ") for child in self.subcategories.values())
        return "\n".join(lines)


class CategoryTree:
    """Thread-safe category hierarchy rooted at ``All``."""

    def __init__(self) -> None:
        self.root = CategoryNode("All")
        self._lock = threading.RLock()

    def add_category(self, path: Sequence[str]) -> None:
        with self._lock:
            node = self.root
            for name in path:
                node = node.add_subcategory(name)

    def find_category(self, path: Sequence[str]) -> CategoryNode:
        """Find by path; a single name is also looked up anywhere in the tree."""
        with self._lock:
            try:
                return self.root.find(path)
            except CategoryNotFoundError:
                if len(path) == 1:
                    found = self.root.find_by_name(path[0])
                    if found is not None:
                        return found
                raise

    def render(self) -> str:
        with self._lock:
            return self.root.render("")