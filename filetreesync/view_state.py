"""Presentation state layered over built trees.

Expansion and selection are keyed by normalized absolute path, the same key
the builder uses, so the tree itself stays free of view concerns and a
rebuilt tree picks its state back up by path.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .paths import normalize_path
from .tree_model.flatten import iter_tree_nodes
from .tree_model.types import TreeNode


@dataclass
class TreeViewState:
    """Expanded directories and current selection for one tree view."""

    expanded: set[str] = field(default_factory=set)
    selected: str | None = None

    def is_expanded(self, path: str) -> bool:
        return normalize_path(path) in self.expanded

    def expand(self, path: str) -> None:
        self.expanded.add(normalize_path(path))

    def collapse(self, path: str) -> None:
        self.expanded.discard(normalize_path(path))

    def toggle(self, path: str) -> bool:
        """Flip expansion of ``path`` and return the new expanded state."""
        key = normalize_path(path)
        if key in self.expanded:
            self.expanded.discard(key)
            return False
        self.expanded.add(key)
        return True

    def select(self, path: str | None) -> None:
        self.selected = normalize_path(path) if path is not None else None

    def expand_all(self, nodes: Iterable[TreeNode]) -> None:
        self.expanded.update(node.absolute_path for node in iter_tree_nodes(nodes) if node.is_dir)

    def collapse_all(self) -> None:
        self.expanded.clear()

    def retain(self, nodes: Iterable[TreeNode]) -> None:
        """Drop state for paths that no longer exist in ``nodes``."""
        directories: set[str] = set()
        present: set[str] = set()
        for node in iter_tree_nodes(nodes):
            present.add(node.absolute_path)
            if node.is_dir:
                directories.add(node.absolute_path)
        self.expanded &= directories
        if self.selected is not None and self.selected not in present:
            self.selected = None


__all__ = ["TreeViewState"]
