"""Lookup and expand-aware row projection over built trees."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from ..paths import normalize_path
from .flatten import iter_tree_nodes
from .types import TreeNode


def index_tree(nodes: Iterable[TreeNode]) -> dict[str, TreeNode]:
    """Map every node's absolute path to the node."""
    return {node.absolute_path: node for node in iter_tree_nodes(nodes)}


def find_node(nodes: Iterable[TreeNode], path: str) -> TreeNode | None:
    """Return the node at ``path`` (normalized first), or ``None``."""
    target = normalize_path(path)
    for node in iter_tree_nodes(nodes):
        if node.absolute_path == target:
            return node
    return None


def visible_nodes(nodes: Iterable[TreeNode], expanded: Collection[str] | None = None) -> list[TreeNode]:
    """Return display rows, descending only into expanded directories.

    ``expanded=None`` means every directory is open.
    """
    out: list[TreeNode] = []
    stack: list[TreeNode] = list(reversed(list(nodes)))
    while stack:
        node = stack.pop()
        out.append(node)
        if not node.children:
            continue
        if expanded is not None and node.absolute_path not in expanded:
            continue
        stack.extend(reversed(node.children))
    return out


__all__ = [
    "index_tree",
    "find_node",
    "visible_nodes",
]
