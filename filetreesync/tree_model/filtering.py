"""Search-term projection of built trees for picker dialogs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .types import TreeNode


def node_matches(node: TreeNode, folded_query: str) -> bool:
    """Return whether ``node`` name or path contains an already case-folded query."""
    return folded_query in node.name.casefold() or folded_query in node.absolute_path.casefold()


def filter_tree(nodes: Iterable[TreeNode], query: str) -> tuple[list[TreeNode], set[str]]:
    """Keep matching nodes plus their ancestor directories.

    Returns ``(filtered_nodes, forced_expanded)`` where ``forced_expanded``
    holds the directories that must be open for every match to be visible.
    A matching directory keeps only its matching descendants. Sibling order
    and depths are unchanged.
    """
    top_level = list(nodes)
    folded_query = query.strip().casefold()
    if not folded_query:
        return top_level, set()

    # Reversed pre-order visits every child before its parent.
    order: list[TreeNode] = []
    stack: list[TreeNode] = list(top_level)
    while stack:
        node = stack.pop()
        order.append(node)
        stack.extend(node.children)

    kept: dict[str, TreeNode] = {}
    forced_expanded: set[str] = set()
    for node in reversed(order):
        kept_children = tuple(kept[child.absolute_path] for child in node.children if child.absolute_path in kept)
        if kept_children:
            forced_expanded.add(node.absolute_path)
        if kept_children or node_matches(node, folded_query):
            kept[node.absolute_path] = replace(node, children=kept_children)

    filtered = [kept[node.absolute_path] for node in top_level if node.absolute_path in kept]
    return filtered, forced_expanded


__all__ = [
    "node_matches",
    "filter_tree",
]
