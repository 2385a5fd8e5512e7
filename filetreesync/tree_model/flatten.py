"""Flattening nested trees into ordered entry lists.

Both walks use an explicit stack so generated or symlinked trees that are
thousands of levels deep never hit the interpreter recursion limit.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol, TypeVar

from .types import Entry, EntryKind, TreeNode


class NestedLike(Protocol):
    """Any tree node exposing entry fields plus ``children``."""

    absolute_path: str
    name: str
    kind: EntryKind
    metadata: object
    children: tuple


NodeT = TypeVar("NodeT", bound=NestedLike)


def _iter_preorder(nodes: Iterable[NodeT]) -> Iterator[NodeT]:
    # Children are pushed reversed so siblings pop in their received order.
    stack: list[NodeT] = list(reversed(list(nodes)))
    while stack:
        node = stack.pop()
        yield node
        children = node.children or ()
        stack.extend(reversed(children))


def flatten_nested(nodes: Iterable[NestedLike]) -> list[Entry]:
    """Return one ``Entry`` per node in pre-order, discarding ``children``.

    Accepts backend ``NestedNode`` trees as well as built ``TreeNode``
    trees, which makes this the inverse of ``build_tree``.
    """
    if nodes is None:
        raise TypeError("flatten_nested() requires an iterable of nodes, got None")
    return [
        Entry(
            absolute_path=node.absolute_path,
            name=node.name,
            kind=node.kind,
            metadata=node.metadata,
        )
        for node in _iter_preorder(nodes)
    ]


def iter_tree_nodes(nodes: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node of a built tree in display (pre-order) order."""
    return _iter_preorder(nodes)


__all__ = [
    "flatten_nested",
    "iter_tree_nodes",
]
