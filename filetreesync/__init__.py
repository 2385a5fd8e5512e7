"""Public package surface for filetreesync.

Re-exports the path helpers and the tree builder/flattener pair, and
``main`` for programmatic CLI invocation.
"""

from __future__ import annotations

from .paths import normalize_path, relativize
from .tree_model import (
    BuildResult,
    Entry,
    EntryKind,
    NestedNode,
    TreeNode,
    build_tree,
    build_tree_result,
    flatten_nested,
)


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "normalize_path",
    "relativize",
    "Entry",
    "EntryKind",
    "NestedNode",
    "TreeNode",
    "BuildResult",
    "build_tree",
    "build_tree_result",
    "flatten_nested",
    "main",
]
