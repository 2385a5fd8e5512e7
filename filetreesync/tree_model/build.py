"""Flat scan entries to sorted, depth-annotated file trees.

Nodes live in an arena keyed by normalized absolute path; parent/child
links are path keys, and the frozen ``TreeNode`` objects are materialized
bottom-up once the final shape and order are known.
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from ..paths import ROOT_SENTINEL, is_within_root, normalize_path, parent_path, relativize
from .types import BuildDiagnostics, BuildResult, Entry, SkippedEntry, TreeNode

logger = logging.getLogger(__name__)


@dataclass
class _Shell:
    """Mutable arena slot for one entry while links are resolved."""

    entry: Entry
    path: str
    relative_path: str
    outside_root: bool
    child_keys: list[str] = field(default_factory=list)
    orphaned: bool = False


def _collation_key(name: str) -> str:
    """Fold case and strip combining accents, independent of the process locale."""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def sibling_sort_key(node: TreeNode | Entry) -> tuple[bool, str, str, str, str]:
    """Directories first, then case- and accent-insensitive name order.

    The order does not depend on the process locale. Case-folded name, raw
    name and path break remaining ties so the order is total.
    """
    return (not node.is_dir, _collation_key(node.name), node.name.casefold(), node.name, node.absolute_path)


def _validate_arguments(entries: object, project_root: object) -> list[object]:
    if not isinstance(project_root, str):
        raise TypeError(f"project_root must be a string, got {type(project_root).__name__}")
    if entries is None or isinstance(entries, (str, bytes, Mapping)):
        raise TypeError(f"entries must be an iterable of Entry, got {type(entries).__name__}")
    if not isinstance(entries, Iterable):
        raise TypeError(f"entries must be an iterable of Entry, got {type(entries).__name__}")
    items = list(entries)
    for item in items:
        if not isinstance(item, Entry):
            raise TypeError(f"entries must contain Entry objects, got {type(item).__name__}")
    return items


def _index_entries(
    items: list[Entry],
    root: str,
    diagnostics: BuildDiagnostics,
) -> dict[str, _Shell]:
    arena: dict[str, _Shell] = {}
    for entry in items:
        raw_path = entry.absolute_path
        if not isinstance(raw_path, str):
            logger.warning("Skipping entry with non-string path: %r", entry)
            diagnostics.skipped.append(SkippedEntry(entry, "path is not a string"))
            continue
        path = normalize_path(raw_path)
        if not path:
            logger.warning("Skipping entry with empty path: %r", entry)
            diagnostics.skipped.append(SkippedEntry(entry, "empty path"))
            continue
        if not isinstance(entry.name, str) or not entry.name:
            logger.warning("Skipping entry with empty name: %s", path)
            diagnostics.skipped.append(SkippedEntry(entry, "empty name"))
            continue
        if path in arena:
            logger.debug("Ignoring duplicate entry for %s", path)
            diagnostics.duplicates.append(path)
            continue

        outside_root = not is_within_root(path, root)
        if outside_root:
            diagnostics.outside_root.append(path)
        arena[path] = _Shell(
            entry=entry,
            path=path,
            relative_path=relativize(path, root),
            outside_root=outside_root,
        )
    return arena


def _link(arena: dict[str, _Shell], root: str, diagnostics: BuildDiagnostics) -> list[str]:
    """Attach every shell to its parent; return the top-level keys."""
    top_level: list[str] = []
    # Shorter paths first, so parents are always linked before descendants.
    for path in sorted(arena, key=lambda key: (len(key), key)):
        shell = arena[path]
        if path == root and shell.entry.is_dir:
            continue

        parent = parent_path(path)
        if parent == root:
            top_level.append(path)
            continue

        # "/" is its own dirname and must never link to itself.
        parent_shell = arena.get(parent) if parent != path else None
        if parent_shell is not None:
            parent_shell.child_keys.append(path)
            continue

        shell.orphaned = True
        top_level.append(path)
        if not shell.outside_root:
            logger.debug("Promoting orphaned entry %s to top level", path)
            diagnostics.orphaned.append(path)
    return top_level


def _materialize(arena: dict[str, _Shell], top_level: list[str]) -> tuple[TreeNode, ...]:
    """Sort siblings, assign depths, and build frozen nodes without recursion."""

    def sort_keys(keys: list[str]) -> list[str]:
        return sorted(keys, key=lambda key: sibling_sort_key(arena[key].entry))

    # Pre-order walk assigning depth; children are materialized before parents
    # by replaying the walk in reverse.
    order: list[tuple[str, int]] = []
    stack: list[tuple[str, int]] = [(key, 0) for key in reversed(sort_keys(top_level))]
    sorted_children: dict[str, list[str]] = {}
    while stack:
        key, depth = stack.pop()
        order.append((key, depth))
        children = sort_keys(arena[key].child_keys)
        sorted_children[key] = children
        stack.extend((child, depth + 1) for child in reversed(children))

    built: dict[str, TreeNode] = {}
    for key, depth in reversed(order):
        shell = arena[key]
        entry = shell.entry
        built[key] = TreeNode(
            absolute_path=shell.path,
            name=entry.name,
            kind=entry.kind,
            relative_path=shell.relative_path,
            depth=depth,
            metadata=entry.metadata,
            children=tuple(built[child] for child in sorted_children[key]),
            orphaned=shell.orphaned,
            outside_root=shell.outside_root,
        )
    return tuple(built[key] for key in sort_keys(top_level))


def build_tree_result(entries: Iterable[Entry], project_root: str) -> BuildResult:
    """Build a sorted tree from flat ``entries`` and report what was dropped.

    Malformed entries (empty name or path) are skipped and recorded; entries
    whose parent directory was not scanned are promoted to top level.
    Raises ``TypeError`` only when the arguments themselves have the wrong
    type.
    """
    items = _validate_arguments(entries, project_root)
    root = normalize_path(project_root) or ROOT_SENTINEL
    diagnostics = BuildDiagnostics()

    arena = _index_entries(items, root, diagnostics)
    top_level = _link(arena, root, diagnostics)
    nodes = _materialize(arena, top_level)

    if diagnostics.skipped:
        logger.warning(
            "Skipped %d malformed entr%s while building tree for %s",
            len(diagnostics.skipped),
            "y" if len(diagnostics.skipped) == 1 else "ies",
            root,
        )
    return BuildResult(project_root=root, nodes=nodes, diagnostics=diagnostics)


def build_tree(entries: Iterable[Entry], project_root: str) -> list[TreeNode]:
    """Return the sorted top-level nodes built from ``entries``."""
    return list(build_tree_result(entries, project_root).nodes)


__all__ = [
    "build_tree",
    "build_tree_result",
    "sibling_sort_key",
]
