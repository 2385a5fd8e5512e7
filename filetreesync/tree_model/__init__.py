"""Tree-model creation, flattening, filtering, and row formatting.

Defines the ``Entry``/``TreeNode`` datatypes, the flat-list to tree builder
and its inverse flattener, plus helpers for expand-aware row projection,
search filtering, incremental directory merges, and JSON records.
"""

from __future__ import annotations

from .build import build_tree, build_tree_result, sibling_sort_key
from .filtering import filter_tree, node_matches
from .flatten import flatten_nested, iter_tree_nodes
from .merge import entries_by_path, merge_directory_listing
from .navigation import find_node, index_tree, visible_nodes
from .payload import coerce_scan_items, decode_scan_payload, entry_from_record, nested_from_record, tree_to_records
from .rendering import file_color_for, format_tree_row, sanitize_terminal_text
from .types import BuildDiagnostics, BuildResult, Entry, EntryKind, NestedNode, SkippedEntry, TreeNode

__all__ = [
    "EntryKind",
    "Entry",
    "NestedNode",
    "TreeNode",
    "SkippedEntry",
    "BuildDiagnostics",
    "BuildResult",
    "build_tree",
    "build_tree_result",
    "sibling_sort_key",
    "flatten_nested",
    "iter_tree_nodes",
    "index_tree",
    "find_node",
    "visible_nodes",
    "filter_tree",
    "node_matches",
    "entries_by_path",
    "merge_directory_listing",
    "entry_from_record",
    "nested_from_record",
    "decode_scan_payload",
    "coerce_scan_items",
    "tree_to_records",
    "format_tree_row",
    "file_color_for",
    "sanitize_terminal_text",
]
