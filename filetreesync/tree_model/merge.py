"""Entry-set updates for incremental directory expansion.

Expanding a directory fetches its direct children; the listing replaces the
previously known children and the tree is rebuilt from the merged set.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..paths import normalize_path, parent_path
from .types import Entry


def entries_by_path(entries: Iterable[Entry]) -> dict[str, Entry]:
    """Index entries by normalized path; the first occurrence of a path wins."""
    out: dict[str, Entry] = {}
    for entry in entries:
        if not isinstance(entry.absolute_path, str):
            continue
        key = normalize_path(entry.absolute_path)
        if key and key not in out:
            out[key] = entry
    return out


def merge_directory_listing(
    entries: Mapping[str, Entry],
    directory: str,
    listing: Iterable[Entry],
) -> dict[str, Entry]:
    """Return ``entries`` with the direct children of ``directory`` replaced.

    Descendants of children missing from ``listing`` are dropped; descendants
    of children that are still listed are kept.
    """
    target = normalize_path(directory)
    prefix = target if target.endswith("/") else target + "/"
    fresh = entries_by_path(listing)
    listed_children = {path for path in fresh if parent_path(path) == target}

    merged: dict[str, Entry] = {}
    for path, entry in entries.items():
        if path.startswith(prefix):
            child = prefix + path[len(prefix):].split("/", 1)[0]
            if child not in listed_children:
                continue
        merged[path] = entry
    merged.update(fresh)
    return merged


__all__ = [
    "entries_by_path",
    "merge_directory_listing",
]
