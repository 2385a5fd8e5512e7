"""Entry and tree-node datatypes shared by the builder, flattener, and views."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class EntryKind(str, Enum):
    """File-or-directory discriminator for scan entries."""

    FILE = "file"
    DIRECTORY = "directory"

    @classmethod
    def parse(cls, value: object) -> "EntryKind":
        """Map backend spellings (``folder``, ``dir``, ``file`` ...) to a kind.

        Unknown values are treated as files.
        """
        if isinstance(value, EntryKind):
            return value
        if isinstance(value, str) and value.strip().lower() in {"directory", "folder", "dir"}:
            return cls.DIRECTORY
        return cls.FILE


@dataclass(frozen=True)
class Entry:
    """One scanned file or directory identified by its absolute path."""

    absolute_path: str
    name: str
    kind: EntryKind
    metadata: Mapping[str, object] = field(default_factory=dict, hash=False)

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class NestedNode:
    """Backend-delivered tree node with recursively nested children."""

    absolute_path: str
    name: str
    kind: EntryKind
    metadata: Mapping[str, object] = field(default_factory=dict, hash=False)
    children: tuple["NestedNode", ...] = ()

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class TreeNode:
    """UI-facing node with resolved relative path, depth, and sorted children.

    ``orphaned`` marks nodes promoted to top level because their parent
    directory was not part of the scan; ``outside_root`` marks nodes whose
    path does not live under the project root.
    """

    absolute_path: str
    name: str
    kind: EntryKind
    relative_path: str
    depth: int
    metadata: Mapping[str, object] = field(default_factory=dict, hash=False)
    children: tuple["TreeNode", ...] = ()
    orphaned: bool = False
    outside_root: bool = False

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    def to_entry(self) -> Entry:
        """Drop derived fields and return the underlying scan entry."""
        return Entry(self.absolute_path, self.name, self.kind, self.metadata)


@dataclass(frozen=True)
class SkippedEntry:
    """Malformed input entry that could not be placed in the tree."""

    entry: object
    reason: str


@dataclass
class BuildDiagnostics:
    """Per-build record of entries that were skipped, promoted, or flagged."""

    skipped: list[SkippedEntry] = field(default_factory=list)
    orphaned: list[str] = field(default_factory=list)
    outside_root: list[str] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def orphaned_count(self) -> int:
        return len(self.orphaned)

    def summary(self) -> str | None:
        """Return a short user-facing note, or ``None`` when nothing happened."""
        parts: list[str] = []
        if self.skipped:
            noun = "entry" if len(self.skipped) == 1 else "entries"
            parts.append(f"{len(self.skipped)} {noun} could not be displayed")
        if self.orphaned:
            noun = "entry" if len(self.orphaned) == 1 else "entries"
            parts.append(f"{len(self.orphaned)} {noun} shown without their parent directory")
        if self.outside_root:
            noun = "entry" if len(self.outside_root) == 1 else "entries"
            parts.append(f"{len(self.outside_root)} {noun} outside the project root")
        if not parts:
            return None
        return "; ".join(parts)


@dataclass(frozen=True)
class BuildResult:
    """Sorted top-level nodes for ``project_root`` plus build diagnostics."""

    project_root: str
    nodes: tuple[TreeNode, ...]
    diagnostics: BuildDiagnostics = field(default_factory=BuildDiagnostics, compare=False)

    @property
    def node_count(self) -> int:
        from .flatten import iter_tree_nodes

        return sum(1 for _node in iter_tree_nodes(self.nodes))


__all__ = [
    "EntryKind",
    "Entry",
    "NestedNode",
    "TreeNode",
    "SkippedEntry",
    "BuildDiagnostics",
    "BuildResult",
]
