"""Path canonicalization and project-root relative path helpers.

All functions operate on plain strings and never touch the filesystem.
The backend is the authority on which paths exist; these helpers only
canonicalize how a path is spelled.
"""

from __future__ import annotations

import re

_SEPARATOR_RUN_RE = re.compile(r"/{2,}")

ROOT_SENTINEL = "."


def normalize_path(path: str) -> str:
    """Return ``path`` with forward slashes, no separator runs, no trailing slash.

    A path consisting only of separators collapses to ``/``. Empty input
    stays empty; legality of the path is not checked.
    """
    normalized = _SEPARATOR_RUN_RE.sub("/", path.replace("\\", "/"))
    if normalized.endswith("/"):
        normalized = normalized[:-1]
        if not normalized:
            return "/"
    return normalized


def _root_prefix(project_root: str) -> str:
    return project_root if project_root.endswith("/") else project_root + "/"


def relativize(absolute_path: str, project_root: str) -> str:
    """Return ``absolute_path`` relative to ``project_root``.

    Returns ``"."`` for the root itself and the normalized path unchanged
    when it lies outside the root.
    """
    path = normalize_path(absolute_path)
    root = normalize_path(project_root)
    if path == root:
        return ROOT_SENTINEL
    prefix = _root_prefix(root)
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def is_within_root(absolute_path: str, project_root: str) -> bool:
    """Return whether ``absolute_path`` is the root or lies beneath it."""
    path = normalize_path(absolute_path)
    root = normalize_path(project_root)
    if root == ROOT_SENTINEL:
        return not path.startswith("/")
    return path == root or path.startswith(_root_prefix(root))


def parent_path(path: str) -> str:
    """Return the directory part of a normalized path.

    Mirrors POSIX ``dirname``: ``"a"`` -> ``"."``, ``"/a"`` -> ``"/"``.
    """
    idx = path.rfind("/")
    if idx < 0:
        return ROOT_SENTINEL
    if idx == 0:
        return "/"
    return path[:idx]


def base_name(path: str) -> str:
    """Return the final segment of a normalized path."""
    return path.rsplit("/", 1)[-1]


__all__ = [
    "ROOT_SENTINEL",
    "normalize_path",
    "relativize",
    "is_within_root",
    "parent_path",
    "base_name",
]
