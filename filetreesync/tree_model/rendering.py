"""Formatting helpers for tree rows."""

from __future__ import annotations

import re
from collections.abc import Collection

from ..ui_theme import DEFAULT_THEME, UITheme
from .types import TreeNode

TREE_SIZE_LABEL_MIN_BYTES = 10 * 1024

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")

CODE_SUFFIXES = frozenset(
    {"ts", "tsx", "js", "jsx", "mjs", "cjs", "py", "pyi", "go", "rs", "java", "c", "h", "cpp", "sh"}
)
DOC_SUFFIXES = frozenset({"md", "mdx", "txt", "rst", "adoc"})
DATA_SUFFIXES = frozenset({"json", "yaml", "yml", "toml", "ini", "cfg", "xml", "csv", "lock"})


def sanitize_terminal_text(text: str) -> str:
    """Escape control characters so backend names cannot drive the terminal.

    Tree rows are single lines, so newlines and tabs are escaped too.
    """
    if _CONTROL_RE.search(text) is None:
        return text
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group()):02x}", text)


def file_color_for(name: str, theme: UITheme | None = None) -> str:
    """Return ANSI color used for file names based on suffix."""
    active_theme = theme or DEFAULT_THEME
    suffix = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if suffix in CODE_SUFFIXES:
        return active_theme.tree_file_code
    if suffix in DOC_SUFFIXES:
        return active_theme.tree_file_doc
    if suffix in DATA_SUFFIXES:
        return active_theme.tree_file_data
    return active_theme.tree_file_default


def _match_span(text: str, query: str) -> tuple[int, int] | None:
    # Case folding can change length ("ß" -> "ss"), so track which source
    # character produced each folded character.
    folded_parts: list[str] = []
    owners: list[int] = []
    for index, ch in enumerate(text):
        folded = ch.casefold()
        folded_parts.append(folded)
        owners.extend([index] * len(folded))
    folded_query = query.casefold()
    idx = "".join(folded_parts).find(folded_query)
    if idx < 0 or not folded_query:
        return None
    return owners[idx], owners[idx + len(folded_query) - 1] + 1


def highlight_substring(text: str, query: str, theme: UITheme | None = None) -> str:
    """Highlight first case-insensitive substring match in ``text``."""
    active_theme = theme or DEFAULT_THEME
    if not query or not active_theme.tree_filter_match:
        return text
    span = _match_span(text, query)
    if span is None:
        return text
    start, end = span
    return text[:start] + active_theme.tree_filter_match + text[start:end] + active_theme.reset + text[end:]


def _size_label(node: TreeNode, theme: UITheme) -> str:
    size = node.metadata.get("size")
    if not isinstance(size, int) or isinstance(size, bool) or size < TREE_SIZE_LABEL_MIN_BYTES:
        return ""
    return f"{theme.tree_size} [{size // 1024} KB]{theme.reset}"


def _badges(node: TreeNode, theme: UITheme) -> str:
    badges = ""
    if node.outside_root:
        badges += f" {theme.tree_badge_outside}[outside root]{theme.reset}"
    elif node.orphaned:
        badges += f" {theme.tree_badge_orphan}[no parent]{theme.reset}"
    return badges


def format_tree_row(
    node: TreeNode,
    expanded: Collection[str] | None = None,
    search_query: str = "",
    show_size_labels: bool = True,
    theme: UITheme | None = None,
) -> str:
    """Render one tree row as ANSI-styled display text.

    ``expanded=None`` renders every directory as open.
    """
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    indent = "  " * node.depth
    name = highlight_substring(sanitize_terminal_text(node.name), search_query, active_theme)
    badges = _badges(node, active_theme)
    if node.is_dir:
        is_open = expanded is None or node.absolute_path in expanded
        marker = "▾ " if is_open else "▸ "
        return (
            f"{indent}{active_theme.tree_marker}{marker}{reset}"
            f"{active_theme.tree_dir}{name}/{reset}{badges}"
        )

    size_label = _size_label(node, active_theme) if show_size_labels else ""
    file_color = file_color_for(node.name, active_theme)
    return f"{indent}  {file_color}{name}{reset}{size_label}{badges}"


__all__ = [
    "TREE_SIZE_LABEL_MIN_BYTES",
    "sanitize_terminal_text",
    "file_color_for",
    "highlight_substring",
    "format_tree_row",
]
