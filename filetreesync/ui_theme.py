"""UI theme definitions and selection helpers.

Themes are ANSI palettes for tree rows and diagnostics. JSON highlighting
style is a separate Pygments setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    tree_marker: str
    tree_dir: str
    tree_file_code: str
    tree_file_doc: str
    tree_file_data: str
    tree_file_default: str
    tree_size: str
    tree_filter_match: str
    tree_badge_orphan: str
    tree_badge_outside: str
    diagnostics: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    tree_marker="\033[38;5;44m",
    tree_dir="\033[1;34m",
    tree_file_code="\033[38;5;110m",
    tree_file_doc="\033[38;5;187m",
    tree_file_data="\033[38;5;150m",
    tree_file_default="\033[38;5;252m",
    tree_size="\033[38;5;109m",
    tree_filter_match="\033[7;1m",
    tree_badge_orphan="\033[38;5;214m",
    tree_badge_outside="\033[38;5;176m",
    diagnostics="\033[2;38;5;250m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    tree_marker="\033[38;5;39m",
    tree_dir="\033[1;38;5;45m",
    tree_file_code="\033[38;5;117m",
    tree_file_doc="\033[38;5;152m",
    tree_file_data="\033[38;5;79m",
    tree_file_default="\033[38;5;252m",
    tree_size="\033[38;5;73m",
    tree_filter_match="\033[7;1m",
    tree_badge_orphan="\033[38;5;215m",
    tree_badge_outside="\033[38;5;141m",
    diagnostics="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    tree_marker="",
    tree_dir="",
    tree_file_code="",
    tree_file_doc="",
    tree_file_data="",
    tree_file_default="",
    tree_size="",
    tree_filter_match="",
    tree_badge_orphan="",
    tree_badge_outside="",
    diagnostics="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
