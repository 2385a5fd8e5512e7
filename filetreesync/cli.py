"""Command-line front door for filetreesync.

Reads a backend scan payload (flat or nested JSON), builds the sorted file
tree, and prints it as indented rows or as JSON. Diagnostics about skipped
or promoted entries go to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .highlight import DEFAULT_STYLE, colorize_json
from .paths import normalize_path
from .runtime import config
from .tree_model import (
    BuildResult,
    build_tree_result,
    decode_scan_payload,
    filter_tree,
    format_tree_row,
    tree_to_records,
    visible_nodes,
)
from .ui_theme import available_theme_names, resolve_theme


def _read_payload(source: str) -> object:
    """Load JSON from ``source`` (a path, or ``-`` for stdin)."""
    try:
        if source == "-":
            return json.load(sys.stdin)
        return json.loads(Path(source).read_text(encoding="utf-8"))
    except OSError as exc:
        raise SystemExit(f"Cannot read scan payload {source}: {exc}") from exc
    except ValueError as exc:
        raise SystemExit(f"Invalid JSON in scan payload {source}: {exc}") from exc


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _expanded_paths(args: argparse.Namespace, project_root: str, forced: set[str]) -> set[str] | None:
    """Return the expanded set for row rendering, or ``None`` for fully open."""
    requested = {normalize_path(path) for path in args.expand or ()}
    if requested:
        remembered = config.load_expanded_paths(project_root) | requested
        config.save_expanded_paths(project_root, remembered)
    if not args.collapsed:
        return None
    return config.load_expanded_paths(project_root) | requested | forced


def render_rows(
    result: BuildResult,
    *,
    expanded: set[str] | None,
    search_query: str = "",
    no_color: bool = False,
    theme_name: str | None = None,
    show_size_labels: bool = True,
) -> str:
    """Render the visible rows of ``result`` as newline-terminated text."""
    theme = resolve_theme(theme_name, no_color=no_color)
    out: list[str] = []
    for node in visible_nodes(result.nodes, expanded):
        out.append(
            format_tree_row(
                node,
                expanded,
                search_query=search_query,
                show_size_labels=show_size_labels,
                theme=theme,
            )
        )
        out.append("\n")
    return "".join(out)


def main() -> None:
    """Parse CLI arguments, build the tree, and print it."""
    parser = argparse.ArgumentParser(
        description="Build a sorted file tree from a flat or nested scan result."
    )
    parser.add_argument("scan", nargs="?", default="-", help="Scan payload JSON file, or - for stdin (default).")
    parser.add_argument("--root", default=None, help="Project root. Defaults to the payload's projectRoot.")
    parser.add_argument("--json", action="store_true", help="Print the built tree as JSON instead of rows.")
    parser.add_argument("--filter", default="", metavar="QUERY", help="Only show entries matching QUERY.")
    parser.add_argument(
        "--collapsed",
        action="store_true",
        help="Only open directories remembered for this root (plus --expand).",
    )
    parser.add_argument(
        "--expand",
        action="append",
        default=None,
        metavar="PATH",
        help="Remember PATH as expanded for this root. May be repeated.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for --json output.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--no-size-labels", action="store_true", help="Hide size labels for large files.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug diagnostics to stderr.")
    args = parser.parse_args()

    _configure_logging(args.verbose)

    payload = _read_payload(args.scan)
    try:
        entries, payload_root = decode_scan_payload(payload)
    except TypeError as exc:
        raise SystemExit(str(exc)) from exc

    project_root = args.root or payload_root
    if not project_root:
        raise SystemExit("Project root unknown: pass --root or include projectRoot in the payload.")

    result = build_tree_result(entries, project_root)
    query = args.filter.strip()
    nodes, forced = filter_tree(result.nodes, query)
    shown = BuildResult(project_root=result.project_root, nodes=tuple(nodes), diagnostics=result.diagnostics)
    no_color = args.no_color or not sys.stdout.isatty()

    if args.json:
        text = json.dumps(tree_to_records(shown.nodes), indent=2) + "\n"
        sys.stdout.write(text if no_color else colorize_json(text, args.style))
    else:
        sys.stdout.write(
            render_rows(
                shown,
                expanded=_expanded_paths(args, shown.project_root, forced),
                search_query=query,
                no_color=no_color,
                theme_name=args.theme or config.load_theme_name(),
                show_size_labels=config.load_show_size_labels() and not args.no_size_labels,
            )
        )

    summary = result.diagnostics.summary()
    if summary:
        sys.stderr.write(summary + "\n")


if __name__ == "__main__":
    main()
