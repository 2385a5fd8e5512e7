"""Backend JSON record decoding and JSON-ready tree encoding.

Scan endpoints return flat records (``filePath``/``type``/``size`` ...),
directory listings return nested records (``path``/``isDirectory``/
``children``). Both are decoded into ``Entry``/``NestedNode`` values here;
anything not understood is passed through as opaque metadata.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ..paths import base_name, normalize_path
from .flatten import flatten_nested
from .types import Entry, EntryKind, NestedNode, TreeNode

logger = logging.getLogger(__name__)

_PATH_KEYS = ("absolutePath", "filePath", "path")
_KIND_KEYS = ("kind", "type")
_RESERVED_KEYS = frozenset({*_PATH_KEYS, *_KIND_KEYS, "name", "isDirectory", "children"})
_CONTAINER_KEYS = ("entries", "files", "nodes")


def _record_path(record: Mapping[str, object]) -> str:
    for key in _PATH_KEYS:
        value = record.get(key)
        if isinstance(value, str):
            return value
    return ""


def _record_kind(record: Mapping[str, object]) -> EntryKind:
    for key in _KIND_KEYS:
        if key in record:
            return EntryKind.parse(record[key])
    if record.get("isDirectory") is True:
        return EntryKind.DIRECTORY
    return EntryKind.FILE


def _record_name(record: Mapping[str, object], path: str) -> str:
    if "name" not in record or record["name"] is None:
        normalized = normalize_path(path)
        return base_name(normalized) if normalized else ""
    name = record["name"]
    return name if isinstance(name, str) else ""


def entry_from_record(record: Mapping[str, object]) -> Entry:
    """Decode one flat backend record.

    The name falls back to the path's final segment only when the record
    has no ``name`` key; an explicitly empty name is preserved so the
    builder reports it as malformed.
    """
    path = _record_path(record)
    return Entry(
        absolute_path=path,
        name=_record_name(record, path),
        kind=_record_kind(record),
        metadata={key: value for key, value in record.items() if key not in _RESERVED_KEYS},
    )


def nested_from_record(record: Mapping[str, object]) -> NestedNode:
    """Decode a nested backend record, children included, without recursion."""
    built: dict[int, NestedNode] = {}
    children_of: dict[int, list[Mapping[str, object]]] = {}
    order: list[Mapping[str, object]] = []
    stack: list[Mapping[str, object]] = [record]
    while stack:
        current = stack.pop()
        order.append(current)
        children = _child_records(current)
        children_of[id(current)] = children
        stack.extend(children)

    for current in reversed(order):
        entry = entry_from_record(current)
        built[id(current)] = NestedNode(
            absolute_path=entry.absolute_path,
            name=entry.name,
            kind=entry.kind,
            metadata=entry.metadata,
            children=tuple(built[id(child)] for child in children_of[id(current)]),
        )
    return built[id(record)]


def _child_records(record: Mapping[str, object]) -> list[Mapping[str, object]]:
    children = record.get("children")
    if not isinstance(children, list):
        return []
    out: list[Mapping[str, object]] = []
    for child in children:
        if isinstance(child, Mapping):
            out.append(child)
        else:
            logger.warning("Ignoring non-object child record: %r", child)
    return out


def _is_nested(records: list[Mapping[str, object]]) -> bool:
    return any(isinstance(record.get("children"), list) and record["children"] for record in records)


def decode_scan_payload(data: object) -> tuple[list[Entry], str | None]:
    """Decode a scan payload into flat entries and an optional project root.

    ``data`` is either a list of records or an object carrying
    ``projectRoot`` plus ``entries``/``files``/``nodes``. Nested payloads are
    flattened in pre-order.
    """
    project_root: str | None = None
    if isinstance(data, Mapping):
        raw_root = data.get("projectRoot")
        project_root = raw_root if isinstance(raw_root, str) else None
        items: object = next((data[key] for key in _CONTAINER_KEYS if key in data), [])
    else:
        items = data
    if not isinstance(items, list):
        raise TypeError(f"scan payload must be a list of records, got {type(items).__name__}")

    records: list[Mapping[str, object]] = []
    for item in items:
        if isinstance(item, Mapping):
            records.append(item)
        else:
            logger.warning("Ignoring non-object scan record: %r", item)

    if _is_nested(records):
        entries = flatten_nested(nested_from_record(record) for record in records)
    else:
        entries = [entry_from_record(record) for record in records]
    return entries, project_root


def coerce_scan_items(items: Iterable[object]) -> list[Entry]:
    """Turn a fetch result (entries, nested nodes, or records) into entries."""
    entries: list[Entry] = []
    nested: list[NestedNode] = []
    records: list[object] = []
    for item in items:
        if isinstance(item, Entry):
            entries.append(item)
        elif isinstance(item, NestedNode):
            nested.append(item)
        else:
            records.append(item)
    if nested:
        entries.extend(flatten_nested(nested))
    if records:
        decoded, _project_root = decode_scan_payload(records)
        entries.extend(decoded)
    return entries


def tree_to_records(nodes: Iterable[TreeNode]) -> list[dict[str, object]]:
    """Encode a built tree as JSON-ready nested dicts."""

    def encode(node: TreeNode) -> dict[str, object]:
        record: dict[str, object] = {
            "absolutePath": node.absolute_path,
            "name": node.name,
            "kind": node.kind.value,
            "relativePath": node.relative_path,
            "depth": node.depth,
        }
        if node.orphaned:
            record["orphaned"] = True
        if node.outside_root:
            record["outsideRoot"] = True
        if node.metadata:
            record["metadata"] = dict(node.metadata)
        record["children"] = [encode(child) for child in node.children]
        return record

    return [encode(node) for node in nodes]


__all__ = [
    "entry_from_record",
    "nested_from_record",
    "decode_scan_payload",
    "coerce_scan_items",
    "tree_to_records",
]
