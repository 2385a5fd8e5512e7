"""Backend record decoding and tree record encoding tests."""

from __future__ import annotations

import json
import unittest

from filetreesync.tree_model import (
    Entry,
    EntryKind,
    NestedNode,
    build_tree,
    coerce_scan_items,
    decode_scan_payload,
    entry_from_record,
    nested_from_record,
    tree_to_records,
)


class EntryRecordTests(unittest.TestCase):
    def test_flat_scan_record_without_name_uses_base_name(self) -> None:
        entry = entry_from_record({"filePath": "C:\\proj\\src\\a.ts", "type": "file", "size": 12, "lastModified": 5})

        self.assertEqual(entry.absolute_path, "C:\\proj\\src\\a.ts")
        self.assertEqual(entry.name, "a.ts")
        self.assertEqual(entry.kind, EntryKind.FILE)
        self.assertEqual(dict(entry.metadata), {"size": 12, "lastModified": 5})

    def test_backend_kind_spellings(self) -> None:
        self.assertTrue(entry_from_record({"path": "/r/a", "type": "folder"}).is_dir)
        self.assertTrue(entry_from_record({"path": "/r/a", "kind": "Directory"}).is_dir)
        self.assertTrue(entry_from_record({"path": "/r/a", "isDirectory": True}).is_dir)
        self.assertFalse(entry_from_record({"path": "/r/a", "type": "symlink"}).is_dir)

    def test_explicit_empty_name_is_preserved(self) -> None:
        entry = entry_from_record({"absolutePath": "/root/a.ts", "name": ""})

        self.assertEqual(entry.name, "")

    def test_missing_path_decodes_to_empty_path(self) -> None:
        self.assertEqual(entry_from_record({"name": "x"}).absolute_path, "")


class NestedRecordTests(unittest.TestCase):
    def test_nested_record_keeps_children_in_received_order(self) -> None:
        record = {
            "name": "src",
            "path": "/root/src",
            "isDirectory": True,
            "type": "folder",
            "children": [
                {"name": "b.ts", "path": "/root/src/b.ts", "type": "file", "children": []},
                {"name": "a.ts", "path": "/root/src/a.ts", "type": "file"},
                "garbage",
            ],
        }

        with self.assertLogs("filetreesync.tree_model.payload", level="WARNING"):
            node = nested_from_record(record)

        self.assertIsInstance(node, NestedNode)
        self.assertTrue(node.is_dir)
        self.assertEqual([child.name for child in node.children], ["b.ts", "a.ts"])
        self.assertNotIn("children", node.metadata)


class DecodeScanPayloadTests(unittest.TestCase):
    def test_flat_list(self) -> None:
        entries, root = decode_scan_payload(
            [
                {"filePath": "/root/src", "type": "folder"},
                {"filePath": "/root/src/a.ts", "type": "file"},
            ]
        )

        self.assertIsNone(root)
        self.assertEqual([entry.absolute_path for entry in entries], ["/root/src", "/root/src/a.ts"])

    def test_object_with_project_root_and_nested_nodes(self) -> None:
        payload = {
            "projectRoot": "/root",
            "nodes": [
                {
                    "path": "/root/src",
                    "type": "folder",
                    "children": [{"path": "/root/src/a.ts", "type": "file"}],
                },
                {"path": "/root/readme.md", "type": "file"},
            ],
        }

        entries, root = decode_scan_payload(payload)

        self.assertEqual(root, "/root")
        self.assertEqual(
            [entry.absolute_path for entry in entries],
            ["/root/src", "/root/src/a.ts", "/root/readme.md"],
        )

    def test_non_object_records_are_skipped(self) -> None:
        with self.assertLogs("filetreesync.tree_model.payload", level="WARNING"):
            entries, _root = decode_scan_payload([42, {"path": "/root/a"}])

        self.assertEqual(len(entries), 1)

    def test_wrong_container_type_is_a_caller_error(self) -> None:
        with self.assertRaises(TypeError):
            decode_scan_payload("not a list")
        with self.assertRaises(TypeError):
            decode_scan_payload({"projectRoot": "/root", "entries": "nope"})

    def test_coerce_scan_items_accepts_mixed_shapes(self) -> None:
        nested = NestedNode(
            "/root/pkg",
            "pkg",
            EntryKind.DIRECTORY,
            {},
            (NestedNode("/root/pkg/mod.py", "mod.py", EntryKind.FILE),),
        )
        items = [Entry("/root/a.txt", "a.txt", EntryKind.FILE), nested, {"path": "/root/b.txt"}]

        entries = coerce_scan_items(items)

        self.assertEqual(
            [entry.absolute_path for entry in entries],
            ["/root/a.txt", "/root/pkg", "/root/pkg/mod.py", "/root/b.txt"],
        )


class TreeRecordEncodingTests(unittest.TestCase):
    def test_records_are_json_serializable_and_flag_special_nodes(self) -> None:
        nodes = build_tree(
            [
                Entry("/root/src", "src", EntryKind.DIRECTORY),
                Entry("/root/src/a.ts", "a.ts", EntryKind.FILE, {"size": 1}),
                Entry("/root/lost/x.ts", "x.ts", EntryKind.FILE),
                Entry("/elsewhere/y.ts", "y.ts", EntryKind.FILE),
            ],
            "/root",
        )

        records = json.loads(json.dumps(tree_to_records(nodes)))

        by_name = {record["name"]: record for record in records}
        self.assertEqual(by_name["src"]["kind"], "directory")
        self.assertEqual(by_name["src"]["children"][0]["relativePath"], "src/a.ts")
        self.assertEqual(by_name["src"]["children"][0]["metadata"], {"size": 1})
        self.assertEqual(by_name["src"]["children"][0]["depth"], 1)
        self.assertTrue(by_name["x.ts"]["orphaned"])
        self.assertTrue(by_name["y.ts"]["outsideRoot"])
        self.assertNotIn("orphaned", by_name["src"])


if __name__ == "__main__":
    unittest.main()
