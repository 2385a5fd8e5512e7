"""Tests for the generation-tagged background scan scheduler."""

from __future__ import annotations

import threading
import time
import unittest

from filetreesync.runtime.scan_scheduler import CHILDREN, SCAN, ScanRequest, ScanScheduler, ScanUpdate
from filetreesync.tree_model import Entry, EntryKind


def _wait_for_updates(
    scheduler: ScanScheduler,
    *,
    expected_count: int,
    timeout_seconds: float = 2.0,
) -> list[ScanUpdate]:
    deadline = time.monotonic() + timeout_seconds
    out: list[ScanUpdate] = []
    while time.monotonic() < deadline:
        out.extend(scheduler.drain_updates())
        if len(out) >= expected_count:
            break
        time.sleep(0.01)
    return out


def _project_records(root: str) -> list[dict[str, object]]:
    return [
        {"filePath": f"{root}/src", "type": "folder"},
        {"filePath": f"{root}/src/main.py", "type": "file", "size": 10},
        {"filePath": f"{root}/README.md", "type": "file"},
    ]


class ScanSchedulerTests(unittest.TestCase):
    def test_scan_result_is_built_into_snapshot(self) -> None:
        calls: list[tuple[str, tuple[str, ...]]] = []

        def fetch_scan(project_root: str, scan_paths: tuple[str, ...]):
            calls.append((project_root, scan_paths))
            return _project_records(project_root)

        scheduler = ScanScheduler(fetch_scan)
        generation = scheduler.request_scan("/work/app/", ["src\\"])

        updates = _wait_for_updates(scheduler, expected_count=1)

        self.assertEqual(calls, [("/work/app", ("src",))])
        self.assertEqual(len(updates), 1)
        self.assertEqual((updates[0].generation, updates[0].kind), (generation, SCAN))
        self.assertIsNone(updates[0].error)
        snapshot = scheduler.snapshot
        self.assertEqual(snapshot.project_root, "/work/app")
        self.assertEqual(snapshot.generation, generation)
        self.assertEqual([node.name for node in snapshot.result.nodes], ["src", "README.md"])
        self.assertEqual(len(snapshot.entries), 3)

    def test_slow_response_for_older_request_is_discarded(self) -> None:
        first_started = threading.Event()
        allow_first_finish = threading.Event()
        calls: list[str] = []

        def fetch_scan(project_root: str, _scan_paths: tuple[str, ...]):
            if project_root == "/first":
                first_started.set()
                allow_first_finish.wait(timeout=2.0)
            calls.append(project_root)
            return _project_records(project_root)

        scheduler = ScanScheduler(fetch_scan)
        scheduler.request_scan("/first")
        self.assertTrue(first_started.wait(timeout=2.0))
        latest = scheduler.request_scan("/second")
        allow_first_finish.set()

        updates = _wait_for_updates(scheduler, expected_count=1)

        self.assertEqual(calls, ["/first", "/second"])
        self.assertEqual([update.generation for update in updates], [latest])
        self.assertEqual(scheduler.snapshot.project_root, "/second")
        self.assertEqual(scheduler.latest_scan_generation, latest)

    def test_queued_superseded_scans_are_never_fetched(self) -> None:
        first_started = threading.Event()
        allow_first_finish = threading.Event()
        calls: list[str] = []

        def fetch_scan(project_root: str, _scan_paths: tuple[str, ...]):
            if project_root == "/one":
                first_started.set()
                allow_first_finish.wait(timeout=2.0)
            calls.append(project_root)
            return []

        scheduler = ScanScheduler(fetch_scan)
        scheduler.request_scan("/one")
        self.assertTrue(first_started.wait(timeout=2.0))
        scheduler.request_scan("/two")
        last = scheduler.request_scan("/three")
        allow_first_finish.set()

        updates = _wait_for_updates(scheduler, expected_count=1)

        self.assertEqual(calls, ["/one", "/three"])
        self.assertEqual([update.generation for update in updates], [last])

    def test_directory_listing_merges_into_current_tree(self) -> None:
        def fetch_scan(project_root: str, _scan_paths: tuple[str, ...]):
            return [Entry(f"{project_root}/src", "src", EntryKind.DIRECTORY)]

        def fetch_directory(directory: str):
            return [
                {
                    "path": f"{directory}/pkg",
                    "type": "folder",
                    "children": [{"path": f"{directory}/pkg/mod.py", "type": "file"}],
                },
                {"path": f"{directory}/app.py", "type": "file"},
            ]

        scheduler = ScanScheduler(fetch_scan, fetch_directory)
        scheduler.request_scan("/root")
        self.assertEqual(len(_wait_for_updates(scheduler, expected_count=1)), 1)

        generation = scheduler.request_children("/root/src")
        updates = _wait_for_updates(scheduler, expected_count=1)

        self.assertEqual([(update.generation, update.kind) for update in updates], [(generation, CHILDREN)])
        src = scheduler.snapshot.result.nodes[0]
        self.assertEqual([child.name for child in src.children], ["pkg", "app.py"])
        self.assertEqual(src.children[0].children[0].relative_path, "src/pkg/mod.py")

    def test_directory_listing_is_stale_after_newer_scan(self) -> None:
        listing_started = threading.Event()
        allow_listing_finish = threading.Event()

        def fetch_scan(project_root: str, _scan_paths: tuple[str, ...]):
            return _project_records(project_root)

        def fetch_directory(directory: str):
            listing_started.set()
            allow_listing_finish.wait(timeout=2.0)
            return [{"path": f"{directory}/late.py"}]

        scheduler = ScanScheduler(fetch_scan, fetch_directory)
        scheduler.request_scan("/a")
        _wait_for_updates(scheduler, expected_count=1)
        scheduler.request_children("/a/src")
        self.assertTrue(listing_started.wait(timeout=2.0))
        latest = scheduler.request_scan("/b")
        allow_listing_finish.set()

        updates = _wait_for_updates(scheduler, expected_count=1)
        time.sleep(0.05)
        updates.extend(scheduler.drain_updates())

        self.assertEqual([(update.generation, update.kind) for update in updates], [(latest, SCAN)])
        self.assertEqual(scheduler.snapshot.project_root, "/b")
        self.assertNotIn("/a/src/late.py", scheduler.snapshot.entries)

    def test_failed_scan_yields_empty_tree_with_error(self) -> None:
        def fetch_scan(_project_root: str, _scan_paths: tuple[str, ...]):
            raise ConnectionError("backend unavailable")

        scheduler = ScanScheduler(fetch_scan)
        with self.assertLogs("filetreesync.runtime.scan_scheduler", level="ERROR"):
            scheduler.request_scan("/root")
            updates = _wait_for_updates(scheduler, expected_count=1)

        self.assertEqual(len(updates), 1)
        self.assertEqual(updates[0].error, "backend unavailable")
        self.assertEqual(updates[0].result.nodes, ())
        self.assertEqual(scheduler.snapshot.error, "backend unavailable")

    def test_failed_listing_keeps_previous_tree(self) -> None:
        def fetch_scan(project_root: str, _scan_paths: tuple[str, ...]):
            return _project_records(project_root)

        def fetch_directory(_directory: str):
            raise OSError("permission denied")

        scheduler = ScanScheduler(fetch_scan, fetch_directory)
        scheduler.request_scan("/root")
        _wait_for_updates(scheduler, expected_count=1)
        before = scheduler.snapshot.result

        with self.assertLogs("filetreesync.runtime.scan_scheduler", level="ERROR"):
            scheduler.request_children("/root/src")
            updates = _wait_for_updates(scheduler, expected_count=1)

        self.assertEqual(updates[0].error, "permission denied")
        self.assertEqual(scheduler.snapshot.result, before)
        self.assertEqual(scheduler.snapshot.error, "permission denied")

    def test_children_request_requires_fetcher_and_active_root(self) -> None:
        with self.assertRaises(RuntimeError):
            ScanScheduler(lambda _root, _paths: []).request_children("/root/src")
        with self.assertRaises(RuntimeError):
            ScanScheduler(lambda _root, _paths: [], lambda _directory: []).request_children("/root/src")

    def test_listing_fetch_without_directory_fetcher_raises_runtime_error(self) -> None:
        scheduler = ScanScheduler(lambda _root, _paths: [])
        request = ScanRequest(1, CHILDREN, "/root", "/root/src")

        with self.assertRaisesRegex(RuntimeError, "without a directory fetcher"):
            scheduler._fetch(request)


if __name__ == "__main__":
    unittest.main()
