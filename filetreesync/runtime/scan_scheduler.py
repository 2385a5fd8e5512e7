"""Background scan scheduler with generation-tagged, latest-request-wins results.

Fetch callables run on one worker thread; completed results are queued and
applied on the caller's thread by ``drain_updates``. Every request gets a
monotonically increasing generation. A full scan invalidates all earlier
requests, so a slow response for an old project root can never overwrite
the tree of a newer one.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from queue import Empty, Queue

from ..paths import normalize_path
from ..tree_model.build import build_tree_result
from ..tree_model.merge import entries_by_path, merge_directory_listing
from ..tree_model.payload import coerce_scan_items
from ..tree_model.types import BuildResult, Entry

logger = logging.getLogger(__name__)

SCAN = "scan"
CHILDREN = "children"

FetchScan = Callable[[str, tuple[str, ...]], Iterable[object]]
FetchDirectory = Callable[[str], Iterable[object]]

_NO_DIRECTORY_FETCHER = "ScanScheduler was created without a directory fetcher"


@dataclass(frozen=True)
class ScanRequest:
    """One queued fetch job."""

    generation: int
    kind: str
    project_root: str
    target: str
    scan_paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class _CompletedFetch:
    request: ScanRequest
    entries: list[Entry]
    error: str | None = None


@dataclass(frozen=True)
class ScanSnapshot:
    """Latest applied tree plus the entry set it was built from."""

    project_root: str | None
    generation: int
    entries: Mapping[str, Entry] = field(default_factory=dict)
    result: BuildResult = field(default_factory=lambda: BuildResult(project_root=".", nodes=()))
    error: str | None = None


@dataclass(frozen=True)
class ScanUpdate:
    """One applied result returned from ``drain_updates``."""

    generation: int
    kind: str
    result: BuildResult
    error: str | None = None


class ScanScheduler:
    """Single-worker scan scheduler where the last request wins."""

    def __init__(self, fetch_scan: FetchScan, fetch_directory: FetchDirectory | None = None) -> None:
        self._fetch_scan = fetch_scan
        self._fetch_directory = fetch_directory
        self._lock = threading.Lock()
        self._pending: deque[ScanRequest] = deque()
        self._running = False
        self._next_generation = 1
        self._latest_scan_generation = 0
        self._active_root: str | None = None
        self._results: Queue[_CompletedFetch] = Queue()
        self._snapshot = ScanSnapshot(project_root=None, generation=0)

    @property
    def snapshot(self) -> ScanSnapshot:
        return self._snapshot

    @property
    def latest_scan_generation(self) -> int:
        with self._lock:
            return self._latest_scan_generation

    def _is_stale_locked(self, request: ScanRequest) -> bool:
        if request.kind == SCAN:
            return request.generation != self._latest_scan_generation
        return request.generation < self._latest_scan_generation

    def _is_stale(self, request: ScanRequest) -> bool:
        with self._lock:
            return self._is_stale_locked(request)

    def _fetch(self, request: ScanRequest) -> list[Entry]:
        if request.kind == SCAN:
            items = self._fetch_scan(request.project_root, request.scan_paths)
        elif self._fetch_directory is None:
            raise RuntimeError(_NO_DIRECTORY_FETCHER)
        else:
            items = self._fetch_directory(request.target)
        return coerce_scan_items(items)

    def _worker(self) -> None:
        while True:
            with self._lock:
                if not self._pending:
                    self._running = False
                    return
                request = self._pending.popleft()
                stale = self._is_stale_locked(request)
            if stale:
                logger.debug("Skipping superseded %s request #%d", request.kind, request.generation)
                continue

            try:
                entries = self._fetch(request)
            except Exception as exc:
                logger.exception("%s request #%d for %s failed", request.kind, request.generation, request.target)
                self._results.put(_CompletedFetch(request=request, entries=[], error=str(exc) or type(exc).__name__))
                continue
            self._results.put(_CompletedFetch(request=request, entries=entries))

    def _enqueue(self, request: ScanRequest) -> None:
        # Caller holds the lock.
        self._pending.append(request)
        if self._running:
            return
        self._running = True
        worker = threading.Thread(
            target=self._worker,
            name="filetreesync-scan",
            daemon=True,
        )
        worker.start()

    def request_scan(self, project_root: str, scan_paths: Iterable[str] = ()) -> int:
        """Queue a full scan of ``project_root`` and return its generation."""
        root = normalize_path(project_root)
        paths = tuple(normalize_path(path) for path in scan_paths)
        with self._lock:
            generation = self._next_generation
            self._next_generation += 1
            self._latest_scan_generation = generation
            self._active_root = root
            self._enqueue(ScanRequest(generation, SCAN, root, root, paths))
        return generation

    def request_children(self, directory: str) -> int:
        """Queue a listing of ``directory`` under the active project root."""
        if self._fetch_directory is None:
            raise RuntimeError(_NO_DIRECTORY_FETCHER)
        target = normalize_path(directory)
        with self._lock:
            if self._active_root is None:
                raise RuntimeError("request_scan() must be called before request_children()")
            generation = self._next_generation
            self._next_generation += 1
            self._enqueue(ScanRequest(generation, CHILDREN, self._active_root, target))
        return generation

    def _apply(self, completed: _CompletedFetch) -> ScanUpdate:
        request = completed.request
        previous = self._snapshot
        if request.kind == SCAN:
            entries = {} if completed.error is not None else entries_by_path(completed.entries)
        elif completed.error is not None:
            self._snapshot = ScanSnapshot(
                project_root=previous.project_root,
                generation=previous.generation,
                entries=previous.entries,
                result=previous.result,
                error=completed.error,
            )
            return ScanUpdate(request.generation, request.kind, previous.result, completed.error)
        else:
            entries = merge_directory_listing(previous.entries, request.target, completed.entries)

        result = build_tree_result(list(entries.values()), request.project_root)
        self._snapshot = ScanSnapshot(
            project_root=request.project_root,
            generation=request.generation,
            entries=entries,
            result=result,
            error=completed.error,
        )
        return ScanUpdate(request.generation, request.kind, result, completed.error)

    def drain_updates(self) -> list[ScanUpdate]:
        """Apply completed results in generation order, discarding stale ones."""
        completed: list[_CompletedFetch] = []
        while True:
            try:
                completed.append(self._results.get_nowait())
            except Empty:
                break

        updates: list[ScanUpdate] = []
        for item in sorted(completed, key=lambda done: done.request.generation):
            if self._is_stale(item.request):
                logger.debug("Discarding stale %s result #%d", item.request.kind, item.request.generation)
                continue
            updates.append(self._apply(item))
        return updates


__all__ = [
    "SCAN",
    "CHILDREN",
    "ScanRequest",
    "ScanSnapshot",
    "ScanUpdate",
    "ScanScheduler",
]
