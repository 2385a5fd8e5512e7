"""Caller-side runtime pieces: background scan scheduling and persisted config."""

from __future__ import annotations

from .scan_scheduler import CHILDREN, SCAN, ScanRequest, ScanScheduler, ScanSnapshot, ScanUpdate

__all__ = [
    "SCAN",
    "CHILDREN",
    "ScanRequest",
    "ScanScheduler",
    "ScanSnapshot",
    "ScanUpdate",
]
