"""Counters describing the progress and outcome of one inventory sync."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StatisticsSnapshot:
    processed: int
    created: int
    updated: int
    failed: int
    processing_time_seconds: float | None = None

    @property
    def unchanged(self) -> int:
        """Drafts that reached the store comparison but needed no change."""

        return self.processed - self.created - self.updated - self.failed


class InventorySyncStatistics:
    """Thread-safe, increment-only counters for a single sync call.

    The engine increments from many concurrent draft tasks; readers may take a
    :meth:`snapshot` at any time for partial progress.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._processed = 0
        self._created = 0
        self._updated = 0
        self._failed = 0
        self._started_at: float | None = None
        self._finished_at: float | None = None

    @property
    def processed(self) -> int:
        return self._processed

    @property
    def created(self) -> int:
        return self._created

    @property
    def updated(self) -> int:
        return self._updated

    @property
    def failed(self) -> int:
        return self._failed

    def increment_processed(self) -> None:
        with self._lock:
            self._processed += 1

    def increment_created(self) -> None:
        with self._lock:
            self._created += 1

    def increment_updated(self) -> None:
        with self._lock:
            self._updated += 1

    def increment_failed(self) -> None:
        with self._lock:
            self._failed += 1

    def start_timer(self) -> None:
        with self._lock:
            self._started_at = time.monotonic()
            self._finished_at = None

    def stop_timer(self) -> None:
        with self._lock:
            if self._started_at is not None:
                self._finished_at = time.monotonic()

    @property
    def processing_time_seconds(self) -> float | None:
        if self._started_at is None:
            return None
        end = self._finished_at if self._finished_at is not None else time.monotonic()
        return end - self._started_at

    def snapshot(self) -> StatisticsSnapshot:
        with self._lock:
            processed, created = self._processed, self._created
            updated, failed = self._updated, self._failed
        return StatisticsSnapshot(
            processed=processed,
            created=created,
            updated=updated,
            failed=failed,
            processing_time_seconds=self.processing_time_seconds,
        )

    def report_message(self) -> str:
        snap = self.snapshot()
        return (
            f"Summary: {snap.processed} inventory entries were processed in total "
            f"({snap.created} created, {snap.updated} updated and {snap.failed} failed to sync)."
        )

    def __repr__(self) -> str:
        snap = self.snapshot()
        return (
            f"InventorySyncStatistics(processed={snap.processed}, created={snap.created}, "
            f"updated={snap.updated}, failed={snap.failed})"
        )
