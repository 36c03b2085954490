from __future__ import annotations

import threading

from stocksync.domain.inventory import InventorySyncStatistics


def test_new_statistics_are_zero() -> None:
    stats = InventorySyncStatistics()

    snapshot = stats.snapshot()

    assert (snapshot.processed, snapshot.created, snapshot.updated, snapshot.failed) == (0, 0, 0, 0)
    assert snapshot.processing_time_seconds is None


def test_report_message() -> None:
    stats = InventorySyncStatistics()
    for _ in range(4):
        stats.increment_processed()
    stats.increment_created()
    stats.increment_updated()
    stats.increment_failed()

    assert stats.report_message() == (
        "Summary: 4 inventory entries were processed in total "
        "(1 created, 1 updated and 1 failed to sync)."
    )
    assert stats.snapshot().unchanged == 1


def test_timer_measures_between_start_and_stop() -> None:
    stats = InventorySyncStatistics()
    stats.start_timer()
    stats.stop_timer()

    elapsed = stats.processing_time_seconds

    assert elapsed is not None
    assert elapsed >= 0
    assert stats.processing_time_seconds == elapsed


def test_concurrent_increments_are_not_lost() -> None:
    stats = InventorySyncStatistics()

    def work() -> None:
        for _ in range(1000):
            stats.increment_processed()
            stats.increment_created()

    threads = [threading.Thread(target=work) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert stats.processed == 8000
    assert stats.created == 8000


def test_repr_lists_counters() -> None:
    stats = InventorySyncStatistics()
    stats.increment_processed()

    assert repr(stats) == (
        "InventorySyncStatistics(processed=1, created=0, updated=0, failed=0)"
    )
