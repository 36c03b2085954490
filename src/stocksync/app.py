"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.adapters.drafts import load_drafts
from stocksync.adapters.store import HttpInventoryStore
from stocksync.config.sync import get_sync_config
from stocksync.domain.inventory import InventorySync, InventorySyncOptions

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from stocksync.config.sync import SyncConfig
    from stocksync.domain.inventory import (
        ErrorCallback,
        InventoryEntryDraft,
        InventorySyncStatistics,
    )
    from stocksync.domain.ports.inventory import InventoryStore


log = getLogger(__name__)


def sync_inventory(
    drafts: Iterable[InventoryEntryDraft | None],
    *,
    store: InventoryStore | None = None,
    sync_config: SyncConfig | None = None,
    error_callback: ErrorCallback | None = None,
) -> InventorySyncStatistics:
    """Synchronise inventory drafts using the configured adapters."""

    config = sync_config or get_sync_config()
    options = InventorySyncOptions(
        batch_size=config.batch_size,
        ensure_channels=config.ensure_channels,
        error_callback=error_callback,
    )

    if store is not None:
        statistics = InventorySync(store, options).sync(drafts)
    else:
        statistics = asyncio.run(_sync_over_http(HttpInventoryStore(), drafts, options))

    snapshot = statistics.snapshot()
    log.info(
        "Finished inventory sync: processed=%s, created=%s, updated=%s, failed=%s, seconds=%.2f",
        snapshot.processed,
        snapshot.created,
        snapshot.updated,
        snapshot.failed,
        snapshot.processing_time_seconds or 0.0,
    )
    return statistics


def sync_inventory_file(
    path: Path,
    *,
    store: InventoryStore | None = None,
    sync_config: SyncConfig | None = None,
    error_callback: ErrorCallback | None = None,
) -> InventorySyncStatistics:
    """Load drafts from ``path`` and synchronise them."""

    return sync_inventory(
        load_drafts(path),
        store=store,
        sync_config=sync_config,
        error_callback=error_callback,
    )


async def _sync_over_http(
    store: HttpInventoryStore,
    drafts: Iterable[InventoryEntryDraft | None],
    options: InventorySyncOptions,
) -> InventorySyncStatistics:
    async with store as active:
        return await InventorySync(active, options).sync_async(drafts)
