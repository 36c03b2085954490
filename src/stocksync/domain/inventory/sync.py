"""Inventory sync: converge store inventory entries to a list of drafts.

A sync call runs in three steps:

1. Bootstrap the supply channel cache from the store, optionally creating
   channels the drafts reference but the store lacks. A failed channel fetch
   aborts the call; nothing else does.
2. Validate the drafts and split them into batches. Batches run concurrently.
3. Per batch, fetch the existing entries for the batch's skus in one call
   and resolve their custom type keys. Then per draft resolve its channel,
   match it by ``(sku, channel key)`` and create or update it. Updates are
   only sent when the diff is non-empty.

Failures below the call level are reported through the error callback and
counted in the statistics; :meth:`InventorySync.sync` itself never raises
for them.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .batching import DraftRejection, partition_drafts
from .channels import ChannelCache, ensure_missing_channels
from .custom_types import CustomTypeCache
from .keys import SkuChannelKey, channel_key_of
from .messages import (
    CHANNEL_FETCH_FAILED,
    CHANNEL_KEY_MAPPING_MISSING,
    ENTRY_CREATE_FAILED,
    ENTRY_FETCH_FAILED,
    ENTRY_UPDATE_FAILED,
)
from .model import ChannelId
from .options import InventorySyncOptions
from .statistics import InventorySyncStatistics

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from stocksync.domain.ports.inventory import InventoryStore

    from .model import InventoryEntry, InventoryEntryDraft

log = getLogger(__name__)


class DraftOutcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class DraftFailure:
    message: str
    cause: BaseException | None = None


@dataclass(frozen=True, slots=True)
class DraftResult:
    """Terminal state of one draft that made it into a batch."""

    key: SkuChannelKey
    outcome: DraftOutcome
    failure: DraftFailure | None = None


@dataclass(frozen=True, slots=True)
class SyncAborted:
    """The call could not start dispatching; carries the reported error."""

    message: str
    cause: BaseException | None = None


class InventorySync:
    """Synchronise inventory drafts into an :class:`InventoryStore`.

    Drafts are matched to existing entries by sku and supply channel *key*.
    A draft's channel reference must carry the key, either as
    :class:`~stocksync.domain.inventory.model.ChannelKey` or, for drafts built
    by hand, as a :class:`~stocksync.domain.inventory.model.ChannelId` whose
    id slot holds the key.
    """

    def __init__(
        self,
        store: InventoryStore,
        options: InventorySyncOptions | None = None,
    ) -> None:
        self._store = store
        self._options = options or InventorySyncOptions()
        self._statistics = InventorySyncStatistics()

    @property
    def options(self) -> InventorySyncOptions:
        return self._options

    @property
    def statistics(self) -> InventorySyncStatistics:
        """Statistics of the most recent (possibly still running) sync call."""

        return self._statistics

    def sync(self, drafts: Iterable[InventoryEntryDraft | None]) -> InventorySyncStatistics:
        """Blocking entry point; use :meth:`sync_async` from inside an event loop."""

        return asyncio.run(self.sync_async(drafts))

    async def sync_async(
        self,
        drafts: Iterable[InventoryEntryDraft | None],
    ) -> InventorySyncStatistics:
        statistics = InventorySyncStatistics()
        self._statistics = statistics
        statistics.start_timer()

        pending = list(drafts)
        log.info(
            "Starting inventory sync: drafts=%s, batch_size=%s, ensure_channels=%s",
            len(pending),
            self._options.batch_size,
            self._options.ensure_channels,
        )

        prepared = await self._prepare_channels(pending)
        if isinstance(prepared, SyncAborted):
            self._options.apply_error_callback(prepared.message, prepared.cause)
            log.error("Inventory sync aborted: %s", prepared.message)
        else:
            run = _SyncRun(
                store=self._store,
                options=self._options,
                statistics=statistics,
                channels=prepared,
                custom_types=CustomTypeCache(),
            )
            await run.process(pending)

        statistics.stop_timer()
        log.info(statistics.report_message())
        return statistics

    async def _prepare_channels(
        self,
        drafts: Sequence[InventoryEntryDraft | None],
    ) -> ChannelCache | SyncAborted:
        try:
            channels = await self._store.fetch_supply_channels()
        except Exception as exc:  # noqa: BLE001
            return SyncAborted(CHANNEL_FETCH_FAILED, exc)

        cache = ChannelCache.build(channels)
        log.debug("Loaded %s supply channel(s)", len(cache))
        return await ensure_missing_channels(
            drafts,
            cache,
            ensure=self._options.ensure_channels,
            create=self._store.create_supply_channel,
            on_error=self._options.apply_error_callback,
        )


@dataclass(slots=True)
class _SyncRun:
    """State of one sync call once the channel cache is ready.

    ``channels`` is read-only from here on. ``custom_types`` only grows as
    batches resolve type ids; ``statistics`` is the only state touched by
    the concurrent draft tasks.
    """

    store: InventoryStore
    options: InventorySyncOptions
    statistics: InventorySyncStatistics
    channels: ChannelCache
    custom_types: CustomTypeCache

    async def process(self, drafts: Iterable[InventoryEntryDraft | None]) -> None:
        tasks = [
            asyncio.create_task(self._process_batch(batch))
            for batch in partition_drafts(
                drafts,
                self.options.batch_size,
                on_invalid=self._reject,
            )
        ]
        log.debug("Dispatched %s batch(es)", len(tasks))
        await asyncio.gather(*tasks)

    def _reject(self, rejection: DraftRejection) -> None:
        self.options.apply_error_callback(rejection.value, None)
        self.statistics.increment_failed()
        self.statistics.increment_processed()

    async def _process_batch(self, batch: list[InventoryEntryDraft]) -> list[DraftResult]:
        skus = {SkuChannelKey.of_draft(draft).sku for draft in batch}
        try:
            fetched = await self.store.fetch_entries_by_skus(skus)
            entries = await self.custom_types.resolve(fetched, self.store.fetch_custom_type_keys)
        except Exception as exc:  # noqa: BLE001
            listed = ", ".join(sorted(skus))
            self.options.apply_error_callback(ENTRY_FETCH_FAILED.format(f"[{listed}]"), exc)
            return []

        existing = self._index_entries(entries)
        return list(await asyncio.gather(*(self._sync_draft(draft, existing) for draft in batch)))

    def _index_entries(
        self,
        entries: Iterable[InventoryEntry],
    ) -> dict[SkuChannelKey, InventoryEntry]:
        indexed: dict[SkuChannelKey, InventoryEntry] = {}
        for entry in entries:
            key = SkuChannelKey.of_entry(entry, self.channels)
            if key is None:
                log.debug("Ignoring entry %s with unknown supply channel", entry.id)
                continue
            indexed[key] = entry
        return indexed

    async def _sync_draft(
        self,
        draft: InventoryEntryDraft,
        existing: dict[SkuChannelKey, InventoryEntry],
    ) -> DraftResult:
        key = SkuChannelKey.of_draft(draft)
        resolved = self._resolve_channel(draft)
        if isinstance(resolved, DraftFailure):
            return self._finish(key, DraftOutcome.FAILED, resolved)

        entry = existing.get(key)
        if entry is None:
            try:
                await self.store.create_entry(resolved)
            except Exception as exc:  # noqa: BLE001
                failure = DraftFailure(ENTRY_CREATE_FAILED.format(key.sku, key.channel_key), exc)
                return self._finish(key, DraftOutcome.FAILED, failure)
            return self._finish(key, DraftOutcome.CREATED)

        try:
            actions = self.options.build_actions(entry, resolved)
            if not actions:
                return self._finish(key, DraftOutcome.UNCHANGED)
            updated = await self.store.update_entry(entry, actions)
        except Exception as exc:  # noqa: BLE001
            failure = DraftFailure(ENTRY_UPDATE_FAILED.format(key.sku, key.channel_key), exc)
            return self._finish(key, DraftOutcome.FAILED, failure)
        # The store may accept actions that leave the entry as it was.
        changed = self.custom_types.apply(updated) != entry
        outcome = DraftOutcome.UPDATED if changed else DraftOutcome.UNCHANGED
        return self._finish(key, outcome)

    def _resolve_channel(self, draft: InventoryEntryDraft) -> InventoryEntryDraft | DraftFailure:
        channel_key = channel_key_of(draft)
        if channel_key is None:
            return draft
        channel_id = self.channels.lookup(channel_key)
        if channel_id is None:
            return DraftFailure(CHANNEL_KEY_MAPPING_MISSING.format(channel_key))
        return replace(draft, supply_channel=ChannelId(channel_id))

    def _finish(
        self,
        key: SkuChannelKey,
        outcome: DraftOutcome,
        failure: DraftFailure | None = None,
    ) -> DraftResult:
        if failure is not None:
            self.options.apply_error_callback(failure.message, failure.cause)
        if outcome is DraftOutcome.FAILED:
            self.statistics.increment_failed()
        elif outcome is DraftOutcome.CREATED:
            self.statistics.increment_created()
        elif outcome is DraftOutcome.UPDATED:
            self.statistics.increment_updated()
        self.statistics.increment_processed()
        return DraftResult(key=key, outcome=outcome, failure=failure)
