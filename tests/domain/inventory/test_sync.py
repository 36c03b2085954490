from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import TYPE_CHECKING

import pytest

from stocksync.domain.inventory import (
    ChangeQuantity,
    Channel,
    ChannelId,
    CustomFields,
    InventoryEntry,
    InventoryEntryDraft,
    InventorySync,
    InventorySyncOptions,
    SetCustomField,
)
from tests.support.inventory import FakeInventoryStore, RecordedErrors, StoreFailure, make_draft

if TYPE_CHECKING:
    from stocksync.domain.inventory.model import JsonValue


def _sync(
    store: FakeInventoryStore,
    drafts: list[InventoryEntryDraft | None],
    errors: RecordedErrors,
    *,
    batch_size: int = 10,
    ensure_channels: bool = False,
) -> InventorySync:
    options = InventorySyncOptions(
        batch_size=batch_size,
        ensure_channels=ensure_channels,
        error_callback=errors,
    )
    sync = InventorySync(store, options)
    sync.sync(drafts)
    return sync


def _counts(sync: InventorySync) -> tuple[int, int, int, int]:
    stats = sync.statistics
    return stats.processed, stats.created, stats.updated, stats.failed


def test_creates_missing_channel_and_entries_when_ensuring_channels(
    store: FakeInventoryStore, errors: RecordedErrors
) -> None:
    drafts: list[InventoryEntryDraft | None] = [
        make_draft("sku1"),
        make_draft("sku2", channel="channel-A"),
    ]

    sync = _sync(store, drafts, errors, ensure_channels=True)

    assert store.channel_creations == ["channel-A"]
    assert len(store.created) == 2
    assert _counts(sync) == (2, 2, 0, 0)
    assert errors.messages == []
    created_channels = {draft.sku: draft.supply_channel for draft in store.created}
    assert created_channels["sku1"] is None
    assert created_channels["sku2"] == ChannelId(store.channels["channel-A"].id)


def test_unknown_channel_fails_only_that_draft(
    store: FakeInventoryStore, errors: RecordedErrors
) -> None:
    drafts: list[InventoryEntryDraft | None] = [
        make_draft("sku1"),
        make_draft("sku2", channel="channel-A"),
    ]

    sync = _sync(store, drafts, errors, ensure_channels=False)

    assert store.channel_creations == []
    assert [draft.sku for draft in store.created] == ["sku1"]
    assert _counts(sync) == (2, 1, 0, 1)
    assert errors.messages == ["Failed to find supply channel of key 'channel-A'."]


def test_invalid_drafts_are_rejected_before_batching(
    store: FakeInventoryStore, errors: RecordedErrors
) -> None:
    drafts: list[InventoryEntryDraft | None] = [None, make_draft(""), make_draft(None)]

    sync = _sync(store, drafts, errors)

    assert _counts(sync) == (3, 0, 0, 3)
    assert errors.messages == [
        "Failed to process null inventory draft.",
        "Failed to process inventory entry without sku.",
        "Failed to process inventory entry without sku.",
    ]
    assert store.entry_fetches == []
    assert store.created == []


def test_matching_entry_with_changes_is_updated_once(errors: RecordedErrors) -> None:
    channel = Channel(id="ch-1", key="warehouse")
    existing = InventoryEntry(
        id="e-1", version=3, sku="sku1", quantity_on_stock=5, supply_channel=ChannelId("ch-1")
    )
    store = FakeInventoryStore(channels=[channel], entries=[existing])

    sync = _sync(store, [make_draft("sku1", quantity=8, channel="warehouse")], errors)

    assert _counts(sync) == (1, 0, 1, 0)
    assert len(store.updates) == 1
    updated_entry, actions = store.updates[0]
    assert updated_entry == existing
    assert actions == (ChangeQuantity(quantity=8),)
    assert store.created == []


def test_matching_entry_without_changes_makes_no_remote_call(errors: RecordedErrors) -> None:
    existing = InventoryEntry(id="e-1", version=1, sku="sku1", quantity_on_stock=5)
    store = FakeInventoryStore(entries=[existing])

    sync = _sync(store, [make_draft("sku1", quantity=5)], errors)

    assert _counts(sync) == (1, 0, 0, 0)
    assert store.updates == []
    assert store.created == []


def test_channel_is_part_of_the_identity(errors: RecordedErrors) -> None:
    channel = Channel(id="ch-1", key="warehouse")
    channelled = InventoryEntry(
        id="e-1", version=1, sku="sku1", quantity_on_stock=1, supply_channel=ChannelId("ch-1")
    )
    store = FakeInventoryStore(channels=[channel], entries=[channelled])

    sync = _sync(store, [make_draft("sku1", quantity=1)], errors)

    # The channel-less draft does not match the channelled entry.
    assert _counts(sync) == (1, 1, 0, 0)
    assert store.updates == []


def test_entries_with_unknown_channel_are_ignored_for_matching(errors: RecordedErrors) -> None:
    orphan = InventoryEntry(
        id="e-1", version=1, sku="sku1", quantity_on_stock=1, supply_channel=ChannelId("gone")
    )
    store = FakeInventoryStore(entries=[orphan])

    sync = _sync(store, [make_draft("sku1", quantity=1)], errors)

    assert _counts(sync) == (1, 1, 0, 0)
    assert errors.messages == []


def test_update_returning_the_same_entry_is_not_counted(errors: RecordedErrors) -> None:
    existing = InventoryEntry(id="e-1", version=1, sku="sku1", quantity_on_stock=5)
    store = FakeInventoryStore(entries=[existing])
    store.ignore_updates = True

    sync = _sync(store, [make_draft("sku1", quantity=6)], errors)

    assert len(store.updates) == 1
    assert _counts(sync) == (1, 0, 0, 0)


def test_create_and_update_failures_are_reported_per_draft(errors: RecordedErrors) -> None:
    channel = Channel(id="ch-1", key="warehouse")
    existing = InventoryEntry(
        id="e-1", version=1, sku="sku1", quantity_on_stock=5, supply_channel=ChannelId("ch-1")
    )
    store = FakeInventoryStore(channels=[channel], entries=[existing])
    store.failing_update_skus = {"sku1"}
    store.failing_create_skus = {"sku2"}

    sync = _sync(
        store,
        [
            make_draft("sku1", quantity=6, channel="warehouse"),
            make_draft("sku2", quantity=1),
            make_draft("sku3", quantity=1),
        ],
        errors,
    )

    assert _counts(sync) == (3, 1, 0, 2)
    assert sorted(errors.messages) == [
        "Failed to create inventory entry of sku 'sku2' and supply channel key 'None'.",
        "Failed to update inventory entry of sku 'sku1' and supply channel key 'warehouse'.",
    ]
    assert all(isinstance(cause, StoreFailure) for cause in errors.causes)


def test_failed_entry_fetch_abandons_only_its_batch(
    store: FakeInventoryStore, errors: RecordedErrors
) -> None:
    store.failing_fetch_skus = {"sku2"}
    drafts: list[InventoryEntryDraft | None] = [
        make_draft("sku1"),
        make_draft("sku2"),
        make_draft("sku3"),
    ]

    sync = _sync(store, drafts, errors, batch_size=2)

    assert set(store.entry_fetches) == {frozenset({"sku1", "sku2"}), frozenset({"sku3"})}
    assert [draft.sku for draft in store.created] == ["sku3"]
    assert _counts(sync) == (1, 1, 0, 0)
    assert errors.messages == ["Failed to fetch existing inventory entries of SKUs [sku1, sku2]."]


def test_channel_fetch_failure_aborts_the_call(
    store: FakeInventoryStore, errors: RecordedErrors
) -> None:
    failure = StoreFailure("channels unavailable")
    store.channel_fetch_error = failure

    sync = _sync(store, [make_draft("sku1"), None], errors)

    assert _counts(sync) == (0, 0, 0, 0)
    assert errors.messages == ["Failed to fetch supply channels."]
    assert errors.causes == [failure]
    assert store.entry_fetches == []


def test_failed_channel_creation_fails_its_drafts_only(
    store: FakeInventoryStore, errors: RecordedErrors
) -> None:
    store.failing_channel_keys = {"broken"}

    sync = _sync(
        store,
        [make_draft("sku1", channel="broken"), make_draft("sku2", channel="fine")],
        errors,
        ensure_channels=True,
    )

    assert sorted(store.channel_creations) == ["broken", "fine"]
    assert _counts(sync) == (2, 1, 0, 1)
    assert errors.messages == [
        "Failed to create new supply channel of key 'broken'.",
        "Failed to find supply channel of key 'broken'.",
    ]


def test_second_run_against_converged_store_is_a_noop(errors: RecordedErrors) -> None:
    store = FakeInventoryStore(channels=[Channel(id="ch-1", key="warehouse")])
    drafts: list[InventoryEntryDraft | None] = [
        make_draft("sku1", quantity=3),
        make_draft("sku1", quantity=4, channel="warehouse"),
        make_draft("sku2", quantity=7, channel="outlet", restockable_in_days=2),
    ]

    first = _sync(store, drafts, errors, batch_size=2, ensure_channels=True)
    assert _counts(first) == (3, 3, 0, 0)

    second = _sync(store, drafts, errors, batch_size=2, ensure_channels=True)

    assert _counts(second) == (3, 0, 0, 0)
    assert store.channel_creations == ["outlet"]
    assert len(store.updates) == 0
    assert errors.messages == []


def test_every_draft_is_counted_exactly_once(errors: RecordedErrors) -> None:
    existing = [
        InventoryEntry(id=f"e-{index}", version=1, sku=f"sku{index}", quantity_on_stock=index)
        for index in range(0, 20, 2)
    ]
    store = FakeInventoryStore(entries=existing)
    store.failing_create_skus = {"sku5", "sku7"}
    drafts: list[InventoryEntryDraft | None] = [
        make_draft(f"sku{index}", quantity=index + (index % 4 == 0)) for index in range(20)
    ]
    drafts.insert(3, None)

    sync = _sync(store, drafts, errors, batch_size=3)

    processed, created, updated, failed = _counts(sync)
    assert processed == len(drafts)
    assert created == 8
    assert updated == 5
    assert failed == 3
    assert processed >= created + updated
    assert len(errors.messages) == failed


def test_statistics_are_scoped_to_each_call(
    store: FakeInventoryStore, errors: RecordedErrors
) -> None:
    sync = InventorySync(store, InventorySyncOptions(error_callback=errors))

    first = sync.sync([make_draft("sku1")])
    second = sync.sync([make_draft("sku2"), make_draft("sku3")])

    assert first is not second
    assert first.processed == 1
    assert second.processed == 2
    assert sync.statistics is second


def test_custom_action_builder_is_used(errors: RecordedErrors) -> None:
    existing = InventoryEntry(id="e-1", version=1, sku="sku1", quantity_on_stock=5)
    store = FakeInventoryStore(entries=[existing])
    seen: list[tuple[InventoryEntry, InventoryEntryDraft]] = []

    def builder(entry: InventoryEntry, draft: InventoryEntryDraft) -> list[ChangeQuantity]:
        seen.append((entry, draft))
        return []

    options = InventorySyncOptions(error_callback=errors, build_actions=builder)
    statistics = InventorySync(store, options).sync([make_draft("sku1", quantity=99)])

    assert len(seen) == 1
    assert statistics.updated == 0
    assert store.updates == []


def test_sync_async_can_run_inside_an_event_loop(
    store: FakeInventoryStore, errors: RecordedErrors
) -> None:
    sync = InventorySync(store, InventorySyncOptions(error_callback=errors))

    async def run() -> tuple[int, int]:
        statistics = await sync.sync_async([make_draft("sku1"), make_draft("sku2")])
        return statistics.processed, statistics.created

    assert asyncio.run(run()) == (2, 2)


def test_draft_already_carrying_channel_key_in_id_slot(errors: RecordedErrors) -> None:
    store = FakeInventoryStore(channels=[Channel(id="ch-1", key="warehouse")])
    draft = replace(make_draft("sku1"), supply_channel=ChannelId("warehouse"))

    sync = _sync(store, [draft], errors)

    assert _counts(sync) == (1, 1, 0, 0)
    assert store.created[0].supply_channel == ChannelId("ch-1")


def test_batch_size_must_be_positive() -> None:
    with pytest.raises(ValueError, match="batch_size"):
        InventorySyncOptions(batch_size=0)


def _typed_entry(fields: dict[str, JsonValue]) -> InventoryEntry:
    return InventoryEntry(
        id="e-1",
        version=1,
        sku="sku1",
        quantity_on_stock=5,
        custom=CustomFields(type_key=None, fields=fields, type_id="t-1"),
    )


def _typed_store() -> FakeInventoryStore:
    return FakeInventoryStore(
        entries=[_typed_entry({"aisle": 3})], custom_types={"t-1": "stock-info"}
    )


def _typed_draft(fields: dict[str, JsonValue]) -> InventoryEntryDraft:
    return InventoryEntryDraft(
        sku="sku1", quantity_on_stock=5, custom=CustomFields("stock-info", fields)
    )


def test_entry_custom_type_id_is_resolved_before_diffing(errors: RecordedErrors) -> None:
    store = _typed_store()

    sync = _sync(store, [_typed_draft({"aisle": 3})], errors)

    assert _counts(sync) == (1, 0, 0, 0)
    assert store.updates == []
    assert store.custom_type_fetches == [frozenset({"t-1"})]


def test_changed_custom_field_on_entry_typed_by_id(errors: RecordedErrors) -> None:
    store = _typed_store()

    sync = _sync(store, [_typed_draft({"aisle": 4})], errors)

    assert _counts(sync) == (1, 0, 1, 0)
    assert store.updates[0][1] == (SetCustomField(name="aisle", value=4),)


def test_update_echoing_unresolved_type_is_not_counted(errors: RecordedErrors) -> None:
    store = _typed_store()
    store.ignore_updates = True

    sync = _sync(store, [replace(_typed_draft({"aisle": 3}), quantity_on_stock=6)], errors)

    assert len(store.updates) == 1
    assert _counts(sync) == (1, 0, 0, 0)


def test_failed_custom_type_lookup_abandons_the_batch(errors: RecordedErrors) -> None:
    store = FakeInventoryStore(entries=[_typed_entry({"aisle": 3})])
    store.custom_type_error = StoreFailure("types unavailable")

    sync = _sync(store, [_typed_draft({"aisle": 3})], errors)

    assert _counts(sync) == (0, 0, 0, 0)
    assert errors.messages == ["Failed to fetch existing inventory entries of SKUs [sku1]."]
    assert errors.causes == [store.custom_type_error]
    assert store.created == []
