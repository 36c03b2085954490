"""Port for the remote store holding inventory entries and supply channels."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence, Set

    from stocksync.domain.inventory.actions import UpdateAction
    from stocksync.domain.inventory.model import Channel, InventoryEntry, InventoryEntryDraft


@runtime_checkable
class InventoryStore(Protocol):
    """Asynchronous store operations the inventory sync depends on."""

    async def fetch_supply_channels(self) -> Sequence[Channel]:
        """Return every supply channel known to the store."""
        ...

    async def create_supply_channel(self, key: str) -> Channel:
        ...

    async def fetch_custom_type_keys(self, type_ids: Set[str]) -> Mapping[str, str]:
        """Return the keys of the custom types in ``type_ids``, by id; unknown ids are left out."""
        ...

    async def fetch_entries_by_skus(self, skus: Set[str]) -> Sequence[InventoryEntry]:
        """Return the entries whose sku is in ``skus``, across all supply channels."""
        ...

    async def create_entry(self, draft: InventoryEntryDraft) -> InventoryEntry:
        ...

    async def update_entry(
        self,
        entry: InventoryEntry,
        actions: Sequence[UpdateAction],
    ) -> InventoryEntry:
        ...


__all__ = ["InventoryStore"]
