"""Identity used to match drafts against existing inventory entries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .model import ChannelId, ChannelKey

if TYPE_CHECKING:
    from .channels import ChannelCache
    from .model import InventoryEntry, InventoryEntryDraft


@dataclass(frozen=True, slots=True)
class SkuChannelKey:
    """Composite ``(sku, channel key)`` key.

    ``channel_key`` is ``None`` for records without a supply channel. Such
    records only ever match other channel-less records.
    """

    sku: str
    channel_key: str | None

    @classmethod
    def of_draft(cls, draft: InventoryEntryDraft) -> SkuChannelKey:
        return cls(sku=draft.sku or "", channel_key=channel_key_of(draft))

    @classmethod
    def of_entry(cls, entry: InventoryEntry, cache: ChannelCache) -> SkuChannelKey | None:
        """Key of a store entry, or ``None`` when its channel id is not cached."""

        if entry.supply_channel is None:
            return cls(sku=entry.sku, channel_key=None)
        key = cache.key_of(entry.supply_channel.id)
        if key is None:
            return None
        return cls(sku=entry.sku, channel_key=key)


def channel_key_of(draft: InventoryEntryDraft) -> str | None:
    match draft.supply_channel:
        case ChannelKey(key=key):
            return key
        case ChannelId(id=placeholder):
            # Caller-built drafts may carry the key in the id slot.
            return placeholder
        case _:
            return None
