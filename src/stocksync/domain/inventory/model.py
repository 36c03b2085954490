"""Inventory domain records: drafts, store entries and supply channels.

Drafts describe the desired state supplied by the caller. Entries are
snapshots of what the store holds. Both reference supply channels through
:data:`ChannelRef`, a small tagged variant:

- :class:`ChannelKey` carries the human readable channel key. Every draft
  coming from outside the engine uses this form.
- :class:`ChannelId` carries the store-assigned channel id. Entries always use
  this form and drafts are rewritten to it right before dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

type JsonValue = str | int | float | bool | None | list[JsonValue] | dict[str, JsonValue]


@dataclass(frozen=True, slots=True)
class ChannelKey:
    """Unresolved channel reference, identified by key."""

    key: str


@dataclass(frozen=True, slots=True)
class ChannelId:
    """Resolved channel reference, identified by store id."""

    id: str


type ChannelRef = ChannelKey | ChannelId


@dataclass(frozen=True, slots=True)
class Channel:
    id: str
    key: str


@dataclass(frozen=True, slots=True)
class CustomFields:
    """Custom type and field values of a draft or entry.

    Drafts always name their type by key. Store entries may only carry the
    type id; ``type_key`` stays ``None`` until the sync resolves it.
    """

    type_key: str | None
    fields: Mapping[str, JsonValue] = field(default_factory=dict)
    type_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class InventoryEntryDraft:
    sku: str | None
    quantity_on_stock: int = 0
    supply_channel: ChannelRef | None = None
    restockable_in_days: int | None = None
    expected_delivery: datetime | None = None
    custom: CustomFields | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class InventoryEntry:
    id: str
    version: int
    sku: str
    quantity_on_stock: int = 0
    available_quantity: int | None = None
    supply_channel: ChannelId | None = None
    restockable_in_days: int | None = None
    expected_delivery: datetime | None = None
    custom: CustomFields | None = None
