"""Inventory reconciliation core.

Drafts (desired state) are matched against store entries by sku and supply
channel key, then created or updated with the minimal set of actions. See
:mod:`stocksync.domain.inventory.sync` for the flow.
"""

from __future__ import annotations

from .actions import (
    ChangeQuantity,
    SetCustomField,
    SetCustomType,
    SetExpectedDelivery,
    SetRestockableInDays,
    SetSupplyChannel,
    UpdateAction,
    build_actions,
)
from .channels import ChannelCache
from .custom_types import CustomTypeCache
from .keys import SkuChannelKey
from .model import (
    Channel,
    ChannelId,
    ChannelKey,
    ChannelRef,
    CustomFields,
    InventoryEntry,
    InventoryEntryDraft,
)
from .options import ActionBuilder, ErrorCallback, InventorySyncOptions
from .statistics import InventorySyncStatistics, StatisticsSnapshot
from .sync import DraftOutcome, DraftResult, InventorySync

__all__ = [
    "ActionBuilder",
    "ChangeQuantity",
    "Channel",
    "ChannelCache",
    "ChannelId",
    "ChannelKey",
    "ChannelRef",
    "CustomFields",
    "CustomTypeCache",
    "DraftOutcome",
    "DraftResult",
    "ErrorCallback",
    "InventoryEntry",
    "InventoryEntryDraft",
    "InventorySync",
    "InventorySyncOptions",
    "InventorySyncStatistics",
    "SetCustomField",
    "SetCustomType",
    "SetExpectedDelivery",
    "SetRestockableInDays",
    "SetSupplyChannel",
    "SkuChannelKey",
    "StatisticsSnapshot",
    "UpdateAction",
    "build_actions",
]
