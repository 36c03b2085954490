"""Inventory store REST adapter."""

from __future__ import annotations

from .client import HttpInventoryStore, StoreAPIError
from .schema import InventoryEntryDraftPayload, InventoryEntryPayload
from .translator import action_to_payload, draft_to_payload, translate_draft, translate_entry

__all__ = [
    "HttpInventoryStore",
    "InventoryEntryDraftPayload",
    "InventoryEntryPayload",
    "StoreAPIError",
    "action_to_payload",
    "draft_to_payload",
    "translate_draft",
    "translate_entry",
]
