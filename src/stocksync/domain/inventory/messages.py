"""Error messages reported through the sync error callback."""

from __future__ import annotations

from typing import Final

ENTRY_FETCH_FAILED: Final = "Failed to fetch existing inventory entries of SKUs {}."
CHANNEL_FETCH_FAILED: Final = "Failed to fetch supply channels."
ENTRY_UPDATE_FAILED: Final = (
    "Failed to update inventory entry of sku '{}' and supply channel key '{}'."
)
DRAFT_HAS_NO_SKU: Final = "Failed to process inventory entry without sku."
DRAFT_IS_NULL: Final = "Failed to process null inventory draft."
CHANNEL_CREATE_FAILED: Final = "Failed to create new supply channel of key '{}'."
ENTRY_CREATE_FAILED: Final = (
    "Failed to create inventory entry of sku '{}' and supply channel key '{}'."
)
CHANNEL_KEY_MAPPING_MISSING: Final = "Failed to find supply channel of key '{}'."
