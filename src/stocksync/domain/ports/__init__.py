"""Domain port definitions for adapters."""

from __future__ import annotations

from .inventory import InventoryStore

__all__ = ["InventoryStore"]
