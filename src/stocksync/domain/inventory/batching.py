"""Validation and batching of incoming drafts."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from .messages import DRAFT_HAS_NO_SKU, DRAFT_IS_NULL

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from .model import InventoryEntryDraft


class DraftRejection(StrEnum):
    """Why a draft never entered a batch; the value is the reported message."""

    NULL_DRAFT = DRAFT_IS_NULL
    MISSING_SKU = DRAFT_HAS_NO_SKU


def partition_drafts(
    drafts: Iterable[InventoryEntryDraft | None],
    batch_size: int,
    *,
    on_invalid: Callable[[DraftRejection], None],
) -> Iterator[list[InventoryEntryDraft]]:
    """Yield valid drafts in input order, grouped into batches of ``batch_size``.

    Invalid drafts are reported to ``on_invalid`` as they are consumed and never
    appear in a batch. Only the final batch may be shorter; no batch is empty.
    """

    if batch_size < 1:
        raise ValueError(f"batch_size must be a positive integer, got {batch_size!r}")

    batch: list[InventoryEntryDraft] = []
    for draft in drafts:
        if draft is None:
            on_invalid(DraftRejection.NULL_DRAFT)
            continue
        if not draft.sku:
            on_invalid(DraftRejection.MISSING_SKU)
            continue
        batch.append(draft)
        if len(batch) == batch_size:
            yield batch
            batch = []
    if batch:
        yield batch
