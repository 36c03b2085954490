"""Options and error reporting policy for inventory syncs."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.config.sync import DEFAULT_BATCH_SIZE

from .actions import build_actions

if TYPE_CHECKING:
    from .actions import UpdateAction
    from .model import InventoryEntry, InventoryEntryDraft

log = getLogger(__name__)

type ErrorCallback = Callable[[str, BaseException | None], None]
type ActionBuilder = Callable[[InventoryEntry, InventoryEntryDraft], Sequence[UpdateAction]]


@dataclass(frozen=True, slots=True, kw_only=True)
class InventorySyncOptions:
    """Caller supplied knobs for :class:`~stocksync.domain.inventory.sync.InventorySync`.

    ``batch_size`` bounds both the bulk entry lookups and the number of
    concurrent store calls issued per batch. ``ensure_channels`` makes the sync
    create supply channels that drafts reference but the store lacks.
    """

    batch_size: int = DEFAULT_BATCH_SIZE
    ensure_channels: bool = False
    error_callback: ErrorCallback | None = None
    build_actions: ActionBuilder = build_actions

    def __post_init__(self) -> None:
        if isinstance(self.batch_size, bool) or self.batch_size < 1:
            raise ValueError(f"batch_size must be a positive integer, got {self.batch_size!r}")

    def apply_error_callback(self, message: str, cause: BaseException | None = None) -> None:
        """Report a recoverable sync error; never raises."""

        if cause is not None:
            log.warning("%s Cause: %r", message, cause)
        else:
            log.warning(message)
        if self.error_callback is None:
            return
        try:
            self.error_callback(message, cause)
        except Exception:
            log.exception("Error callback raised while reporting: %s", message)
