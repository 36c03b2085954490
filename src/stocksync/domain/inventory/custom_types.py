"""Custom type id to key resolution for store entries."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Mapping, Set

    from .model import InventoryEntry

log = getLogger(__name__)


class CustomTypeCache:
    """Custom type keys by id, filled lazily during one sync call.

    Entries reference their custom type by id while drafts use the key; the
    diff needs both sides keyed. Ids the store does not know stay unresolved
    and the entry's type then never equals a draft's.
    """

    def __init__(self) -> None:
        self._keys_by_id: dict[str, str] = {}

    def key_of(self, type_id: str) -> str | None:
        return self._keys_by_id.get(type_id)

    def __len__(self) -> int:
        return len(self._keys_by_id)

    async def resolve(
        self,
        entries: Iterable[InventoryEntry],
        fetch: Callable[[Set[str]], Awaitable[Mapping[str, str]]],
    ) -> list[InventoryEntry]:
        """Return ``entries`` with their custom type keys filled in.

        Only ids missing from the cache are fetched, in a single call.
        """

        pending = list(entries)
        unknown = {
            entry.custom.type_id
            for entry in pending
            if entry.custom is not None
            and entry.custom.type_key is None
            and entry.custom.type_id is not None
            and entry.custom.type_id not in self._keys_by_id
        }
        if unknown:
            found = await fetch(unknown)
            self._keys_by_id.update(found)
            log.debug("Resolved %s of %s custom type id(s)", len(found), len(unknown))
        return [self.apply(entry) for entry in pending]

    def apply(self, entry: InventoryEntry) -> InventoryEntry:
        """Fill the custom type key of ``entry`` from the cache only."""

        custom = entry.custom
        if custom is None or custom.type_key is not None or custom.type_id is None:
            return entry
        key = self._keys_by_id.get(custom.type_id)
        if key is None:
            return entry
        return replace(entry, custom=replace(custom, type_key=key))
