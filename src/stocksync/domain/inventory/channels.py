"""Supply channel registry cache and creation of missing channels."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from .keys import channel_key_of
from .messages import CHANNEL_CREATE_FAILED

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from .model import Channel, InventoryEntryDraft
    from .options import ErrorCallback

log = getLogger(__name__)


class ChannelCache:
    """Bidirectional channel key/id lookup owned by one sync call."""

    def __init__(self) -> None:
        self._ids_by_key: dict[str, str] = {}
        self._keys_by_id: dict[str, str] = {}

    @classmethod
    def build(cls, channels: Iterable[Channel]) -> ChannelCache:
        cache = cls()
        for channel in channels:
            cache.add(channel)
        return cache

    def add(self, channel: Channel) -> None:
        self._ids_by_key[channel.key] = channel.id
        self._keys_by_id[channel.id] = channel.key

    def lookup(self, key: str) -> str | None:
        return self._ids_by_key.get(key)

    def key_of(self, channel_id: str) -> str | None:
        return self._keys_by_id.get(channel_id)

    def __contains__(self, key: object) -> bool:
        return key in self._ids_by_key

    def __len__(self) -> int:
        return len(self._ids_by_key)


def missing_channel_keys(
    drafts: Iterable[InventoryEntryDraft | None],
    cache: ChannelCache,
) -> list[str]:
    """Distinct channel keys of valid ``drafts`` absent from ``cache``, in input order."""

    missing: list[str] = []
    seen: set[str] = set()
    for draft in drafts:
        if draft is None or not draft.sku:
            continue
        key = channel_key_of(draft)
        if key is None or key in seen:
            continue
        seen.add(key)
        if key not in cache:
            missing.append(key)
    return missing


async def ensure_missing_channels(
    drafts: Iterable[InventoryEntryDraft | None],
    cache: ChannelCache,
    *,
    ensure: bool,
    create: Callable[[str], Awaitable[Channel]],
    on_error: ErrorCallback,
) -> ChannelCache:
    """Create the channels ``drafts`` reference but the store lacks.

    Best effort: a failed creation is reported through ``on_error`` and its
    key simply stays absent, so the drafts using it fail resolution later.
    """

    if not ensure:
        return cache

    missing = missing_channel_keys(drafts, cache)
    if not missing:
        return cache
    log.info("Creating %s missing supply channel(s)", len(missing))

    async def create_one(key: str) -> None:
        try:
            channel = await create(key)
        except Exception as exc:  # noqa: BLE001
            on_error(CHANNEL_CREATE_FAILED.format(key), exc)
            return
        cache.add(channel)

    await asyncio.gather(*(create_one(key) for key in missing))
    return cache
