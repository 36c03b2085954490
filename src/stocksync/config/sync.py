"""Synchronization defaults for inventory syncs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_int

DEFAULT_BATCH_SIZE = 30


@dataclass(frozen=True, slots=True)
class SyncConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    ensure_channels: bool = False


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        batch_size=env_int("STOCKSYNC_BATCH_SIZE", DEFAULT_BATCH_SIZE, minimum=1),
        ensure_channels=env_bool("STOCKSYNC_ENSURE_CHANNELS", False),
    )
