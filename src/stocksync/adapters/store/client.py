"""HTTP implementation of the inventory store port."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from stocksync.adapters.http_resilience import ResilientClient
from stocksync.config.store import get_store_config

from .schema import (
    ChannelDraftPayload,
    ChannelPage,
    ChannelPayload,
    CustomTypePage,
    ErrorResponse,
    InventoryEntryPage,
    InventoryEntryPayload,
    UpdatePayload,
)
from .translator import (
    action_to_payload,
    draft_to_payload,
    translate_channel,
    translate_entry,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence, Set
    from types import TracebackType

    import httpx

    from stocksync.config.http_resilience import ResilienceConfig
    from stocksync.config.store import StoreConfig
    from stocksync.domain.inventory.actions import UpdateAction
    from stocksync.domain.inventory.model import Channel, InventoryEntry, InventoryEntryDraft
    from stocksync.domain.ports.inventory import InventoryStore

log = getLogger(__name__)

CHANNELS_PATH = "channels"
INVENTORY_PATH = "inventory"
TYPES_PATH = "types"


class StoreAPIError(RuntimeError):
    """Raised when the store API answers with an error or an unexpected payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _quoted(values: Set[str]) -> str:
    return ", ".join(json.dumps(value) for value in sorted(values))


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class HttpInventoryStore:
    """Inventory store backed by the JSON REST API.

    Use as an async context manager; one pooled HTTP client serves every
    concurrent request of a sync call.
    """

    def __init__(
        self,
        *,
        config: StoreConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_store_config()
        self._client_factory = client_factory or _default_client_factory
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> HttpInventoryStore:
        self._client = self._client_factory(self._config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_supply_channels(self) -> list[Channel]:
        channels: list[Channel] = []
        offset = 0
        while True:
            payload = await self._get(CHANNELS_PATH, params=self._page_params(offset))
            page = ChannelPage.model_validate(payload)
            channels.extend(translate_channel(item) for item in page.results)
            offset += page.count
            if not self._has_more(page.count, offset, page.total):
                break
        log.debug("Fetched %s supply channel(s)", len(channels))
        return channels

    async def create_supply_channel(self, key: str) -> Channel:
        body = ChannelDraftPayload(key=key).model_dump(mode="json")
        payload = await self._post(CHANNELS_PATH, body=body)
        channel = translate_channel(ChannelPayload.model_validate(payload))
        log.info("Created supply channel %s (%s)", channel.key, channel.id)
        return channel

    async def fetch_custom_type_keys(self, type_ids: Set[str]) -> dict[str, str]:
        if not type_ids:
            return {}
        where = f"id in ({_quoted(type_ids)})"
        keys: dict[str, str] = {}
        offset = 0
        while True:
            params = {**self._page_params(offset), "where": where}
            payload = await self._get(TYPES_PATH, params=params)
            page = CustomTypePage.model_validate(payload)
            keys.update((item.id, item.key) for item in page.results)
            offset += page.count
            if not self._has_more(page.count, offset, page.total):
                break
        log.debug("Fetched %s custom type(s)", len(keys))
        return keys

    async def fetch_entries_by_skus(self, skus: Set[str]) -> list[InventoryEntry]:
        if not skus:
            return []
        where = f"sku in ({_quoted(skus)})"
        entries: list[InventoryEntry] = []
        offset = 0
        while True:
            params = {**self._page_params(offset), "where": where}
            payload = await self._get(INVENTORY_PATH, params=params)
            page = InventoryEntryPage.model_validate(payload)
            entries.extend(translate_entry(item) for item in page.results)
            offset += page.count
            if not self._has_more(page.count, offset, page.total):
                break
        return entries

    async def create_entry(self, draft: InventoryEntryDraft) -> InventoryEntry:
        payload = await self._post(INVENTORY_PATH, body=draft_to_payload(draft))
        return translate_entry(InventoryEntryPayload.model_validate(payload))

    async def update_entry(
        self,
        entry: InventoryEntry,
        actions: Sequence[UpdateAction],
    ) -> InventoryEntry:
        body = UpdatePayload(
            version=entry.version,
            actions=[action_to_payload(action) for action in actions],
        ).model_dump(mode="json")
        payload = await self._post(f"{INVENTORY_PATH}/{entry.id}", body=body)
        return translate_entry(InventoryEntryPayload.model_validate(payload))

    def _page_params(self, offset: int) -> dict[str, str | int]:
        return {"limit": self._config.page_size, "offset": offset}

    def _has_more(self, count: int, offset: int, total: int | None) -> bool:
        if count == 0:
            return False
        if total is None:
            # Without a total only a short page marks the end.
            return count >= self._config.page_size
        return offset < total

    async def _get(self, path: str, *, params: dict[str, str | int]) -> dict[str, Any]:
        response = await self._active_client().get(path, params=params)
        return self._parse(response)

    async def _post(self, path: str, *, body: dict[str, Any]) -> dict[str, Any]:
        response = await self._active_client().post(path, json=body)
        return self._parse(response)

    def _active_client(self) -> ResilientClient:
        if self._client is None:
            raise StoreAPIError("HttpInventoryStore must be used as an async context manager")
        return self._client

    def _parse(self, response: httpx.Response) -> dict[str, Any]:
        if response.is_error:
            raise self._error_from(response)
        try:
            payload = response.json()
        except json.JSONDecodeError as exc:
            raise StoreAPIError(
                "Store returned a non-JSON payload", status_code=response.status_code
            ) from exc
        if not isinstance(payload, dict):
            raise StoreAPIError(
                "Unexpected store response payload", status_code=response.status_code
            )
        return payload

    @staticmethod
    def _error_from(response: httpx.Response) -> StoreAPIError:
        try:
            error = ErrorResponse.model_validate(response.json())
        except (json.JSONDecodeError, ValidationError):
            return StoreAPIError(
                f"Store request {response.request.method} {response.request.url} failed "
                f"with status {response.status_code}",
                status_code=response.status_code,
            )
        log.debug("Store API error %s: %s", error.status_code, error.message)
        return StoreAPIError(error.message, status_code=error.status_code)


if TYPE_CHECKING:
    _store_check: InventoryStore = HttpInventoryStore()
