"""Translate store API payloads to domain records and back."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, assert_never

from stocksync.domain.inventory.actions import (
    ChangeQuantity,
    SetCustomField,
    SetCustomType,
    SetExpectedDelivery,
    SetRestockableInDays,
    SetSupplyChannel,
)
from stocksync.domain.inventory.model import (
    Channel,
    ChannelId,
    ChannelKey,
    CustomFields,
    InventoryEntry,
    InventoryEntryDraft,
)

from .schema import (
    ChannelKeyReferencePayload,
    ChannelPayload,
    CustomFieldsPayload,
    InventoryEntryDraftPayload,
    InventoryEntryPayload,
)

if TYPE_CHECKING:
    from datetime import datetime

    from stocksync.domain.inventory.actions import UpdateAction
    from stocksync.domain.inventory.model import ChannelRef

    from .schema import ChannelReferencePayload

type DraftPayloadInput = InventoryEntryDraftPayload | Mapping[str, object]


def translate_channel(payload: ChannelPayload) -> Channel:
    return Channel(id=payload.id, key=payload.key)


def translate_entry(payload: InventoryEntryPayload) -> InventoryEntry:
    supply_channel = (
        ChannelId(payload.supply_channel.id) if payload.supply_channel is not None else None
    )
    return InventoryEntry(
        id=payload.id,
        version=payload.version,
        sku=payload.sku,
        quantity_on_stock=payload.quantity_on_stock,
        available_quantity=payload.available_quantity,
        supply_channel=supply_channel,
        restockable_in_days=payload.restockable_in_days,
        expected_delivery=payload.expected_delivery,
        custom=_translate_custom(payload.custom),
    )


def translate_draft(payload: DraftPayloadInput) -> InventoryEntryDraft:
    """Build a draft from its wire form.

    An expanded channel reference contributes its object's key; an unexpanded
    one is taken to hold the key in its id slot.
    """

    model = (
        payload
        if isinstance(payload, InventoryEntryDraftPayload)
        else InventoryEntryDraftPayload.model_validate(payload)
    )
    return InventoryEntryDraft(
        sku=model.sku,
        quantity_on_stock=model.quantity_on_stock,
        supply_channel=_draft_channel_ref(model.supply_channel),
        restockable_in_days=model.restockable_in_days,
        expected_delivery=model.expected_delivery,
        custom=_translate_custom(model.custom),
    )


def _draft_channel_ref(
    reference: ChannelReferencePayload | ChannelKeyReferencePayload | None,
) -> ChannelKey | None:
    if reference is None:
        return None
    if isinstance(reference, ChannelKeyReferencePayload):
        return ChannelKey(reference.key)
    if reference.obj is not None:
        return ChannelKey(reference.obj.key)
    return ChannelKey(reference.id)


def _translate_custom(payload: CustomFieldsPayload | None) -> CustomFields | None:
    if payload is None:
        return None
    reference = payload.type
    expanded = reference.obj
    return CustomFields(
        type_key=reference.key or (expanded.key if expanded is not None else None),
        fields=dict(payload.fields),
        type_id=reference.id or (expanded.id if expanded is not None else None),
    )


def draft_to_payload(draft: InventoryEntryDraft) -> dict[str, Any]:
    """JSON body for creating an entry from a draft whose channel is resolved."""

    body: dict[str, Any] = {
        "sku": draft.sku,
        "quantityOnStock": draft.quantity_on_stock,
    }
    if draft.supply_channel is not None:
        body["supplyChannel"] = _channel_ref_payload(draft.supply_channel)
    if draft.restockable_in_days is not None:
        body["restockableInDays"] = draft.restockable_in_days
    if draft.expected_delivery is not None:
        body["expectedDelivery"] = _format_datetime(draft.expected_delivery)
    if draft.custom is not None:
        body["custom"] = {
            "type": _type_ref_payload(draft.custom.type_key, draft.custom.type_id),
            "fields": dict(draft.custom.fields),
        }
    return body


def action_to_payload(action: UpdateAction) -> dict[str, Any]:
    body: dict[str, Any] = {"action": action.action}
    match action:
        case ChangeQuantity(quantity=quantity):
            body["quantity"] = quantity
        case SetRestockableInDays(restockable_in_days=days):
            body["restockableInDays"] = days
        case SetExpectedDelivery(expected_delivery=expected):
            body["expectedDelivery"] = _format_datetime(expected) if expected else None
        case SetSupplyChannel(channel_id=channel_id):
            if channel_id is not None:
                body["supplyChannel"] = {"typeId": "channel", "id": channel_id}
        case SetCustomType(type_key=type_key, fields=fields, type_id=type_id):
            if type_key is not None or type_id is not None:
                body["type"] = _type_ref_payload(type_key, type_id)
                body["fields"] = dict(fields)
        case SetCustomField(name=name, value=value):
            body["name"] = name
            body["value"] = value
        case _:
            assert_never(action)
    return body


def _channel_ref_payload(reference: ChannelRef) -> dict[str, str]:
    match reference:
        case ChannelId(id=channel_id):
            return {"typeId": "channel", "id": channel_id}
        case ChannelKey(key=key):
            return {"typeId": "channel", "key": key}
        case _:
            assert_never(reference)


def _type_ref_payload(type_key: str | None, type_id: str | None) -> dict[str, str]:
    if type_key is not None:
        return {"typeId": "type", "key": type_key}
    if type_id is not None:
        return {"typeId": "type", "id": type_id}
    raise ValueError("custom type reference needs an id or a key")


def _format_datetime(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")
