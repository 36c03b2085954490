"""Default diff between a store entry and a resolved draft.

The sync engine only needs *some* callable producing update actions; this is
the one used unless :class:`~stocksync.domain.inventory.options.InventorySyncOptions`
is given another. The sku is never compared: it is part of the match key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from .model import ChannelId

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from .model import ChannelRef, CustomFields, InventoryEntry, InventoryEntryDraft, JsonValue


@dataclass(frozen=True, slots=True)
class ChangeQuantity:
    action: ClassVar[str] = "changeQuantity"
    quantity: int


@dataclass(frozen=True, slots=True)
class SetRestockableInDays:
    action: ClassVar[str] = "setRestockableInDays"
    restockable_in_days: int | None


@dataclass(frozen=True, slots=True)
class SetExpectedDelivery:
    action: ClassVar[str] = "setExpectedDelivery"
    expected_delivery: datetime | None


@dataclass(frozen=True, slots=True)
class SetSupplyChannel:
    action: ClassVar[str] = "setSupplyChannel"
    channel_id: str | None


@dataclass(frozen=True, slots=True)
class SetCustomType:
    action: ClassVar[str] = "setCustomType"
    type_key: str | None
    fields: Mapping[str, JsonValue] = field(default_factory=dict)
    type_id: str | None = None


@dataclass(frozen=True, slots=True)
class SetCustomField:
    action: ClassVar[str] = "setCustomField"
    name: str
    value: JsonValue


type UpdateAction = (
    ChangeQuantity
    | SetRestockableInDays
    | SetExpectedDelivery
    | SetSupplyChannel
    | SetCustomType
    | SetCustomField
)


def build_actions(entry: InventoryEntry, draft: InventoryEntryDraft) -> list[UpdateAction]:
    """Return the actions turning ``entry`` into ``draft``; empty when they agree."""

    actions: list[UpdateAction] = []
    if entry.quantity_on_stock != draft.quantity_on_stock:
        actions.append(ChangeQuantity(quantity=draft.quantity_on_stock))
    if entry.restockable_in_days != draft.restockable_in_days:
        actions.append(SetRestockableInDays(restockable_in_days=draft.restockable_in_days))
    if entry.expected_delivery != draft.expected_delivery:
        actions.append(SetExpectedDelivery(expected_delivery=draft.expected_delivery))

    entry_channel = entry.supply_channel.id if entry.supply_channel is not None else None
    draft_channel = _resolved_channel_id(draft.supply_channel)
    if entry_channel != draft_channel:
        actions.append(SetSupplyChannel(channel_id=draft_channel))

    actions.extend(build_custom_actions(entry.custom, draft.custom))
    return actions


def build_custom_actions(
    current: CustomFields | None,
    desired: CustomFields | None,
) -> list[UpdateAction]:
    if current is None and desired is None:
        return []
    if desired is None:
        return [SetCustomType(type_key=None)]
    if current is None or not _same_type(current, desired):
        return [
            SetCustomType(
                type_key=desired.type_key,
                fields=dict(desired.fields),
                type_id=desired.type_id if desired.type_key is None else None,
            )
        ]

    actions: list[UpdateAction] = []
    for name in sorted(set(current.fields) | set(desired.fields)):
        wanted = desired.fields.get(name)
        if current.fields.get(name) != wanted:
            actions.append(SetCustomField(name=name, value=wanted))
    return actions


def _same_type(current: CustomFields, desired: CustomFields) -> bool:
    if current.type_key is not None and desired.type_key is not None:
        return current.type_key == desired.type_key
    # An unresolved side can only be matched by id.
    return current.type_id is not None and current.type_id == desired.type_id


def _resolved_channel_id(reference: ChannelRef | None) -> str | None:
    if reference is None:
        return None
    if not isinstance(reference, ChannelId):
        raise ValueError(f"Draft supply channel {reference!r} is not resolved to an id")
    return reference.id
