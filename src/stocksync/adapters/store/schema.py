"""Pydantic models describing the inventory store API payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from stocksync.domain.inventory.model import JsonValue  # noqa: TC001


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class StoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ChannelPayload(StoreBaseModel):
    id: str
    key: str
    version: int | None = None
    roles: list[str] = Field(default_factory=list)


class ChannelDraftPayload(StoreBaseModel):
    key: str
    roles: list[str] = Field(default_factory=lambda: ["InventorySupply"])


class ChannelReferencePayload(StoreBaseModel):
    """Reference to a channel; ``obj`` is present when the reference is expanded."""

    type_id: Literal["channel"] = Field(default="channel", alias="typeId")
    id: str
    obj: ChannelPayload | None = None


class ChannelKeyReferencePayload(StoreBaseModel):
    """Channel identified by key, as accepted in draft files."""

    type_id: Literal["channel"] = Field(default="channel", alias="typeId")
    key: str


class CustomTypePayload(StoreBaseModel):
    id: str
    key: str


class TypeReferencePayload(StoreBaseModel):
    """Custom type reference by id, by key or both; ``obj`` is present when expanded."""

    type_id: Literal["type"] = Field(default="type", alias="typeId")
    id: str | None = None
    key: str | None = None
    obj: CustomTypePayload | None = None

    @model_validator(mode="after")
    def _require_identifier(self) -> Self:
        if self.id is None and self.key is None and self.obj is None:
            raise ValueError("custom type reference needs an id or a key")
        return self


class CustomFieldsPayload(StoreBaseModel):
    type: TypeReferencePayload
    fields: dict[str, JsonValue] = Field(default_factory=dict)


class InventoryEntryPayload(StoreBaseModel):
    id: str
    version: int
    sku: str
    quantity_on_stock: int = Field(default=0, alias="quantityOnStock")
    available_quantity: int | None = Field(default=None, alias="availableQuantity")
    supply_channel: ChannelReferencePayload | None = Field(default=None, alias="supplyChannel")
    restockable_in_days: int | None = Field(default=None, alias="restockableInDays")
    expected_delivery: datetime | None = Field(default=None, alias="expectedDelivery")
    custom: CustomFieldsPayload | None = None


class InventoryEntryDraftPayload(StoreBaseModel):
    sku: str | None = None
    quantity_on_stock: int = Field(default=0, alias="quantityOnStock")
    supply_channel: ChannelReferencePayload | ChannelKeyReferencePayload | None = Field(
        default=None, alias="supplyChannel"
    )
    restockable_in_days: int | None = Field(default=None, alias="restockableInDays")
    expected_delivery: datetime | None = Field(default=None, alias="expectedDelivery")
    custom: CustomFieldsPayload | None = None

    _normalize_sku = field_validator("sku", mode="before")(_blank_to_none)


class PagedResponse(StoreBaseModel):
    offset: int = 0
    count: int
    total: int | None = None


class ChannelPage(PagedResponse):
    results: list[ChannelPayload] = Field(default_factory=list["ChannelPayload"])


class InventoryEntryPage(PagedResponse):
    results: list[InventoryEntryPayload] = Field(default_factory=list["InventoryEntryPayload"])


class CustomTypePage(PagedResponse):
    results: list[CustomTypePayload] = Field(default_factory=list["CustomTypePayload"])


class UpdatePayload(StoreBaseModel):
    version: int
    actions: list[dict[str, Any]]


class ErrorDetail(StoreBaseModel):
    code: str | None = None
    message: str


class ErrorResponse(StoreBaseModel):
    status_code: int = Field(alias="statusCode")
    message: str
    errors: list[ErrorDetail] = Field(default_factory=list["ErrorDetail"])
