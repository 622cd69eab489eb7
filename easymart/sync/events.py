"""Sync events exchanged between windows and devices.

The event set is closed: one model per kind, discriminated by ``type``.
"""
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from .models import CamelModel, Product, Sale


class StockUpdate(CamelModel):
    type: Literal["STOCK_UPDATE"] = "STOCK_UPDATE"
    product_id: str
    new_stock: int
    sold_quantity: Optional[int] = None


class ProductUpdate(CamelModel):
    type: Literal["PRODUCT_UPDATE"] = "PRODUCT_UPDATE"
    product: Product


class ProductAdd(CamelModel):
    type: Literal["PRODUCT_ADD"] = "PRODUCT_ADD"
    product: Product


class ProductDelete(CamelModel):
    type: Literal["PRODUCT_DELETE"] = "PRODUCT_DELETE"
    product_id: str


class SaleEvent(CamelModel):
    type: Literal["SALE"] = "SALE"
    sale: Sale


InventoryEvent = Annotated[
    Union[StockUpdate, ProductUpdate, ProductAdd, ProductDelete, SaleEvent],
    Field(discriminator="type"),
]

_event_adapter = TypeAdapter(InventoryEvent)


def parse_event(raw: Union[str, bytes, bytearray, Dict[str, Any]]) -> InventoryEvent:
    """Decode an event from JSON text or a dict.

    Raises ``ValueError`` (pydantic's ``ValidationError``) for malformed
    payloads and unknown ``type`` tags.
    """
    if isinstance(raw, (str, bytes, bytearray)):
        return _event_adapter.validate_json(raw)
    return _event_adapter.validate_python(raw)


def dump_event(event: InventoryEvent) -> str:
    return event.model_dump_json(by_alias=True, exclude_none=True)
