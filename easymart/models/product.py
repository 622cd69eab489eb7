from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field, SQLModel
from .base import TimestampMixin, new_id


class StockStatus(str, Enum):
    IN_STOCK = "in-stock"
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"


def get_stock_status(current_stock: int, minimum_stock: int) -> StockStatus:
    """Classify a stock level against its reorder threshold.

    Exactly zero is out-of-stock; anything else up to and including the
    minimum is low-stock. Negative stock, left by unguarded sales or
    adjustments, therefore reads as low-stock.
    """
    if current_stock == 0:
        return StockStatus.OUT_OF_STOCK
    if current_stock <= minimum_stock:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class ProductBase(SQLModel):
    name: str = Field(index=True)
    sku: str = Field(unique=True, index=True)  # barcode
    category: Optional[str] = None
    price: float
    cost_price: Optional[float] = None
    stock_quantity: int = Field(default=0)
    reorder_level: int = Field(default=10)
    image_url: Optional[str] = None
    description: Optional[str] = None


class Product(ProductBase, TimestampMixin, table=True):
    __tablename__ = "products"

    id: str = Field(default_factory=new_id, primary_key=True)

    @property
    def stock_status(self) -> StockStatus:
        return get_stock_status(self.stock_quantity, self.reorder_level)


class ProductIn(SQLModel):
    # Everything optional so handlers can answer 400 with the missing names
    name: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    cost_price: Optional[float] = None
    stock_quantity: Optional[int] = None
    reorder_level: Optional[int] = None
    image_url: Optional[str] = None
    description: Optional[str] = None


def serialize_product(product: Product) -> Dict[str, Any]:
    data = product.model_dump()
    data["stock_status"] = product.stock_status.value
    return data
