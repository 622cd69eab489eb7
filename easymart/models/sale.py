from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlmodel import Field, SQLModel
from .base import new_id, utc_now


class Sale(SQLModel, table=True):
    __tablename__ = "sales"

    id: str = Field(default_factory=new_id, primary_key=True)
    customer_id: Optional[str] = None
    cashier_id: Optional[str] = Field(default=None, foreign_key="users.id")
    total_amount: float
    payment_method: Optional[str] = None
    status: str = Field(default="completed")
    created_at: datetime = Field(default_factory=utc_now, index=True)


class SaleItem(SQLModel, table=True):
    __tablename__ = "sales_items"

    id: str = Field(default_factory=new_id, primary_key=True)
    sale_id: str = Field(foreign_key="sales.id", index=True)
    product_id: str = Field(foreign_key="products.id")
    quantity: int
    unit_price: float
    total_price: float
    created_at: datetime = Field(default_factory=utc_now)


class SaleItemIn(SQLModel):
    product_id: str
    quantity: int
    unit_price: float


class SaleCreate(SQLModel):
    customer_id: Optional[str] = None
    cashier_id: Optional[str] = None
    payment_method: Optional[str] = None
    items: Optional[List[SaleItemIn]] = None


def serialize_sale(sale: Sale, item_count: int) -> Dict[str, Any]:
    data = sale.model_dump()
    data["item_count"] = item_count
    return data
