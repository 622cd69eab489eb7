from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, SQLModel
from .base import new_id, utc_now


class MovementType(str, Enum):
    RESTOCK = "restock"          # Replenishment from a supplier
    ADJUSTMENT = "adjustment"    # Manual correction, either sign
    SALE = "sale"                # Written by the sale transaction


class InventoryMovement(SQLModel, table=True):
    """Append-only stock ledger entry. Rows are never updated or deleted."""
    __tablename__ = "inventory_movements"

    id: str = Field(default_factory=new_id, primary_key=True)
    product_id: str = Field(foreign_key="products.id", index=True)
    movement_type: MovementType
    quantity: int  # signed delta
    reference_type: Optional[str] = None
    reference_id: Optional[str] = Field(default=None, index=True)
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, index=True)


class StockChange(SQLModel):
    product_id: Optional[str] = None
    quantity: Optional[int] = None
    notes: Optional[str] = None
    reason: Optional[str] = None
