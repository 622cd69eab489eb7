"""Client-side projections of products, sales and alerts.

These are what each window keeps in its local cache and what travels inside
sync events. Field names are snake_case in Python and camelCase on the wire.
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..models.product import StockStatus, get_stock_status


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductCategory(str, Enum):
    RICE = "Rice"
    LENTILS = "Lentils"
    SUGAR = "Sugar"
    BEVERAGES = "Beverages"
    ICE_CREAM = "Ice Cream"
    DAIRY = "Dairy"
    SNACKS = "Snacks"
    CLEANING = "Cleaning"
    PERSONAL_CARE = "Personal Care"
    OTHER = "Other"


def _date_part(timestamp: Optional[str]) -> Optional[str]:
    if not timestamp:
        return None
    return str(timestamp).split("T")[0].split(" ")[0]


class Product(CamelModel):
    id: str
    name: str
    category: ProductCategory = ProductCategory.OTHER
    barcode: str
    current_stock: int = 0
    minimum_stock: int = 0
    price: float = 0.0
    cost_price: Optional[float] = None
    supplier_info: str = ""
    last_restocked: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value):
        if isinstance(value, ProductCategory):
            return value
        try:
            return ProductCategory(value)
        except ValueError:
            return ProductCategory.OTHER

    @property
    def stock_status(self) -> StockStatus:
        return get_stock_status(self.current_stock, self.minimum_stock)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Product":
        """Build from a REST product row."""
        return cls(
            id=data["id"],
            name=data["name"],
            category=data.get("category"),
            barcode=data["sku"],
            current_stock=data.get("stock_quantity") or 0,
            minimum_stock=data.get("reorder_level") or 0,
            price=data.get("price") or 0.0,
            cost_price=data.get("cost_price"),
            supplier_info=data.get("description") or "",
            last_restocked=_date_part(data.get("updated_at")),
            image_url=data.get("image_url"),
        )

    def to_api(self) -> Dict[str, Any]:
        """REST body for create/update."""
        return {
            "name": self.name,
            "sku": self.barcode,
            "category": self.category.value,
            "price": self.price,
            "cost_price": self.cost_price,
            "stock_quantity": self.current_stock,
            "reorder_level": self.minimum_stock,
            "description": self.supplier_info,
            "image_url": self.image_url,
        }


class Sale(CamelModel):
    id: str
    product_id: str = ""
    product_name: str = ""
    quantity_sold: int = 0
    total_amount: Optional[float] = None
    sale_timestamp: str
    sold_by: str = "Unknown"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Sale":
        # Sale list rows carry no line detail, only a count
        item_count = data.get("item_count") or 0
        return cls(
            id=data["id"],
            product_name=f"{item_count} items",
            quantity_sold=item_count,
            total_amount=data.get("total_amount"),
            sale_timestamp=str(data.get("created_at")),
            sold_by=data.get("cashier_id") or "Unknown",
        )


class AlertType(str, Enum):
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"


class AlertStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"


class Alert(CamelModel):
    id: str
    product_id: str
    product_name: str
    alert_type: AlertType
    alert_timestamp: str
    status: AlertStatus = AlertStatus.ACTIVE
