from .base import TimestampMixin, new_id, utc_now
from .product import Product, ProductIn, StockStatus, get_stock_status, serialize_product
from .inventory import InventoryMovement, MovementType, StockChange
from .sale import Sale, SaleItem, SaleItemIn, SaleCreate, serialize_sale
from .user import User, UserRole, UserRead, UserCreate, UserUpdate, LoginRequest

__all__ = [
    "TimestampMixin",
    "new_id",
    "utc_now",
    "Product",
    "ProductIn",
    "StockStatus",
    "get_stock_status",
    "serialize_product",
    "InventoryMovement",
    "MovementType",
    "StockChange",
    "Sale",
    "SaleItem",
    "SaleItemIn",
    "SaleCreate",
    "serialize_sale",
    "User",
    "UserRole",
    "UserRead",
    "UserCreate",
    "UserUpdate",
    "LoginRequest",
]
