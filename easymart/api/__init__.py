from .products import router as products_router
from .sales import router as sales_router
from .inventory import router as inventory_router
from .users import router as users_router

__all__ = ["products_router", "sales_router", "inventory_router", "users_router"]
