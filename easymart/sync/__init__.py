from .cache import InventoryCache, generate_alerts
from .channel import BroadcastChannel, ChannelClosedError
from .client import SyncClient
from .events import (
    InventoryEvent,
    ProductAdd,
    ProductDelete,
    ProductUpdate,
    SaleEvent,
    StockUpdate,
    dump_event,
    parse_event,
)
from .models import Alert, AlertStatus, AlertType, Product, ProductCategory, Sale
from .relay import RelayClient, reconnect_delay
from .store import (
    InventoryStore,
    MemoryInventoryStore,
    RemoteInventoryStore,
    StoreError,
    select_store,
)

__all__ = [
    "InventoryCache",
    "generate_alerts",
    "BroadcastChannel",
    "ChannelClosedError",
    "SyncClient",
    "InventoryEvent",
    "ProductAdd",
    "ProductDelete",
    "ProductUpdate",
    "SaleEvent",
    "StockUpdate",
    "dump_event",
    "parse_event",
    "Alert",
    "AlertStatus",
    "AlertType",
    "Product",
    "ProductCategory",
    "Sale",
    "RelayClient",
    "reconnect_delay",
    "InventoryStore",
    "MemoryInventoryStore",
    "RemoteInventoryStore",
    "StoreError",
    "select_store",
]
