import logging
from typing import List, Optional

from .cache import InventoryCache
from .channel import BroadcastChannel
from .events import (
    InventoryEvent,
    ProductAdd,
    ProductDelete,
    ProductUpdate,
    SaleEvent,
    StockUpdate,
)
from .models import Alert, Product
from .relay import RelayClient
from .store import InventoryStore

logger = logging.getLogger(__name__)


class SyncClient:
    """One window's view of the shared inventory.

    Local mutations run against the store first and are only announced to
    sibling windows (same-origin channel) and other devices (relay) once
    they succeeded. Events arriving from either side are applied to the
    local cache.
    """

    def __init__(
        self,
        store: InventoryStore,
        channel: Optional[BroadcastChannel] = None,
        relay_url: Optional[str] = None,
        relay: Optional[RelayClient] = None,
    ):
        self.store = store
        self.channel = channel or BroadcastChannel()
        self.channel.add_listener(self.handle_event)
        if relay is None and relay_url:
            relay = RelayClient(relay_url, self.handle_event)
        self.relay = relay

    @property
    def cache(self) -> InventoryCache:
        return self.store.cache

    @property
    def status(self) -> str:
        if self.store.mode != "remote":
            return "local"
        if self.relay is not None and self.relay.connected:
            return "online"
        return "degraded"

    def start(self):
        if self.relay is not None:
            self.relay.start()

    def handle_event(self, event: InventoryEvent):
        self.cache.apply(event)

    async def emit(self, *events: InventoryEvent):
        for event in events:
            self.channel.post_message(event)
            if self.relay is not None:
                await self.relay.send(event)

    # Product management

    async def add_product(self, product: Product) -> Product:
        created = await self.store.add_product(product)
        await self.emit(ProductAdd(product=created))
        return created

    async def update_product(self, product: Product) -> Product:
        updated = await self.store.update_product(product)
        await self.emit(ProductUpdate(product=updated))
        return updated

    async def delete_product(self, product_id: str):
        await self.store.delete_product(product_id)
        await self.emit(ProductDelete(product_id=product_id))

    # Stock

    async def sell_product(self, product_id: str, quantity: int, sold_by: str) -> bool:
        sale = await self.store.sell_product(product_id, quantity, sold_by)
        if sale is None:
            return False
        product = self.cache.get_product(product_id)
        new_stock = product.current_stock if product is not None else 0
        await self.emit(
            SaleEvent(sale=sale),
            StockUpdate(product_id=product_id, new_stock=new_stock, sold_quantity=quantity),
        )
        return True

    async def restock_product(self, product_id: str, quantity: int, notes: Optional[str] = None) -> bool:
        product = await self.store.restock_product(product_id, quantity, notes)
        if product is None:
            return False
        await self.emit(StockUpdate(product_id=product.id, new_stock=product.current_stock))
        return True

    async def adjust_stock(self, product_id: str, quantity: int, notes: Optional[str] = None) -> bool:
        product = await self.store.adjust_stock(product_id, quantity, notes)
        if product is None:
            return False
        await self.emit(StockUpdate(product_id=product.id, new_stock=product.current_stock))
        return True

    # Alerts stay local to the window

    def resolve_alert(self, alert_id: str) -> bool:
        return self.cache.resolve_alert(alert_id)

    def active_alerts(self) -> List[Alert]:
        return self.cache.active_alerts()

    async def refresh(self):
        await self.store.refresh()

    async def close(self):
        self.channel.remove_listener(self.handle_event)
        self.channel.close()
        if self.relay is not None:
            await self.relay.close()
        await self.store.close()
