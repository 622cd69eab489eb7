import logging
from typing import Callable, Dict, Iterable, List, Optional

from ..models.base import utc_now
from ..models.product import StockStatus
from .events import (
    InventoryEvent,
    ProductAdd,
    ProductDelete,
    ProductUpdate,
    SaleEvent,
    StockUpdate,
)
from .models import Alert, AlertStatus, AlertType, Product, Sale

logger = logging.getLogger(__name__)

# Called with the applied event, or None after a full reload
Subscriber = Callable[[Optional[InventoryEvent]], None]


def alert_id_for(product_id: str, alert_type: AlertType) -> str:
    return f"alert-{product_id}-{alert_type.value}"


def generate_alerts(products: Iterable[Product], previous: Iterable[Alert] = ()) -> List[Alert]:
    """Build the alert list for the current stock levels.

    Alert ids are derived from product and alert type, so an alert that is
    still warranted keeps its id, timestamp and resolved state across
    regeneration. Once the condition clears the alert is dropped; a later
    relapse raises a fresh active alert.
    """
    known: Dict[str, Alert] = {alert.id: alert for alert in previous}
    now = utc_now().isoformat()
    alerts = []
    for product in products:
        status = product.stock_status
        if status == StockStatus.IN_STOCK:
            continue
        alert_type = AlertType.OUT_OF_STOCK if status == StockStatus.OUT_OF_STOCK else AlertType.LOW_STOCK
        alert_id = alert_id_for(product.id, alert_type)
        existing = known.get(alert_id)
        if existing is not None:
            alerts.append(existing.model_copy(update={"product_name": product.name}))
            continue
        alerts.append(Alert(
            id=alert_id,
            product_id=product.id,
            product_name=product.name,
            alert_type=alert_type,
            alert_timestamp=now,
        ))
    return alerts


class InventoryCache:
    """A window's in-memory projection of products, sales and alerts."""

    def __init__(self, products: Optional[Iterable[Product]] = None, sales: Optional[Iterable[Sale]] = None):
        self.products: List[Product] = list(products or [])
        self.sales: List[Sale] = list(sales or [])
        self.alerts: List[Alert] = generate_alerts(self.products)
        self._subscribers: List[Subscriber] = []

    # Subscriptions

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: Optional[InventoryEvent]):
        for callback in list(self._subscribers):
            callback(event)

    # Lookups

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def get_product_by_barcode(self, barcode: str) -> Optional[Product]:
        return next((p for p in self.products if p.barcode == barcode), None)

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        return next((s for s in self.sales if s.id == sale_id), None)

    def active_alerts(self) -> List[Alert]:
        return [a for a in self.alerts if a.status == AlertStatus.ACTIVE]

    def out_of_stock_products(self) -> List[Product]:
        return [p for p in self.products if p.stock_status == StockStatus.OUT_OF_STOCK]

    def low_stock_products(self) -> List[Product]:
        return [p for p in self.products if p.stock_status == StockStatus.LOW_STOCK]

    # Alerts

    def refresh_alerts(self, product_id: Optional[str] = None):
        """Regenerate alerts for one product, or for all of them."""
        if product_id is None:
            self.alerts = generate_alerts(self.products, self.alerts)
            return
        others = [a for a in self.alerts if a.product_id != product_id]
        mine = [a for a in self.alerts if a.product_id == product_id]
        product = self.get_product(product_id)
        regenerated = generate_alerts([product], mine) if product else []
        self.alerts = others + regenerated

    def resolve_alert(self, alert_id: str) -> bool:
        for index, alert in enumerate(self.alerts):
            if alert.id == alert_id:
                self.alerts[index] = alert.model_copy(update={"status": AlertStatus.RESOLVED})
                self._notify(None)
                return True
        return False

    # Bulk reload from the durable store

    def replace_products(self, products: Iterable[Product]):
        self.products = list(products)
        self.refresh_alerts()
        self._notify(None)

    def replace_sales(self, sales: Iterable[Sale]):
        self.sales = list(sales)
        self._notify(None)

    # Event application

    def apply(self, event: InventoryEvent) -> bool:
        """Apply a sync event; returns True if the cache changed.

        STOCK_UPDATE and PRODUCT_UPDATE are last-write-wins overwrites.
        PRODUCT_ADD and SALE are ignored when the id is already present.
        """
        match event:
            case StockUpdate(product_id=product_id, new_stock=new_stock):
                changed = self._set_stock(product_id, new_stock)
            case ProductUpdate(product=product):
                changed = self._replace_product(product)
                product_id = product.id
            case ProductAdd(product=product):
                changed = self._add_product(product)
                product_id = product.id
            case ProductDelete(product_id=product_id):
                changed = self._delete_product(product_id)
            case SaleEvent(sale=sale):
                changed = self._add_sale(sale)
                product_id = None
            case _:
                raise TypeError(f"Unsupported inventory event: {event!r}")

        if not changed:
            return False
        if product_id is not None:
            self.refresh_alerts(product_id)
        logger.debug("Applied %s", event.type)
        self._notify(event)
        return True

    def _index_of(self, product_id: str) -> Optional[int]:
        return next((i for i, p in enumerate(self.products) if p.id == product_id), None)

    def _set_stock(self, product_id: str, new_stock: int) -> bool:
        index = self._index_of(product_id)
        if index is None:
            return False
        product = self.products[index]
        if product.current_stock == new_stock:
            return False
        self.products[index] = product.model_copy(update={"current_stock": new_stock})
        return True

    def _replace_product(self, product: Product) -> bool:
        index = self._index_of(product.id)
        if index is None or self.products[index] == product:
            return False
        self.products[index] = product
        return True

    def _add_product(self, product: Product) -> bool:
        if self._index_of(product.id) is not None:
            return False
        self.products.append(product)
        return True

    def _delete_product(self, product_id: str) -> bool:
        index = self._index_of(product_id)
        if index is None:
            return False
        del self.products[index]
        return True

    def _add_sale(self, sale: Sale) -> bool:
        if self.get_sale(sale.id) is not None:
            return False
        self.sales.insert(0, sale)
        return True
