import abc
import logging
import uuid
from typing import Callable, List, Optional

import httpx

from ..models.base import utc_now
from ..seed import SAMPLE_PRODUCTS
from .cache import InventoryCache
from .events import ProductAdd, ProductDelete, ProductUpdate, SaleEvent, StockUpdate
from .models import Product, Sale

logger = logging.getLogger(__name__)

# (level, message), level being "success" or "error"
Notifier = Callable[[str, str], None]


class StoreError(Exception):
    """A mutation was rejected or the durable store could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def log_notifier(level: str, message: str):
    logger.log(logging.ERROR if level == "error" else logging.INFO, message)


def sample_products() -> List[Product]:
    """Offline catalogue; ids come from the SKU so every window agrees."""
    return [
        Product(
            id=item["sku"].lower(),
            name=item["name"],
            category=item["category"],
            barcode=item["sku"],
            current_stock=item["stock_quantity"],
            minimum_stock=item["reorder_level"],
            price=item["price"],
            cost_price=item["cost_price"],
        )
        for item in SAMPLE_PRODUCTS
    ]


class InventoryStore(abc.ABC):
    """Where a window's mutations go.

    ``RemoteInventoryStore`` talks to the REST API and reloads the cache after
    every write; ``MemoryInventoryStore`` mutates the cache directly. Either
    way ``cache`` holds the window's current view.
    """

    mode: str = ""

    def __init__(self, cache: Optional[InventoryCache] = None, notifier: Optional[Notifier] = None):
        self.cache = cache if cache is not None else InventoryCache()
        self.notify = notifier or log_notifier

    @abc.abstractmethod
    async def refresh(self):
        ...

    @abc.abstractmethod
    async def add_product(self, product: Product) -> Product:
        ...

    @abc.abstractmethod
    async def update_product(self, product: Product) -> Product:
        ...

    @abc.abstractmethod
    async def delete_product(self, product_id: str):
        ...

    @abc.abstractmethod
    async def sell_product(self, product_id: str, quantity: int, sold_by: str) -> Optional[Sale]:
        """Returns the recorded sale, or None if the sale was refused."""

    @abc.abstractmethod
    async def restock_product(self, product_id: str, quantity: int, notes: Optional[str] = None) -> Optional[Product]:
        ...

    @abc.abstractmethod
    async def adjust_stock(self, product_id: str, quantity: int, notes: Optional[str] = None) -> Optional[Product]:
        ...

    def _check_sellable(self, product_id: str, quantity: int) -> Optional[Product]:
        product = self.cache.get_product(product_id)
        if product is None or quantity <= 0 or product.current_stock < quantity:
            self.notify("error", "Insufficient stock")
            return None
        return product

    async def close(self):
        pass


class MemoryInventoryStore(InventoryStore):
    """Local cache as the source of truth, used when the API is unreachable."""

    mode = "local"

    def __init__(
        self,
        products: Optional[List[Product]] = None,
        cache: Optional[InventoryCache] = None,
        notifier: Optional[Notifier] = None,
    ):
        if cache is None:
            cache = InventoryCache(products if products is not None else sample_products())
        super().__init__(cache, notifier)

    async def refresh(self):
        pass

    def _require(self, product_id: str) -> Product:
        product = self.cache.get_product(product_id)
        if product is None:
            raise StoreError("Product not found", status_code=404)
        return product

    async def add_product(self, product: Product) -> Product:
        self.cache.apply(ProductAdd(product=product))
        return product

    async def update_product(self, product: Product) -> Product:
        self._require(product.id)
        self.cache.apply(ProductUpdate(product=product))
        return product

    async def delete_product(self, product_id: str):
        self._require(product_id)
        self.cache.apply(ProductDelete(product_id=product_id))

    async def sell_product(self, product_id: str, quantity: int, sold_by: str) -> Optional[Sale]:
        product = self._check_sellable(product_id, quantity)
        if product is None:
            return None

        new_stock = product.current_stock - quantity
        sale = Sale(
            id=f"sale-{uuid.uuid4().hex}",
            product_id=product_id,
            product_name=product.name,
            quantity_sold=quantity,
            total_amount=round(quantity * product.price, 2),
            sale_timestamp=utc_now().isoformat(),
            sold_by=sold_by,
        )
        self.cache.apply(SaleEvent(sale=sale))
        self.cache.apply(StockUpdate(product_id=product_id, new_stock=new_stock, sold_quantity=quantity))
        return sale

    async def restock_product(self, product_id: str, quantity: int, notes: Optional[str] = None) -> Optional[Product]:
        product = self.cache.get_product(product_id)
        if product is None:
            return None
        updated = product.model_copy(update={
            "current_stock": product.current_stock + quantity,
            "last_restocked": utc_now().date().isoformat(),
        })
        self.cache.apply(ProductUpdate(product=updated))
        return updated

    async def adjust_stock(self, product_id: str, quantity: int, notes: Optional[str] = None) -> Optional[Product]:
        product = self.cache.get_product(product_id)
        if product is None:
            return None
        updated = product.model_copy(update={"current_stock": product.current_stock + quantity})
        self.cache.apply(ProductUpdate(product=updated))
        return updated


class RemoteInventoryStore(InventoryStore):
    """REST-backed store. Every write is followed by a full reload."""

    mode = "remote"

    def __init__(
        self,
        base_url: str,
        cache: Optional[InventoryCache] = None,
        notifier: Optional[Notifier] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(cache, notifier)
        self.base_url = base_url
        self.client = client or httpx.AsyncClient(base_url=base_url)

    async def _request(self, method: str, path: str, **kwargs):
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("API Error [%s]: %s", path, e)
            raise StoreError(str(e)) from e

        if response.is_error:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = None
            message = detail or f"HTTP {response.status_code}"
            logger.error("API Error [%s]: %s", path, message)
            raise StoreError(message, status_code=response.status_code)
        return response.json()

    async def fetch_products(self):
        rows = await self._request("GET", "/products")
        self.cache.replace_products(Product.from_api(row) for row in rows)

    async def fetch_sales(self):
        rows = await self._request("GET", "/sales")
        self.cache.replace_sales(Sale.from_api(row) for row in rows)

    async def refresh(self):
        await self.fetch_products()
        await self.fetch_sales()

    async def add_product(self, product: Product) -> Product:
        try:
            created = await self._request("POST", "/products", json=product.to_api())
            await self.fetch_products()
        except StoreError:
            self.notify("error", "Failed to add product")
            raise
        self.notify("success", "Product added successfully")
        return Product.from_api(created)

    async def update_product(self, product: Product) -> Product:
        try:
            updated = await self._request("PUT", f"/products/{product.id}", json=product.to_api())
            await self.fetch_products()
        except StoreError:
            self.notify("error", "Failed to update product")
            raise
        self.notify("success", "Product updated successfully")
        return Product.from_api(updated)

    async def delete_product(self, product_id: str):
        try:
            await self._request("DELETE", f"/products/{product_id}")
            await self.fetch_products()
        except StoreError:
            self.notify("error", "Failed to delete product")
            raise
        self.notify("success", "Product deleted successfully")

    async def sell_product(self, product_id: str, quantity: int, sold_by: str) -> Optional[Sale]:
        product = self._check_sellable(product_id, quantity)
        if product is None:
            return None

        try:
            created = await self._request("POST", "/sales", json={
                "cashier_id": sold_by,
                "payment_method": "cash",
                "items": [{
                    "product_id": product_id,
                    "quantity": quantity,
                    "unit_price": product.price,
                }],
            })
            await self.refresh()
        except StoreError:
            self.notify("error", "Failed to process sale")
            return None

        self.notify("success", "Sale completed successfully")
        return Sale(
            id=created["id"],
            product_id=product_id,
            product_name=product.name,
            quantity_sold=quantity,
            total_amount=created.get("total_amount"),
            sale_timestamp=str(created.get("created_at")),
            sold_by=sold_by,
        )

    async def _change_stock(self, path: str, product_id: str, quantity: int, notes: Optional[str], label: str) -> Product:
        try:
            updated = await self._request("POST", path, json={
                "product_id": product_id,
                "quantity": quantity,
                "notes": notes,
            })
            await self.fetch_products()
        except StoreError:
            self.notify("error", f"Failed to {label} product")
            raise
        self.notify("success", f"Product {label}ed successfully")
        return Product.from_api(updated)

    async def restock_product(self, product_id: str, quantity: int, notes: Optional[str] = None) -> Optional[Product]:
        return await self._change_stock("/inventory/restock", product_id, quantity, notes, "restock")

    async def adjust_stock(self, product_id: str, quantity: int, notes: Optional[str] = None) -> Optional[Product]:
        return await self._change_stock("/inventory/adjust", product_id, quantity, notes, "adjust")

    async def close(self):
        await self.client.aclose()


async def select_store(
    base_url: Optional[str],
    notifier: Optional[Notifier] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> InventoryStore:
    """Pick the store once at startup.

    The REST API is used when its health check answers; otherwise the window
    runs on the in-memory sample catalogue.
    """
    if base_url:
        http = client or httpx.AsyncClient(base_url=base_url)
        try:
            response = await http.get("/health")
            if response.status_code == 200:
                store = RemoteInventoryStore(base_url, notifier=notifier, client=http)
                await store.refresh()
                logger.info("Using database at %s", base_url)
                return store
            logger.warning("Health check returned %d, using local store", response.status_code)
        except (httpx.HTTPError, StoreError) as e:
            logger.warning("Failed to connect to database (%s), using local store", e)
        if client is None:
            await http.aclose()
    return MemoryInventoryStore(notifier=notifier)
