import pytest

from easymart.sync import (
    AlertStatus,
    InventoryCache,
    Product,
    ProductAdd,
    ProductDelete,
    ProductUpdate,
    Sale,
    SaleEvent,
    StockUpdate,
    dump_event,
    parse_event,
)


def product(product_id="p1", stock=20, minimum=10, **extra):
    return Product(
        id=product_id,
        name=extra.pop("name", f"Item {product_id}"),
        barcode=extra.pop("barcode", f"BC-{product_id}"),
        current_stock=stock,
        minimum_stock=minimum,
        price=extra.pop("price", 2.0),
        **extra,
    )


def sale(sale_id="s1", product_id="p1"):
    return Sale(id=sale_id, product_id=product_id, product_name="Item", quantity_sold=1,
                sale_timestamp="2026-10-19T10:00:00", sold_by="cashier1")


class TestApply:

    def test_product_add_is_idempotent(self):
        cache = InventoryCache([product("p1", name="Original")])
        changed = cache.apply(ProductAdd(product=product("p1", name="Duplicate")))
        assert changed is False
        assert len(cache.products) == 1
        assert cache.get_product("p1").name == "Original"

    def test_product_add_inserts_new(self):
        cache = InventoryCache([])
        assert cache.apply(ProductAdd(product=product("p2"))) is True
        assert cache.get_product("p2") is not None

    def test_sale_is_idempotent_and_prepended(self):
        cache = InventoryCache([product()], [sale("s0")])
        assert cache.apply(SaleEvent(sale=sale("s1"))) is True
        assert cache.apply(SaleEvent(sale=sale("s1"))) is False
        assert [s.id for s in cache.sales] == ["s1", "s0"]

    def test_stock_update_overwrites(self):
        cache = InventoryCache([product(stock=20)])
        cache.apply(StockUpdate(product_id="p1", new_stock=7, sold_quantity=13))
        cache.apply(StockUpdate(product_id="p1", new_stock=15))
        assert cache.get_product("p1").current_stock == 15

    def test_stock_update_for_unknown_product_is_ignored(self):
        cache = InventoryCache([product()])
        assert cache.apply(StockUpdate(product_id="ghost", new_stock=1)) is False

    def test_product_update_replaces_whole_record(self):
        cache = InventoryCache([product(stock=20, name="Old name")])
        cache.apply(ProductUpdate(product=product(stock=3, name="New name", price=9.5)))
        updated = cache.get_product("p1")
        assert updated.name == "New name"
        assert updated.price == 9.5
        assert updated.current_stock == 3

    def test_product_delete_removes_product_and_alerts(self):
        cache = InventoryCache([product(stock=0)])
        assert len(cache.alerts) == 1
        cache.apply(ProductDelete(product_id="p1"))
        assert cache.products == []
        assert cache.alerts == []

    def test_subscribers_see_changes_only(self):
        cache = InventoryCache([product()])
        seen = []
        unsubscribe = cache.subscribe(seen.append)

        cache.apply(ProductAdd(product=product("p1")))
        event = StockUpdate(product_id="p1", new_stock=4)
        cache.apply(event)
        assert seen == [event]

        unsubscribe()
        cache.apply(StockUpdate(product_id="p1", new_stock=5))
        assert seen == [event]

    def test_unknown_event_type_raises(self):
        cache = InventoryCache([])
        with pytest.raises(TypeError):
            cache.apply(object())


class TestAlerts:

    def test_low_stock_alert_after_stock_drop(self):
        cache = InventoryCache([product(stock=12, minimum=10)])
        assert cache.active_alerts() == []

        cache.apply(StockUpdate(product_id="p1", new_stock=9))

        alerts = cache.active_alerts()
        assert len(alerts) == 1
        assert alerts[0].product_id == "p1"
        assert alerts[0].alert_type.value == "low-stock"

    def test_out_of_stock_replaces_low_stock_alert(self):
        cache = InventoryCache([product(stock=3, minimum=10)])
        cache.apply(StockUpdate(product_id="p1", new_stock=0))
        assert [a.alert_type.value for a in cache.alerts] == ["out-of-stock"]

    def test_restocking_clears_alert(self):
        cache = InventoryCache([product(stock=3, minimum=10)])
        cache.apply(StockUpdate(product_id="p1", new_stock=30))
        assert cache.alerts == []

    def test_resolved_alert_stays_resolved_while_condition_holds(self):
        cache = InventoryCache([product(stock=5, minimum=10)])
        alert_id = cache.alerts[0].id
        assert cache.resolve_alert(alert_id) is True

        cache.apply(StockUpdate(product_id="p1", new_stock=4))
        cache.refresh_alerts()

        assert cache.active_alerts() == []
        assert cache.alerts[0].id == alert_id
        assert cache.alerts[0].status == AlertStatus.RESOLVED

    def test_relapse_after_recovery_raises_new_active_alert(self):
        cache = InventoryCache([product(stock=5, minimum=10)])
        cache.resolve_alert(cache.alerts[0].id)
        cache.apply(StockUpdate(product_id="p1", new_stock=50))
        cache.apply(StockUpdate(product_id="p1", new_stock=6))
        assert len(cache.active_alerts()) == 1

    def test_resolve_unknown_alert(self):
        assert InventoryCache([]).resolve_alert("nope") is False

    def test_stock_queries(self):
        cache = InventoryCache([product("a", stock=0), product("b", stock=4), product("c", stock=40)])
        assert [p.id for p in cache.out_of_stock_products()] == ["a"]
        assert [p.id for p in cache.low_stock_products()] == ["b"]
        assert cache.get_product_by_barcode("BC-c").id == "c"


class TestWireFormat:

    def test_events_use_camel_case_keys(self):
        payload = dump_event(StockUpdate(product_id="p1", new_stock=3, sold_quantity=2))
        assert '"productId":"p1"' in payload
        assert '"newStock":3' in payload
        assert '"soldQuantity":2' in payload
        assert '"type":"STOCK_UPDATE"' in payload

    def test_parse_dispatches_on_type(self):
        event = parse_event('{"type": "PRODUCT_DELETE", "productId": "p9"}')
        assert isinstance(event, ProductDelete)
        assert event.product_id == "p9"

        event = parse_event({"type": "PRODUCT_ADD", "product": {
            "id": "p1", "name": "Lentils", "category": "Lentils", "barcode": "LEN-1",
            "currentStock": 4, "minimumStock": 2, "price": 1.1,
        }})
        assert isinstance(event, ProductAdd)
        assert event.product.current_stock == 4

    def test_unknown_category_maps_to_other(self):
        assert product(category="Electronics").category.value == "Other"

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValueError):
            parse_event('{"type": "REFUND", "saleId": "s1"}')
