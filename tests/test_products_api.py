from datetime import timedelta

from easymart.models import InventoryMovement, MovementType, Product, Sale


class TestProductCRUD:

    def test_create_and_fetch_round_trip(self, client):
        response = client.post("/api/products", json={
            "name": "Basmati Rice 5kg",
            "sku": "RICE-BAS-5",
            "category": "Rice",
            "price": 12.5,
            "stock_quantity": 40,
            "reorder_level": 10,
        })
        assert response.status_code == 201
        created = response.json()
        assert created["id"]

        fetched = client.get(f"/api/products/{created['id']}").json()
        assert fetched["name"] == "Basmati Rice 5kg"
        assert fetched["sku"] == "RICE-BAS-5"
        assert fetched["price"] == 12.5
        assert fetched["stock_quantity"] == 40

    def test_defaults_applied(self, client):
        response = client.post("/api/products", json={"name": "Tea", "sku": "TEA-1", "price": 3})
        product = response.json()
        assert product["stock_quantity"] == 0
        assert product["reorder_level"] == 10

    def test_missing_required_fields(self, client):
        response = client.post("/api/products", json={"name": "No SKU", "price": 1.0})
        assert response.status_code == 400
        assert "sku" in response.json()["detail"]

        response = client.post("/api/products", json={"sku": "NO-PRICE", "name": "No price"})
        assert response.status_code == 400
        assert "price" in response.json()["detail"]

    def test_duplicate_sku_is_a_store_error(self, client, make_product):
        make_product(sku="DUP-1")
        response = client.post("/api/products", json={"name": "Again", "sku": "DUP-1", "price": 1})
        assert response.status_code == 500
        assert response.json()["detail"].startswith("Database error")

    def test_list_is_sorted_by_name(self, client, make_product):
        make_product(name="Zucchini")
        make_product(name="Apples")
        names = [p["name"] for p in client.get("/api/products").json()]
        assert names == ["Apples", "Zucchini"]

    def test_unknown_product_is_404(self, client):
        assert client.get("/api/products/missing").status_code == 404
        assert client.put("/api/products/missing", json={"name": "x"}).status_code == 404
        assert client.delete("/api/products/missing").status_code == 404

    def test_update_keeps_unspecified_fields(self, client, make_product):
        product = make_product(name="Milk 1L", price=1.2, stock_quantity=30)
        response = client.put(f"/api/products/{product['id']}", json={"price": 1.5})
        assert response.status_code == 200
        updated = response.json()
        assert updated["price"] == 1.5
        assert updated["name"] == "Milk 1L"
        assert updated["stock_quantity"] == 30

    def test_delete(self, client, make_product):
        product = make_product()
        response = client.delete(f"/api/products/{product['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully", "id": product["id"]}
        assert client.get(f"/api/products/{product['id']}").status_code == 404


def test_low_stock_listing(client, make_product):
    make_product(name="Plenty", stock_quantity=50, reorder_level=5)
    make_product(name="Low", stock_quantity=4, reorder_level=5)
    make_product(name="Empty", stock_quantity=0, reorder_level=5)

    low = client.get("/api/products/inventory/low-stock").json()
    assert [p["name"] for p in low] == ["Empty", "Low"]
    assert [p["stock_status"] for p in low] == ["out-of-stock", "low-stock"]


def test_row_timestamps_are_timezone_aware():
    product = Product(name="Rice 5kg", sku="RICE-5", price=12.0)
    movement = InventoryMovement(product_id=product.id, movement_type=MovementType.RESTOCK, quantity=1)
    sale = Sale(total_amount=12.0)

    for stamp in (product.created_at, product.updated_at, movement.created_at, sale.created_at):
        assert stamp.tzinfo is not None
        assert stamp.utcoffset() == timedelta(0)
