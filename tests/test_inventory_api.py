class TestRestockAndAdjust:

    def test_restock(self, client, make_product):
        product = make_product(stock_quantity=8)

        response = client.post("/api/inventory/restock", json={
            "product_id": product["id"], "quantity": 25, "notes": "weekly delivery"
        })
        assert response.status_code == 200
        assert response.json()["stock_quantity"] == 33

        movements = client.get("/api/inventory/movements").json()
        assert len(movements) == 1
        assert movements[0]["movement_type"] == "restock"
        assert movements[0]["quantity"] == 25
        assert movements[0]["notes"] == "weekly delivery"

    def test_restock_requires_product_and_quantity(self, client, make_product):
        product = make_product()
        assert client.post("/api/inventory/restock", json={"quantity": 5}).status_code == 400
        assert client.post("/api/inventory/restock", json={"product_id": product["id"]}).status_code == 400
        assert client.post("/api/inventory/restock", json={"product_id": product["id"], "quantity": 0}).status_code == 400

    def test_restock_unknown_product(self, client):
        response = client.post("/api/inventory/restock", json={"product_id": "nope", "quantity": 3})
        assert response.status_code == 404

    def test_adjust_can_go_negative(self, client, make_product):
        product = make_product(stock_quantity=3)
        response = client.post("/api/inventory/adjust", json={
            "product_id": product["id"], "quantity": -5, "reason": "breakage"
        })
        assert response.status_code == 200
        assert response.json()["stock_quantity"] == -2

        movement = client.get("/api/inventory/movements").json()[0]
        assert movement["movement_type"] == "adjustment"
        assert movement["quantity"] == -5
        assert movement["notes"] == "breakage"

    def test_adjust_requires_quantity(self, client, make_product):
        product = make_product()
        assert client.post("/api/inventory/adjust", json={"product_id": product["id"]}).status_code == 400


def test_adjustment_into_low_stock_shows_in_alerts(client, make_product):
    product = make_product(name="Ice Cream Tub", stock_quantity=12, reorder_level=10)
    assert client.get("/api/inventory/alerts").json() == []

    client.post("/api/inventory/adjust", json={"product_id": product["id"], "quantity": -3})

    alerts = client.get("/api/inventory/alerts").json()
    assert len(alerts) == 1
    assert alerts[0]["id"] == product["id"]
    assert alerts[0]["stock_status"] == "low-stock"


def test_levels(client, make_product):
    make_product(name="B", stock_quantity=7, reorder_level=2)
    make_product(name="A", stock_quantity=1, reorder_level=2)
    levels = client.get("/api/inventory/levels").json()
    assert [(row["name"], row["stock_quantity"], row["stock_status"]) for row in levels] == [
        ("A", 1, "low-stock"),
        ("B", 7, "in-stock"),
    ]
