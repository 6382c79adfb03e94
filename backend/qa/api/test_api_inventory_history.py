"""
API tests - inventory history (ledger) endpoints
"""


def post_movement(client, **body):
    return client.post("/inventory-history", json=body)


class TestCreateMovement:
    def test_receive_updates_quantity(self, client, warehouse, item):
        w, i = warehouse(), item()
        r = post_movement(client, itemId=i["id"], toWarehouseId=w["id"], quantityChange=5, transactionType="INBOUND")

        assert r.status_code == 201, r.text
        body = r.json()
        assert body["quantityChange"] == 5
        assert body["transactionType"] == "INBOUND"
        assert body["toWarehouseName"] == "Main"
        assert body["itemSku"] == i["sku"]
        assert body["occurredAt"]

        q = client.get(f"/warehouse-item/{w['id']}/{i['id']}")
        assert q.status_code == 200
        assert q.json()["quantity"] == 5

    def test_capacity_exceeded_returns_400(self, client, warehouse, item):
        """Scenario A through HTTP: the 11th unit does not fit"""
        w, i = warehouse(capacity=100), item(cubic_feet=10)
        assert post_movement(client, itemId=i["id"], toWarehouseId=w["id"], quantityChange=10, transactionType="INBOUND").status_code == 201

        r = post_movement(client, itemId=i["id"], toWarehouseId=w["id"], quantityChange=1, transactionType="INBOUND")

        assert r.status_code == 400
        assert "exceed warehouse capacity" in r.json()["detail"]
        assert len(client.get("/inventory-history").json()) == 1

    def test_ship_below_zero_returns_400(self, client, warehouse, item):
        w, i = warehouse(), item(cubic_feet=1)
        post_movement(client, itemId=i["id"], toWarehouseId=w["id"], quantityChange=2, transactionType="INBOUND")

        r = post_movement(client, itemId=i["id"], fromWarehouseId=w["id"], quantityChange=4, transactionType="OUTBOUND")

        assert r.status_code == 400
        assert client.get(f"/warehouse-item/{w['id']}/{i['id']}").json()["quantity"] == 2

    def test_unknown_warehouse_returns_404(self, client, item):
        r = post_movement(client, itemId=item()["id"], toWarehouseId=999, quantityChange=1, transactionType="INBOUND")
        assert r.status_code == 404

    def test_missing_item_returns_400(self, client, warehouse):
        r = post_movement(client, toWarehouseId=warehouse()["id"], quantityChange=1, transactionType="INBOUND")
        assert r.status_code == 400

    def test_non_positive_quantity_returns_422(self, client, warehouse, item):
        r = post_movement(client, itemId=item()["id"], toWarehouseId=warehouse()["id"], quantityChange=0, transactionType="INBOUND")
        assert r.status_code == 422

    def test_wrong_shape_returns_422(self, client, warehouse, item):
        r = post_movement(client, itemId=item()["id"], toWarehouseId=warehouse()["id"], quantityChange=1, transactionType="OUTBOUND")
        assert r.status_code == 422

    def test_transfer(self, client, warehouse, item):
        a, b, i = warehouse("A", 1000), warehouse("B", 1000), item(cubic_feet=1)
        post_movement(client, itemId=i["id"], toWarehouseId=a["id"], quantityChange=10, transactionType="RECEIVE")

        r = post_movement(
            client, itemId=i["id"], fromWarehouseId=a["id"], toWarehouseId=b["id"],
            quantityChange=3, transactionType="TRANSFER"
        )

        assert r.status_code == 201
        assert client.get(f"/warehouse-item/{a['id']}/{i['id']}").json()["quantity"] == 7
        assert client.get(f"/warehouse-item/{b['id']}/{i['id']}").json()["quantity"] == 3


class TestUpdateAndDelete:
    def test_update_reapplies(self, client, warehouse, item):
        w, i = warehouse(capacity=1000), item(cubic_feet=1)
        created = post_movement(client, itemId=i["id"], toWarehouseId=w["id"], quantityChange=5, transactionType="INBOUND").json()

        r = client.put(f"/inventory-history/{created['id']}", json={
            "itemId": i["id"], "toWarehouseId": w["id"], "quantityChange": 2, "transactionType": "INBOUND",
        })

        assert r.status_code == 200
        assert r.json()["quantityChange"] == 2
        assert client.get(f"/warehouse-item/{w['id']}/{i['id']}").json()["quantity"] == 2

    def test_update_missing_returns_404(self, client, warehouse, item):
        r = client.put("/inventory-history/999", json={
            "itemId": item()["id"], "toWarehouseId": warehouse()["id"], "quantityChange": 2, "transactionType": "INBOUND",
        })
        assert r.status_code == 404

    def test_delete_reverses(self, client, warehouse, item):
        w, i = warehouse(), item(cubic_feet=1)
        created = post_movement(client, itemId=i["id"], toWarehouseId=w["id"], quantityChange=5, transactionType="INBOUND").json()

        r = client.delete(f"/inventory-history/{created['id']}")

        assert r.status_code == 204
        assert client.get(f"/inventory-history/{created['id']}").status_code == 404
        assert client.get(f"/warehouse-item/{w['id']}/{i['id']}").json()["quantity"] == 0


class TestQueries:
    def test_warehouse_history_with_range(self, client, warehouse, item):
        w, i = warehouse(), item(cubic_feet=1)
        for day in (1, 15, 28):
            post_movement(
                client, itemId=i["id"], toWarehouseId=w["id"], quantityChange=1,
                transactionType="INBOUND", occurredAt=f"2025-02-{day:02d}T10:00:00"
            )

        r = client.get(
            f"/inventory-history/warehouse/{w['id']}",
            params={"start": "2025-02-01T10:00:00", "end": "2025-02-15T10:00:00"},
        )

        assert r.status_code == 200
        assert [h["occurredAt"][:10] for h in r.json()] == ["2025-02-15", "2025-02-01"]

    def test_recent_activity(self, client, warehouse, item):
        w, i = warehouse(capacity=1000), item(cubic_feet=1)
        for _ in range(12):
            post_movement(client, itemId=i["id"], toWarehouseId=w["id"], quantityChange=1, transactionType="INBOUND")

        r = client.get("/inventory-history/recent")

        assert r.status_code == 200
        assert len(r.json()) == 10
