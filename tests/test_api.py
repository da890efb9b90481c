from table_orders import main as app_main
from table_orders.validation import MSG_CART_EMPTY, MSG_PHONE_INVALID, MSG_TABLE_REQUIRED

from test_snapshot import LEGACY_ORDER


def _submit(client, menu, table="5", phone="0712345678", lines=None):
    lines = lines or [{"menu_item_id": menu["Chips (Regular)"].id, "quantity": 2}]
    return client.post("/orders", json={"table_number": table, "phone_number": phone, "items": lines})


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_customer_staff_admin_flow(client, seeded_menu):
    response = _submit(client, seeded_menu)
    assert response.status_code == 201
    order = response.json()
    assert order["total"] == 300
    assert order["status"] == "pending"
    assert order["items"][0]["name"] == "Chips (Regular)"

    assert client.get(f"/orders/{order['id']}").json()["id"] == order["id"]

    served = client.post(f"/orders/{order['id']}/serve").json()
    assert served["status"] == "served"

    paid = client.post(f"/orders/{order['id']}/pay", json={"reference": "QWE123"}).json()
    assert paid["status"] == "paid"
    assert paid["payment_reference"] == "QWE123"
    assert paid["payment_method"] == "mobile-money"

    sales = client.get("/reports/sales").json()
    assert sales["total_sales"] == 300
    assert sales["completed_orders"] == 1
    assert client.get("/reports/status-counts").json() == {"pending": 0, "served": 0, "paid": 1}


def test_submission_merges_lines_and_snapshots_prices(client, seeded_menu):
    cola = seeded_menu["Coca-Cola"]
    response = _submit(
        client,
        seeded_menu,
        lines=[
            {"menu_item_id": cola.id, "quantity": 1},
            {"menu_item_id": cola.id, "quantity": 2, "selected_option": "Cold"},
            {"menu_item_id": cola.id, "quantity": 1, "selected_option": "Warm"},
        ],
    )
    order = response.json()
    assert [(line["selected_option"], line["quantity"]) for line in order["items"]] == [("Cold", 3), ("Warm", 1)]
    assert order["total"] == 320

    client.put(f"/menu-items/{cola.id}", json={"price": 120})
    assert client.get(f"/orders/{order['id']}").json()["total"] == 320


def test_submission_errors(client, seeded_menu):
    assert _submit(client, seeded_menu, table="").json()["detail"] == MSG_TABLE_REQUIRED
    assert _submit(client, seeded_menu, phone="0812345678").json()["detail"] == MSG_PHONE_INVALID
    response = client.post("/orders", json={"table_number": "5", "phone_number": "0712345678", "items": []})
    assert response.status_code == 400
    assert response.json()["detail"] == MSG_CART_EMPTY

    unknown = _submit(client, seeded_menu, lines=[{"menu_item_id": 9999, "quantity": 1}])
    assert unknown.status_code == 400
    assert unknown.json()["detail"] == "Invalid menu item"
    assert client.get("/orders").json() == []


def test_pay_without_body_uses_sentinel(client, seeded_menu):
    order = _submit(client, seeded_menu).json()
    paid = client.post(f"/orders/{order['id']}/pay").json()
    assert paid["payment_reference"] == "N/A"


def test_unknown_order_is_404(client):
    assert client.get("/orders/nope").status_code == 404
    assert client.post("/orders/nope/serve").status_code == 404
    assert client.post("/orders/nope/pay", json={"reference": "X"}).status_code == 404


def test_list_orders_by_status(client, seeded_menu):
    first = _submit(client, seeded_menu, table="1").json()
    _submit(client, seeded_menu, table="2")
    client.post(f"/orders/{first['id']}/serve")

    pending = client.get("/orders", params={"status": "pending"}).json()
    assert [o["table_number"] for o in pending] == ["2"]
    assert len(client.get("/orders").json()) == 2
    assert client.get("/orders", params={"status": "cancelled"}).status_code == 422


def test_table_report_groups_raw_table_numbers(client, seeded_menu):
    for table in ["3", "03", "3"]:
        _submit(client, seeded_menu, table=table)
    groups = client.get("/reports/tables").json()
    assert [(g["table_number"], g["order_count"], g["total"]) for g in groups] == [("3", 2, 600), ("03", 1, 300)]


def test_menu_admin(client, seeded_menu):
    assert len(client.get("/menu-items").json()) == 19
    assert len(client.get("/menu-items", params={"category": "fast-food"}).json()) == 6

    created = client.post("/menu-items", json={"name": "Samosa", "price": 60, "category": "fast-food"})
    assert created.status_code == 201
    item_id = created.json()["id"]

    bad_price = client.post("/menu-items", json={"name": "Free", "price": 0, "category": "drinks"})
    assert bad_price.json()["detail"] == "Please enter a valid price"
    bad_category = client.post("/menu-items", json={"name": "Cake", "price": 90, "category": "desserts"})
    assert bad_category.status_code == 400

    updated = client.put(f"/menu-items/{item_id}", json={"price": 70})
    assert updated.json()["price"] == 70

    assert client.delete(f"/menu-items/{item_id}").status_code == 204
    assert client.delete(f"/menu-items/{item_id}").status_code == 404

    categories = client.get("/meta/categories").json()["categories"]
    assert categories == [{"id": "fast-food", "name": "Fast Food"}, {"id": "drinks", "name": "Drinks"}]


def test_csv_export(client, seeded_menu):
    _submit(client, seeded_menu)
    response = client.get("/orders/export")
    assert response.headers["content-type"].startswith("text/csv")
    rows = response.text.strip().splitlines()
    assert rows[0].startswith("id,table_number")
    assert "Chips (Regular) x2" in rows[1]


def test_snapshot_import_and_export(client, seeded_menu):
    blob = {"orders": [LEGACY_ORDER], "menuItems": [{"id": 500, "name": "Mandazi", "price": 30, "category": "fast-food"}]}
    result = client.post("/admin/snapshot", json=blob).json()
    assert result == {"orders_imported": 1, "menu_items_imported": 1}

    again = client.post("/admin/snapshot", json=blob).json()
    assert again == {"orders_imported": 0, "menu_items_imported": 0}

    exported = client.get("/admin/snapshot").json()
    assert exported["orders"][0]["paymentReference"] == "QWE123"
    assert any(item["name"] == "Mandazi" for item in exported["menuItems"])
    assert client.get("/reports/sales").json()["total_sales"] == 380


def test_malformed_snapshot_imports_nothing(client):
    response = client.post("/admin/snapshot", content=b"{broken", headers={"content-type": "application/json"})
    assert response.status_code == 200
    assert response.json() == {"orders_imported": 0, "menu_items_imported": 0}


def test_access_key_guard(client, monkeypatch):
    monkeypatch.setattr(app_main.settings, "access_key", "secret")
    assert client.get("/orders").status_code == 401
    assert client.get("/orders", headers={"X-Access-Key": "secret"}).status_code == 200
    assert client.get("/health").status_code == 200


def test_snapshot_menu_import_assigns_ids_and_validates(client, seeded_menu):
    blob = {
        "menuItems": [
            {"id": 1, "name": "Mandazi", "price": 30, "category": "fast-food"},
            {"id": 2, "name": "Mandazi", "price": 35, "category": "fast-food"},
            {"id": 3, "name": "Free Soda", "price": 0, "category": "drinks"},
            {"id": 4, "name": "Cake", "price": 90, "category": "desserts"},
            {"id": 5, "name": "Burger", "price": 999, "category": "fast-food"},
        ]
    }
    result = client.post("/admin/snapshot", json=blob).json()
    assert result == {"orders_imported": 0, "menu_items_imported": 1}

    items = client.get("/menu-items").json()
    mandazi = [item for item in items if item["name"] == "Mandazi"]
    assert len(mandazi) == 1
    assert mandazi[0]["id"] == 20
    assert mandazi[0]["price"] == 30
    assert [item["price"] for item in items if item["name"] == "Burger"] == [250]
    assert not any(item["name"] in ("Free Soda", "Cake") for item in items)

    created = client.post("/menu-items", json={"name": "Samosa", "price": 60, "category": "fast-food"})
    assert created.status_code == 201
    assert created.json()["id"] == 21
