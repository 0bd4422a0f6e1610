from decimal import Decimal
import uuid

API = "/api/v1/orders"


def _order(menu_item, quantity=2, **overrides):
    payload = {
        "customer_name": "Trần Thị B",
        "customer_phone": "0912 345 678",
        "order_date": "2024-03-15",
        "items": [{"menu_item_id": str(menu_item.id), "quantity": quantity}],
    }
    payload.update(overrides)
    return payload


def test_create_order_uses_menu_price_and_sequential_codes(client, make_menu_item):
    dish = make_menu_item(price="45000")

    first = client.post(API + "/", json=_order(dish, quantity=2))
    second = client.post(API + "/", json=_order(dish, quantity=1))

    assert first.status_code == 201
    body = first.json()
    assert body["code"] == "DH-001"
    assert body["status"] == "pending"
    assert body["status_label"] == "Chờ Xử Lý"
    assert Decimal(str(body["total_amount"])) == Decimal("90000")
    assert body["items"][0]["menu_item_name"] == "Cơm gà"
    assert Decimal(str(body["items"][0]["unit_price"])) == Decimal("45000")
    assert second.json()["code"] == "DH-002"


def test_explicit_unit_price_overrides_menu_price(client, make_menu_item):
    dish = make_menu_item(price="45000")
    payload = _order(dish)
    payload["items"][0]["unit_price"] = "40000"

    body = client.post(API + "/", json=payload).json()

    assert Decimal(str(body["total_amount"])) == Decimal("80000")


def test_order_does_not_change_stock(client, db, make_ingredient, make_menu_item):
    rice = make_ingredient(stock="10")
    dish = make_menu_item(links=[(rice, "0.2")])

    client.post(API + "/", json=_order(dish, quantity=3))

    db.refresh(rice)
    assert rice.current_stock == Decimal("10")


def test_invalid_orders_are_rejected(client, make_menu_item):
    dish = make_menu_item()

    bad_phone = client.post(API + "/", json=_order(dish, customer_phone="call me"))
    no_items = client.post(API + "/", json=_order(dish, items=[]))
    zero_quantity = client.post(API + "/", json=_order(dish, quantity=0))
    unknown_item = client.post(API + "/", json={
        **_order(dish), "items": [{"menu_item_id": str(uuid.uuid4()), "quantity": 1}],
    })

    assert bad_phone.status_code == 400
    assert bad_phone.json()["field"] == "customer_phone"
    assert no_items.status_code == 400
    assert zero_quantity.status_code == 400
    assert unknown_item.status_code == 404


def test_status_update_and_filters(client, make_menu_item):
    dish = make_menu_item()
    created = client.post(API + "/", json=_order(dish)).json()
    client.post(API + "/", json=_order(dish, customer_name="Lê Văn C"))

    response = client.patch(f"{API}/{created['id']}/status", json={"status": "delivered"})

    assert response.status_code == 200
    assert response.json()["status_label"] == "Đã Giao"
    delivered = client.get(API + "/", params={"status": "delivered"}).json()
    assert [o["id"] for o in delivered] == [created["id"]]
    searched = client.get(API + "/", params={"search": "lê văn"}).json()
    assert [o["customer_name"] for o in searched] == ["Lê Văn C"]


def test_unknown_status_is_rejected(client, make_menu_item):
    dish = make_menu_item()
    created = client.post(API + "/", json=_order(dish)).json()

    response = client.patch(f"{API}/{created['id']}/status", json={"status": "lost"})

    assert response.status_code == 422


def test_order_consumption(client, make_ingredient, make_menu_item):
    rice = make_ingredient(stock="10")
    dish = make_menu_item(links=[(rice, "0.2")])
    created = client.post(API + "/", json=_order(dish, quantity=3)).json()

    movements = client.get(f"{API}/{created['id']}/consumption").json()

    assert len(movements) == 1
    assert movements[0]["movement_type"] == "export"
    assert Decimal(movements[0]["quantity"]) == Decimal("0.6")
    assert movements[0]["movement_date"] == "2024-03-15"
    assert movements[0]["reference"] == "DH-001"


def test_delete_order(client, make_menu_item):
    dish = make_menu_item()
    created = client.post(API + "/", json=_order(dish)).json()

    assert client.delete(f"{API}/{created['id']}").status_code == 204
    assert client.get(f"{API}/{created['id']}").status_code == 404
