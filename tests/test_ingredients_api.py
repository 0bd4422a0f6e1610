from decimal import Decimal
import uuid

from app.models import MenuItemIngredient

API = "/api/v1/ingredients"


def _payload(**overrides):
    payload = {
        "code": "THIT-01",
        "name": "Thịt heo",
        "category": "thit",
        "unit": "kg",
        "current_stock": "10",
        "min_stock": "2",
        "cost_per_unit": "120000",
        "supplier_info": "Chợ Bến Thành",
    }
    payload.update(overrides)
    return payload


def test_create_and_fetch_ingredient(client):
    response = client.post(API + "/", json=_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["code"] == "THIT-01"
    assert body["category_label"] == "Thịt"
    assert body["unit_label"] == "kg"
    assert Decimal(str(body["stock_value"])) == Decimal("1200000")

    fetched = client.get(f"{API}/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Thịt heo"


def test_list_filters_by_category_and_search(client):
    client.post(API + "/", json=_payload())
    client.post(API + "/", json=_payload(code="RAU-01", name="Cà rốt", category="rau_cu"))

    by_category = client.get(API + "/", params={"category": "rau_cu"}).json()
    by_search = client.get(API + "/", params={"search": "thit"}).json()

    assert [i["code"] for i in by_category] == ["RAU-01"]
    assert [i["code"] for i in by_search] == ["THIT-01"]


def test_duplicate_code_is_rejected(client):
    client.post(API + "/", json=_payload())

    response = client.post(API + "/", json=_payload(name="Another"))

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"
    assert body["field"] == "code"


def test_negative_stock_is_rejected(client):
    response = client.post(API + "/", json=_payload(current_stock="-1"))

    assert response.status_code == 400
    assert response.json()["field"] == "current_stock"


def test_unknown_category_is_rejected(client):
    response = client.post(API + "/", json=_payload(category="furniture"))

    assert response.status_code == 422


def test_update_overwrites_fields(client):
    created = client.post(API + "/", json=_payload()).json()

    response = client.put(f"{API}/{created['id']}", json={"current_stock": "3", "name": "Thịt ba chỉ"})

    assert response.status_code == 200
    body = response.json()
    assert Decimal(str(body["current_stock"])) == Decimal("3")
    assert Decimal(str(body["cost_per_unit"])) == Decimal("120000")
    assert body["name"] == "Thịt ba chỉ"


def test_empty_update_is_rejected(client):
    created = client.post(API + "/", json=_payload()).json()

    response = client.put(f"{API}/{created['id']}", json={})

    assert response.status_code == 400
    assert response.json()["message"] == "No fields to update"


def test_missing_ingredient_returns_404(client):
    response = client.get(f"{API}/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_delete_removes_recipe_links(client, db, make_ingredient, make_menu_item):
    pork = make_ingredient(code="THIT-01", name="Thịt heo")
    rice = make_ingredient(code="GAO-01", name="Gạo")
    dish = make_menu_item(links=[(pork, "0.2"), (rice, "0.3")])

    response = client.delete(f"{API}/{pork.id}")

    assert response.status_code == 204
    assert db.query(MenuItemIngredient).filter(MenuItemIngredient.ingredient_id == pork.id).count() == 0
    menu = client.get(f"/api/v1/menus/{dish.id}").json()
    assert [link["ingredient_id"] for link in menu["ingredients"]] == [str(rice.id)]


def test_categories_and_units(client):
    categories = client.get(API + "/categories").json()["categories"]
    units = client.get(API + "/units").json()["units"]

    assert {"code": "rau_cu", "label": "Rau Củ"} in categories
    assert {"code": "g", "label": "gram"} in units
