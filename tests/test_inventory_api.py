from datetime import timedelta
from decimal import Decimal

import pytest

from app.config import settings
from app.models import InventoryLog
from app.services import restock
from app.utils.timezone import get_local_today

API = "/api/v1/inventory"


def _log_without_quantity(account_id, ingredient, valuation, reference, notes):
    return InventoryLog(
        user_id=account_id,
        ingredient_id=ingredient.id,
        transaction_type="restock",
        quantity=None,
        unit=ingredient.unit,
    )


def test_restock_endpoint_blends_cost(client, make_ingredient):
    rice = make_ingredient(stock="10", cost="20000")

    response = client.post(
        f"{API}/{rice.id}/restock",
        json={"quantity": "5", "new_cost_per_unit": "26000", "reference": "PN-07"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["warning"] is None
    assert Decimal(str(body["current_stock"])) == Decimal("15")
    assert Decimal(str(body["cost_per_unit"])) == Decimal("22000")
    assert body["last_purchase_date"] == get_local_today().isoformat()
    assert body["log_id"] is not None


@pytest.mark.parametrize("blank", ["", "   ", None])
def test_restock_with_blank_cost_keeps_price(client, make_ingredient, blank):
    rice = make_ingredient(stock="10", cost="20000")

    response = client.post(f"{API}/{rice.id}/restock", json={"quantity": "5", "new_cost_per_unit": blank})

    assert response.status_code == 200
    body = response.json()
    assert Decimal(str(body["current_stock"])) == Decimal("15")
    assert Decimal(str(body["cost_per_unit"])) == Decimal("20000")
    assert Decimal(str(body["lot_cost"])) == Decimal("20000")


def test_restock_rejects_non_numeric_cost(client, make_ingredient):
    rice = make_ingredient()

    response = client.post(f"{API}/{rice.id}/restock", json={"quantity": "5", "new_cost_per_unit": "cheap"})

    assert response.status_code == 422


def test_two_step_restock_reports_warning_when_log_fails(client, db, make_ingredient, monkeypatch):
    rice = make_ingredient(stock="10", cost="20000")
    monkeypatch.setattr(settings, "LEDGER_ATOMIC_RESTOCK", False)
    monkeypatch.setattr(restock, "_build_log", _log_without_quantity)

    response = client.post(f"{API}/{rice.id}/restock", json={"quantity": "5", "new_cost_per_unit": "26000"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["warning"]
    assert body["log_id"] is None
    assert Decimal(str(body["current_stock"])) == Decimal("15")
    assert Decimal(str(body["cost_per_unit"])) == Decimal("22000")
    assert db.query(InventoryLog).count() == 0


def test_atomic_restock_failure_returns_500(client, db, make_ingredient, monkeypatch):
    rice = make_ingredient(stock="10", cost="20000")
    monkeypatch.setattr(restock, "_build_log", _log_without_quantity)

    response = client.post(f"{API}/{rice.id}/restock", json={"quantity": "5", "new_cost_per_unit": "26000"})

    assert response.status_code == 500
    assert response.json()["code"] == "PERSISTENCE_ERROR"
    db.refresh(rice)
    assert rice.current_stock == Decimal("10")


def test_restock_rejects_non_positive_quantity(client, make_ingredient):
    rice = make_ingredient()

    response = client.post(f"{API}/{rice.id}/restock", json={"quantity": "0"})

    assert response.status_code == 400
    assert response.json()["field"] == "quantity"


def test_movements_endpoint(client, make_ingredient):
    rice = make_ingredient(stock="10", cost="20000")
    client.post(f"{API}/{rice.id}/restock", json={"quantity": "2"})

    movements = client.get(f"{API}/{rice.id}/movements").json()

    assert [m["movement_type"] for m in movements] == ["restock", "import"]


def test_status_filters(client, make_ingredient):
    today = get_local_today()
    make_ingredient(code="A", name="Empty", stock="0")
    make_ingredient(code="B", name="Low", stock="1", min_stock="2", last_purchase_date=today)
    make_ingredient(
        code="C", name="Stale", stock="50", last_purchase_date=today - timedelta(days=20),
        expiration_date=today + timedelta(days=2),
    )

    all_rows = client.get(API + "/status").json()
    low = client.get(API + "/status", params={"stock_status": "low_stock"}).json()
    slow = client.get(API + "/status", params={"slow_moving_only": "true"}).json()

    assert {r["code"]: r["stock_status"] for r in all_rows} == {
        "A": "out_of_stock",
        "B": "low_stock",
        "C": "sufficient",
    }
    assert [r["code"] for r in low] == ["B"]
    assert [r["code"] for r in slow] == ["C"]
    assert slow[0]["expiry_status"] == "expiring_soon"
    assert slow[0]["days_until_expiry"] == 2


def test_alerts_group_by_reason(client, make_ingredient):
    today = get_local_today()
    make_ingredient(code="A", name="Empty", stock="0", last_purchase_date=today)
    make_ingredient(code="B", name="Low", stock="1", min_stock="3", last_purchase_date=today)
    make_ingredient(
        code="C", name="Expired", stock="5", last_purchase_date=today,
        expiration_date=today - timedelta(days=1),
    )

    alerts = client.get(API + "/alerts").json()

    assert [r["code"] for r in alerts["out_of_stock"]] == ["A"]
    assert [r["code"] for r in alerts["low_stock"]] == ["B"]
    assert Decimal(str(alerts["low_stock"][0]["shortage"])) == Decimal("2")
    assert [r["code"] for r in alerts["expired"]] == ["C"]
    assert alerts["total_alerts"] == 3


def test_usage_projects_recent_orders(client, make_ingredient, make_menu_item, make_order):
    today = get_local_today()
    rice = make_ingredient(stock="10")
    dish = make_menu_item(links=[(rice, "0.2")])
    make_order([(dish, 3)], order_date=today)
    make_order([(dish, 5)], order_date=today - timedelta(days=30))

    usage = client.get(API + "/usage", params={"days": 3}).json()

    assert len(usage) == 1
    assert Decimal(str(usage[0]["total"])) == Decimal("0.6")
    assert len(usage[0]["daily"]) == 3
    assert usage[0]["daily"][-1]["date"] == today.isoformat()
