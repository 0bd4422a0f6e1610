"""Dashboard reductions over ingredients and orders."""

from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models import Ingredient, Order
from app.models.enums import CATEGORY_LABELS, IngredientCategory, OrderStatus
from app.services import classification
from app.services.valuation import inventory_value

NO_SUPPLIER = "Chưa có nhà cung cấp"


def total_inventory_value(ingredients: Iterable[Ingredient]) -> Decimal:
    return sum((inventory_value(i.current_stock, i.cost_per_unit) for i in ingredients), Decimal(0))


def inventory_summary(ingredients: List[Ingredient], today: date) -> dict:
    counts = {
        "low_stock_count": 0,
        "out_of_stock_count": 0,
        "expiring_soon_count": 0,
        "expired_count": 0,
        "slow_moving_count": 0,
    }
    for ingredient in ingredients:
        status = classification.stock_status(ingredient)
        if status == classification.OUT_OF_STOCK:
            counts["out_of_stock_count"] += 1
        elif status == classification.LOW_STOCK:
            counts["low_stock_count"] += 1

        expiry = classification.expiry_status(ingredient, today)
        if expiry.status == classification.EXPIRING_SOON:
            counts["expiring_soon_count"] += 1
        elif expiry.status == classification.EXPIRED:
            counts["expired_count"] += 1

        if classification.is_slow_moving(ingredient, today):
            counts["slow_moving_count"] += 1

    return {
        "total_items": len(ingredients),
        "total_value": total_inventory_value(ingredients),
        **counts,
    }


def _group_by(ingredients: Iterable[Ingredient], key_func) -> List[dict]:
    groups: Dict[str, dict] = OrderedDict()
    for ingredient in ingredients:
        key = key_func(ingredient)
        group = groups.setdefault(key, {"key": key, "item_count": 0, "total_value": Decimal(0), "ingredients": []})
        group["item_count"] += 1
        group["total_value"] += inventory_value(ingredient.current_stock, ingredient.cost_per_unit)
        group["ingredients"].append(ingredient.name)
    # stable sort keeps first-seen order among equal values
    return sorted(groups.values(), key=lambda g: g["total_value"], reverse=True)


def group_by_category(ingredients: Iterable[Ingredient]) -> List[dict]:
    groups = _group_by(ingredients, lambda i: i.category)
    for group in groups:
        try:
            group["label"] = CATEGORY_LABELS[IngredientCategory(group["key"])]
        except ValueError:
            group["label"] = group["key"]
    return groups


def supplier_tier(item_count: int, total_value: Decimal) -> str:
    if total_value >= 10_000_000:
        return "gold"
    if total_value >= 5_000_000 or item_count >= 5:
        return "main"
    if item_count >= 2:
        return "regular"
    return "partner"


def group_by_supplier(ingredients: Iterable[Ingredient]) -> List[dict]:
    groups = _group_by(ingredients, lambda i: (i.supplier_info or "").strip() or NO_SUPPLIER)
    for group in groups:
        group["tier"] = supplier_tier(group["item_count"], group["total_value"])
    return groups


def loyalty_tier(order_count: int) -> str:
    if order_count >= 10:
        return "vip"
    if order_count >= 5:
        return "loyal"
    if order_count >= 2:
        return "returning"
    return "new"


def customer_return_frequency(orders: Iterable[Order]) -> List[dict]:
    """
    Group orders by case-insensitive customer name.

    ``avg_days_between_orders`` is the rounded mean gap between consecutive
    order dates, or None for a single order.
    """
    customers: Dict[str, dict] = OrderedDict()
    for order in sorted(orders, key=lambda o: o.order_date):
        key = order.customer_name.strip().lower()
        entry = customers.setdefault(key, {"phone": order.customer_phone, "dates": []})
        entry["dates"].append(order.order_date)

    stats = []
    for name, entry in customers.items():
        dates = entry["dates"]
        avg_days: Optional[int] = None
        if len(dates) > 1:
            total_days = sum((dates[i] - dates[i - 1]).days for i in range(1, len(dates)))
            avg_days = round(total_days / (len(dates) - 1))
        stats.append({
            "customer_name": " ".join(word[:1].upper() + word[1:] for word in name.split(" ")),
            "customer_phone": entry["phone"],
            "order_count": len(dates),
            "last_order_date": dates[-1],
            "avg_days_between_orders": avg_days,
            "loyalty_tier": loyalty_tier(len(dates)),
        })

    stats.sort(key=lambda s: s["order_count"], reverse=True)
    return stats


def dashboard_summary(db: Session, account_id: UUID, today: date) -> dict:
    """Month-to-date orders and revenue alongside the inventory position"""
    first_day = today.replace(day=1)
    orders = (
        db.query(Order)
        .filter(Order.user_id == account_id, Order.order_date >= first_day)
        .all()
    )
    ingredients = db.query(Ingredient).filter(Ingredient.user_id == account_id).all()

    revenue = sum((Decimal(str(o.total_amount)) for o in orders), Decimal(0))
    stock_value = total_inventory_value(ingredients)
    summary = inventory_summary(ingredients, today)

    recent_orders = (
        db.query(Order)
        .filter(Order.user_id == account_id)
        .order_by(Order.order_date.desc(), Order.created_at.desc())
        .limit(5)
        .all()
    )
    restock_needed = [
        i for i in ingredients
        if classification.stock_status(i) != classification.SUFFICIENT
    ]

    return {
        "month_start": first_day,
        "total_orders": len(orders),
        "cancelled_orders": sum(1 for o in orders if o.status == OrderStatus.CANCELLED.value),
        "revenue": revenue,
        "inventory_value": stock_value,
        "profit": revenue - stock_value,
        "ingredients_count": summary["total_items"],
        "ingredients_to_restock": len(restock_needed),
        "inventory": summary,
        "recent_orders": recent_orders,
        "restock_needed": restock_needed,
    }
