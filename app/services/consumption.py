"""
Ingredient consumption derived from orders.

Orders never touch ``current_stock``. Usage is reconstructed on read by
joining each order item to its menu item's recipe links:

    quantity = link.quantity_needed * order_item.quantity
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from app.models import Ingredient, MenuItemIngredient, Order, OrderItem
from app.models.enums import MovementType, OrderStatus
from app.utils.timezone import local_midnight


@dataclass
class Movement:
    ingredient_id: UUID
    movement_type: str
    quantity: Decimal
    unit: str
    occurred_at: datetime
    cost_per_unit: Optional[Decimal] = None
    reference: Optional[str] = None
    notes: Optional[str] = None

    @property
    def movement_date(self) -> date:
        return self.occurred_at.date()


def group_links(links: Iterable[MenuItemIngredient]) -> Dict[UUID, List[MenuItemIngredient]]:
    grouped: Dict[UUID, List[MenuItemIngredient]] = defaultdict(list)
    for link in links:
        grouped[link.menu_item_id].append(link)
    return grouped


def project_consumption(
    orders: Iterable[Order],
    links_by_menu_item: Dict[UUID, List[MenuItemIngredient]],
    ingredient_id: Optional[UUID] = None,
) -> List[Movement]:
    """Synthesize one export movement per (order item, recipe link) pair"""
    movements = []
    for order in orders:
        if order.status == OrderStatus.CANCELLED.value:
            continue
        for item in order.items:
            for link in links_by_menu_item.get(item.menu_item_id, []):
                if ingredient_id is not None and link.ingredient_id != ingredient_id:
                    continue
                movements.append(
                    Movement(
                        ingredient_id=link.ingredient_id,
                        movement_type=MovementType.EXPORT.value,
                        quantity=Decimal(str(link.quantity_needed)) * item.quantity,
                        unit=link.ingredient.unit,
                        occurred_at=local_midnight(order.order_date),
                        reference=order.code,
                        notes=f"Order {order.code}",
                    )
                )
    return movements


def load_orders(
    db: Session,
    account_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    menu_item_ids: Optional[Iterable[UUID]] = None,
) -> List[Order]:
    query = (
        db.query(Order)
        .options(selectinload(Order.items))
        .filter(Order.user_id == account_id)
        .filter(Order.status != OrderStatus.CANCELLED.value)
    )
    if start_date:
        query = query.filter(Order.order_date >= start_date)
    if end_date:
        query = query.filter(Order.order_date <= end_date)
    if menu_item_ids is not None:
        menu_item_ids = list(menu_item_ids)
        if not menu_item_ids:
            return []
        query = query.filter(Order.items.any(OrderItem.menu_item_id.in_(menu_item_ids)))
    return query.order_by(Order.order_date.asc(), Order.created_at.asc()).all()


def load_recipe_links(
    db: Session,
    account_id: UUID,
    ingredient_id: Optional[UUID] = None,
) -> List[MenuItemIngredient]:
    query = (
        db.query(MenuItemIngredient)
        .join(Ingredient, Ingredient.id == MenuItemIngredient.ingredient_id)
        .options(selectinload(MenuItemIngredient.ingredient))
        .filter(Ingredient.user_id == account_id)
    )
    if ingredient_id is not None:
        query = query.filter(MenuItemIngredient.ingredient_id == ingredient_id)
    return query.all()


def consumption_for_account(
    db: Session,
    account_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ingredient_id: Optional[UUID] = None,
) -> List[Movement]:
    links = load_recipe_links(db, account_id, ingredient_id)
    links_by_menu_item = group_links(links)
    orders = load_orders(db, account_id, start_date, end_date, menu_item_ids=links_by_menu_item.keys())
    return project_consumption(orders, links_by_menu_item, ingredient_id)


def consumption_for_order(db: Session, account_id: UUID, order: Order) -> List[Movement]:
    links = load_recipe_links(db, account_id)
    return project_consumption([order], group_links(links))


def daily_usage(
    movements: Iterable[Movement],
    start_date: date,
    end_date: date,
) -> Dict[UUID, List[dict]]:
    """Sum export quantities per ingredient per day, zero-filling empty days"""
    totals: Dict[UUID, Dict[date, Decimal]] = defaultdict(lambda: defaultdict(Decimal))
    for movement in movements:
        day = movement.movement_date
        if start_date <= day <= end_date:
            totals[movement.ingredient_id][day] += movement.quantity

    days = [start_date + timedelta(days=offset) for offset in range((end_date - start_date).days + 1)]
    return {
        ingredient_id: [{"date": day, "quantity": by_day.get(day, Decimal(0))} for day in days]
        for ingredient_id, by_day in totals.items()
    }
