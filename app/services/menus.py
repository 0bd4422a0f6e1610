import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.exceptions import NotFoundError, PersistenceError, ValidationError
from app.models import Ingredient, MenuItem, MenuItemIngredient, WeeklyMenuEntry
from app.schemas.menu import MenuItemCreate, MenuItemUpdate, RecipeLinkCreate, WeeklyMenuEntryCreate
from app.services.valuation import to_decimal

logger = logging.getLogger(__name__)


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("menu %s failed", action, exc_info=True)
        raise PersistenceError(str(exc.orig) if getattr(exc, "orig", None) else str(exc)) from exc


def get_menu_item(db: Session, account_id: UUID, menu_item_id: UUID) -> MenuItem:
    item = (
        db.query(MenuItem)
        .options(selectinload(MenuItem.ingredient_links).selectinload(MenuItemIngredient.ingredient))
        .filter(MenuItem.id == menu_item_id, MenuItem.user_id == account_id)
        .first()
    )
    if item is None:
        raise NotFoundError("Menu item", menu_item_id)
    return item


def list_menu_items(
    db: Session,
    account_id: UUID,
    category: Optional[str] = None,
    available_only: bool = False,
    search: Optional[str] = None,
) -> List[MenuItem]:
    query = (
        db.query(MenuItem)
        .options(selectinload(MenuItem.ingredient_links).selectinload(MenuItemIngredient.ingredient))
        .filter(MenuItem.user_id == account_id)
    )
    if category:
        query = query.filter(MenuItem.category == category)
    if available_only:
        query = query.filter(MenuItem.is_available.is_(True))
    items = query.order_by(MenuItem.name.asc()).all()

    if search:
        keyword = search.lower()
        items = [
            i for i in items
            if keyword in i.name.lower() or keyword in (i.description or "").lower()
        ]
    return items


def recipe_cost(item: MenuItem) -> Decimal:
    """Cost of one portion at current weighted-average ingredient prices"""
    return sum(
        (
            Decimal(str(link.quantity_needed)) * Decimal(str(link.ingredient.cost_per_unit))
            for link in item.ingredient_links
        ),
        Decimal(0),
    )


def _build_links(db: Session, account_id: UUID, links: List[RecipeLinkCreate]) -> List[MenuItemIngredient]:
    seen = set()
    result = []
    for link in links:
        if link.ingredient_id in seen:
            raise ValidationError(f"Ingredient {link.ingredient_id} is listed twice", field="ingredients")
        seen.add(link.ingredient_id)

        quantity = to_decimal(link.quantity_needed, "quantity_needed")
        if quantity < 0:
            raise ValidationError("quantity_needed must not be negative", field="quantity_needed")

        ingredient = (
            db.query(Ingredient)
            .filter(Ingredient.id == link.ingredient_id, Ingredient.user_id == account_id)
            .first()
        )
        if ingredient is None:
            raise NotFoundError("Ingredient", link.ingredient_id)
        result.append(MenuItemIngredient(ingredient_id=ingredient.id, quantity_needed=quantity))
    return result


def _validate_price(value) -> Decimal:
    price = to_decimal(value, "price")
    if price < 0:
        raise ValidationError("price must not be negative", field="price")
    return price


def create_menu_item(db: Session, account_id: UUID, data: MenuItemCreate) -> MenuItem:
    if not data.name or not data.name.strip():
        raise ValidationError("name is required", field="name")

    item = MenuItem(
        user_id=account_id,
        code=data.code,
        name=data.name.strip(),
        description=data.description,
        price=_validate_price(data.price),
        category=data.category.value,
        is_available=data.is_available,
    )
    item.ingredient_links = _build_links(db, account_id, data.ingredients)
    db.add(item)
    _commit(db, "create")

    logger.info("menu item created", extra={"menu_item_id": str(item.id), "links": len(data.ingredients)})
    return get_menu_item(db, account_id, item.id)


def update_menu_item(db: Session, account_id: UUID, menu_item_id: UUID, data: MenuItemUpdate) -> MenuItem:
    item = get_menu_item(db, account_id, menu_item_id)
    changes = data.model_dump(exclude_unset=True, exclude={"ingredients"})

    for field, value in changes.items():
        if field == "name":
            if not value or not value.strip():
                raise ValidationError("name is required", field="name")
            value = value.strip()
        elif field == "price":
            value = _validate_price(value)
        elif field == "category":
            if value is None:
                raise ValidationError("category is required", field="category")
            value = value.value
        elif field == "is_available" and value is None:
            continue
        setattr(item, field, value)

    if data.ingredients is not None:
        new_links = _build_links(db, account_id, data.ingredients)
        item.ingredient_links.clear()
        db.flush()
        item.ingredient_links.extend(new_links)

    _commit(db, "update")
    logger.info("menu item updated", extra={"menu_item_id": str(menu_item_id)})
    return get_menu_item(db, account_id, menu_item_id)


def delete_menu_item(db: Session, account_id: UUID, menu_item_id: UUID) -> None:
    """Remove the item with its recipe links, order items and weekly entries"""
    item = get_menu_item(db, account_id, menu_item_id)
    order_items = len(item.order_items)
    db.delete(item)
    _commit(db, "delete")
    logger.info("menu item deleted", extra={"menu_item_id": str(menu_item_id), "order_items": order_items})


def week_start(day: date) -> date:
    """Monday of the week containing ``day``"""
    return day - timedelta(days=day.weekday())


def day_date(start: date, day_of_week: int) -> date:
    # 0 is Sunday, which closes a Monday-based week
    return start + timedelta(days=(day_of_week - 1) % 7)


def get_weekly_menu(db: Session, account_id: UUID, start: date) -> Dict:
    start = week_start(start)
    entries = (
        db.query(WeeklyMenuEntry)
        .options(selectinload(WeeklyMenuEntry.menu_item))
        .filter(WeeklyMenuEntry.user_id == account_id, WeeklyMenuEntry.week_start_date == start)
        .all()
    )

    days = []
    for day_of_week in (1, 2, 3, 4, 5, 6, 0):
        days.append({
            "day_of_week": day_of_week,
            "date": day_date(start, day_of_week),
            "menu_items": [
                {
                    "id": entry.menu_item.id,
                    "code": entry.menu_item.code,
                    "name": entry.menu_item.name,
                    "price": entry.menu_item.price,
                    "category": entry.menu_item.category,
                }
                for entry in entries
                if entry.day_of_week == day_of_week
            ],
        })
    return {"week_start_date": start, "days": days}


def replace_weekly_menu(
    db: Session,
    account_id: UUID,
    start: date,
    entries: List[WeeklyMenuEntryCreate],
) -> Dict:
    """Drop the week's existing plan and store ``entries`` in its place"""
    start = week_start(start)

    new_entries = []
    for entry in entries:
        if not 0 <= entry.day_of_week <= 6:
            raise ValidationError("day_of_week must be between 0 and 6", field="day_of_week")
        item = (
            db.query(MenuItem.id)
            .filter(MenuItem.id == entry.menu_item_id, MenuItem.user_id == account_id)
            .first()
        )
        if item is None:
            raise NotFoundError("Menu item", entry.menu_item_id)
        new_entries.append(
            WeeklyMenuEntry(
                user_id=account_id,
                menu_item_id=entry.menu_item_id,
                day_of_week=entry.day_of_week,
                week_start_date=start,
            )
        )

    db.query(WeeklyMenuEntry).filter(
        WeeklyMenuEntry.user_id == account_id,
        WeeklyMenuEntry.week_start_date == start,
    ).delete(synchronize_session="fetch")
    db.add_all(new_entries)
    _commit(db, "weekly plan")

    logger.info("weekly menu replaced", extra={"week_start": start.isoformat(), "entries": len(new_entries)})
    return get_weekly_menu(db, account_id, start)
