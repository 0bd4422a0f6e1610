from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import date
from decimal import Decimal

from app.database import get_db
from app.dependencies import get_account_context
from app.models import MenuItem
from app.models.enums import MENU_CATEGORY_LABELS, MenuCategory
from app.schemas.menu import (
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemResponse,
    WeeklyMenuPlan,
    WeeklyMenuResponse
)
from app.services import menus as menu_service

router = APIRouter()


def menu_item_to_dict(item: MenuItem) -> dict:
    cost = menu_service.recipe_cost(item)
    price = Decimal(str(item.price))
    return {
        "id": item.id,
        "user_id": item.user_id,
        "code": item.code,
        "name": item.name,
        "description": item.description,
        "price": item.price,
        "category": item.category,
        "category_label": MENU_CATEGORY_LABELS.get(MenuCategory(item.category)),
        "is_available": item.is_available,
        "created_at": item.created_at,
        "ingredients": [
            {
                "ingredient_id": link.ingredient_id,
                "quantity_needed": link.quantity_needed,
                "ingredient_name": link.ingredient.name,
                "unit": link.ingredient.unit,
                "current_stock": link.ingredient.current_stock,
                "min_stock": link.ingredient.min_stock,
                "line_cost": Decimal(str(link.quantity_needed)) * Decimal(str(link.ingredient.cost_per_unit)),
            }
            for link in item.ingredient_links
        ],
        "recipe_cost": cost,
        "profit_margin": ((price - cost) / price * 100).quantize(Decimal("0.01")) if price > 0 else None,
    }


@router.get("/", response_model=List[MenuItemResponse])
def get_all_menu_items(
    category: Optional[MenuCategory] = Query(None, description="Filter by category"),
    available_only: bool = Query(False, description="Show only available items"),
    search: Optional[str] = Query(None, description="Search by name or description"),
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Get all menu items with their recipes"""

    items = menu_service.list_menu_items(
        db,
        account_id,
        category=category.value if category else None,
        available_only=available_only,
        search=search,
    )
    return [menu_item_to_dict(i) for i in items]


@router.get("/categories")
def get_menu_categories():
    """Get menu categories with display labels"""

    return {"categories": [{"code": c.value, "label": label} for c, label in MENU_CATEGORY_LABELS.items()]}


@router.get("/weekly/{week_start}", response_model=WeeklyMenuResponse)
def get_weekly_menu(
    week_start: date,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Menu plan for the week containing the given date"""

    return menu_service.get_weekly_menu(db, account_id, week_start)


@router.put("/weekly/{week_start}", response_model=WeeklyMenuResponse)
def replace_weekly_menu(
    week_start: date,
    data: WeeklyMenuPlan,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Replace the menu plan for the week containing the given date"""

    return menu_service.replace_weekly_menu(db, account_id, week_start, data.entries)


@router.get("/{menu_item_id}", response_model=MenuItemResponse)
def get_menu_item_by_id(
    menu_item_id: UUID,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Get menu item by ID with recipe cost"""

    return menu_item_to_dict(menu_service.get_menu_item(db, account_id, menu_item_id))


@router.post("/", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    data: MenuItemCreate,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Create menu item with optional recipe links"""

    return menu_item_to_dict(menu_service.create_menu_item(db, account_id, data))


@router.put("/{menu_item_id}", response_model=MenuItemResponse)
def update_menu_item(
    menu_item_id: UUID,
    data: MenuItemUpdate,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Update menu item; a given ingredient list replaces the recipe"""

    return menu_item_to_dict(menu_service.update_menu_item(db, account_id, menu_item_id, data))


@router.delete("/{menu_item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    menu_item_id: UUID,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Delete menu item with its recipe links, order lines and weekly plan entries"""

    menu_service.delete_menu_item(db, account_id, menu_item_id)
    return None
