from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.database import get_db
from app.dependencies import get_account_context
from app.models import Ingredient
from app.models.enums import CATEGORY_LABELS, UNIT_LABELS, IngredientCategory, MeasureUnit
from app.schemas.ingredient import (
    IngredientCreate,
    IngredientUpdate,
    IngredientResponse
)
from app.services import ingredients as ingredient_service
from app.services.valuation import inventory_value

router = APIRouter()


def ingredient_to_dict(ingredient: Ingredient) -> dict:
    return {
        "id": ingredient.id,
        "user_id": ingredient.user_id,
        "code": ingredient.code,
        "name": ingredient.name,
        "category": ingredient.category,
        "category_label": CATEGORY_LABELS.get(IngredientCategory(ingredient.category)),
        "unit": ingredient.unit,
        "unit_label": UNIT_LABELS.get(MeasureUnit(ingredient.unit)),
        "current_stock": ingredient.current_stock,
        "min_stock": ingredient.min_stock,
        "cost_per_unit": ingredient.cost_per_unit,
        "stock_value": inventory_value(ingredient.current_stock, ingredient.cost_per_unit),
        "last_purchase_date": ingredient.last_purchase_date,
        "manufacture_date": ingredient.manufacture_date,
        "expiration_date": ingredient.expiration_date,
        "supplier_info": ingredient.supplier_info,
        "created_at": ingredient.created_at,
    }


@router.get("/", response_model=List[IngredientResponse])
def get_all_ingredients(
    category: Optional[IngredientCategory] = Query(None, description="Filter by category"),
    search: Optional[str] = Query(None, description="Search by name or code"),
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Get all ingredients with optional filters"""

    results = ingredient_service.list_ingredients(
        db, account_id, category=category.value if category else None, search=search
    )
    return [ingredient_to_dict(i) for i in results]


@router.get("/categories")
def get_ingredient_categories():
    """Get ingredient categories with display labels"""

    return {"categories": [{"code": c.value, "label": label} for c, label in CATEGORY_LABELS.items()]}


@router.get("/units")
def get_units():
    """Get measurement units with display labels"""

    return {"units": [{"code": u.value, "label": label} for u, label in UNIT_LABELS.items()]}


@router.get("/{ingredient_id}", response_model=IngredientResponse)
def get_ingredient_by_id(
    ingredient_id: UUID,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Get ingredient by ID"""

    return ingredient_to_dict(ingredient_service.get_ingredient(db, account_id, ingredient_id))


@router.post("/", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
def create_ingredient(
    data: IngredientCreate,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Create new ingredient; initial stock and cost become the valuation baseline"""

    return ingredient_to_dict(ingredient_service.create_ingredient(db, account_id, data))


@router.put("/{ingredient_id}", response_model=IngredientResponse)
def update_ingredient(
    ingredient_id: UUID,
    data: IngredientUpdate,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Overwrite ingredient fields (stock and cost are taken as-is)"""

    return ingredient_to_dict(ingredient_service.update_ingredient(db, account_id, ingredient_id, data))


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ingredient(
    ingredient_id: UUID,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Delete ingredient and the recipe links that use it"""

    ingredient_service.delete_ingredient(db, account_id, ingredient_id)
    return None
