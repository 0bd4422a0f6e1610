import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, PersistenceError, ValidationError
from app.models import Ingredient
from app.schemas.ingredient import IngredientCreate, IngredientUpdate
from app.services.valuation import to_decimal

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = ("current_stock", "min_stock", "cost_per_unit")


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    return value.strip()


def _non_negative(value, field: str) -> Decimal:
    number = to_decimal(value, field)
    if number < 0:
        raise ValidationError(f"{field} must not be negative", field=field)
    return number


def _check_code_unique(db: Session, account_id: UUID, code: str, exclude_id: Optional[UUID] = None):
    query = db.query(Ingredient.id).filter(Ingredient.user_id == account_id, Ingredient.code == code)
    if exclude_id is not None:
        query = query.filter(Ingredient.id != exclude_id)
    if query.first():
        raise ValidationError(f"Ingredient code '{code}' already exists", field="code")


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("ingredient %s failed", action, exc_info=True)
        raise PersistenceError(str(exc.orig) if getattr(exc, "orig", None) else str(exc)) from exc


def get_ingredient(db: Session, account_id: UUID, ingredient_id: UUID) -> Ingredient:
    ingredient = (
        db.query(Ingredient)
        .filter(Ingredient.id == ingredient_id, Ingredient.user_id == account_id)
        .first()
    )
    if ingredient is None:
        raise NotFoundError("Ingredient", ingredient_id)
    return ingredient


def list_ingredients(
    db: Session,
    account_id: UUID,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Ingredient]:
    query = db.query(Ingredient).filter(Ingredient.user_id == account_id)

    if category:
        query = query.filter(Ingredient.category == category)

    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(
            or_(func.lower(Ingredient.name).like(pattern), func.lower(Ingredient.code).like(pattern))
        )

    return query.order_by(Ingredient.name.asc()).all()


def create_ingredient(db: Session, account_id: UUID, data: IngredientCreate) -> Ingredient:
    """Insert an ingredient; its stock and cost become the valuation baseline"""
    code = _require_text(data.code, "code")
    name = _require_text(data.name, "name")
    if data.category is None:
        raise ValidationError("category is required", field="category")
    if data.unit is None:
        raise ValidationError("unit is required", field="unit")

    numbers = {field: _non_negative(getattr(data, field), field) for field in NUMERIC_FIELDS}
    _check_code_unique(db, account_id, code)

    ingredient = Ingredient(
        user_id=account_id,
        code=code,
        name=name,
        category=data.category.value,
        unit=data.unit.value,
        last_purchase_date=data.last_purchase_date,
        manufacture_date=data.manufacture_date,
        expiration_date=data.expiration_date,
        supplier_info=data.supplier_info,
        **numbers,
    )
    db.add(ingredient)
    _commit(db, "create")
    db.refresh(ingredient)

    logger.info(
        "ingredient created",
        extra={"ingredient_id": str(ingredient.id), "code": code, "stock": str(numbers["current_stock"])},
    )
    return ingredient


def update_ingredient(
    db: Session,
    account_id: UUID,
    ingredient_id: UUID,
    data: IngredientUpdate,
) -> Ingredient:
    """
    Overwrite ingredient fields as given.

    Stock and cost are written verbatim; no averaging and no movement log entry.
    """
    ingredient = get_ingredient(db, account_id, ingredient_id)
    changes = data.model_dump(exclude_unset=True)

    if not changes:
        raise ValidationError("No fields to update")

    for field, value in changes.items():
        if field == "name":
            value = _require_text(value, "name")
        elif field in NUMERIC_FIELDS:
            value = _non_negative(value, field)
        elif field in ("category", "unit"):
            if value is None:
                raise ValidationError(f"{field} is required", field=field)
            value = value.value
        setattr(ingredient, field, value)

    _commit(db, "update")
    db.refresh(ingredient)

    logger.info("ingredient updated", extra={"ingredient_id": str(ingredient.id), "fields": ",".join(sorted(changes))})
    return ingredient


def delete_ingredient(db: Session, account_id: UUID, ingredient_id: UUID) -> None:
    """Delete the ingredient together with its recipe links and restock logs"""
    ingredient = get_ingredient(db, account_id, ingredient_id)
    links = len(ingredient.recipe_links)
    db.delete(ingredient)
    _commit(db, "delete")

    logger.info("ingredient deleted", extra={"ingredient_id": str(ingredient_id), "recipe_links": links})
