from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import date, timedelta
from decimal import Decimal

from app.database import get_db
from app.dependencies import get_account_context
from app.exceptions import PartialFailureError
from app.models import Ingredient
from app.schemas.inventory import (
    RestockCreate,
    RestockResponse,
    MovementResponse,
    IngredientStatusResponse,
    IngredientUsage
)
from app.services import classification
from app.services import ingredients as ingredient_service
from app.services.consumption import consumption_for_account, daily_usage
from app.services.movements import ingredient_movements
from app.services.restock import RestockResult, restock_ingredient
from app.services.valuation import inventory_value
from app.utils.timezone import get_local_today

router = APIRouter()


def _restock_response(result: RestockResult, warning: Optional[str] = None) -> dict:
    ingredient = result.ingredient
    return {
        "success": True,
        "message": "Ingredient restocked",
        "warning": warning,
        "ingredient_id": ingredient.id,
        "quantity_added": result.valuation.quantity_added,
        "lot_cost": result.valuation.lot_cost,
        "current_stock": ingredient.current_stock,
        "cost_per_unit": ingredient.cost_per_unit,
        "last_purchase_date": ingredient.last_purchase_date,
        "log_id": result.log.id if result.log else None,
    }


def _status_row(ingredient: Ingredient, today: date) -> dict:
    result = classification.classify(ingredient, today)
    return {
        "id": ingredient.id,
        "code": ingredient.code,
        "name": ingredient.name,
        "category": ingredient.category,
        "unit": ingredient.unit,
        "current_stock": ingredient.current_stock,
        "min_stock": ingredient.min_stock,
        "cost_per_unit": ingredient.cost_per_unit,
        "stock_value": inventory_value(ingredient.current_stock, ingredient.cost_per_unit),
        "stock_status": result.stock_status,
        "expiry_status": result.expiry.status,
        "days_until_expiry": result.expiry.days_until,
        "days_since_purchase": result.days_since_purchase,
        "is_slow_moving": result.is_slow_moving,
    }


@router.post("/{ingredient_id}/restock", response_model=RestockResponse)
def restock(
    ingredient_id: UUID,
    data: RestockCreate,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """
    Receive a lot into stock
    Unit cost becomes the weighted average of stock on hand and the new lot
    """

    try:
        result = restock_ingredient(
            db,
            account_id,
            ingredient_id,
            quantity=data.quantity,
            new_cost_per_unit=data.new_cost_per_unit,
            purchase_date=data.purchase_date,
            reference=data.reference,
            notes=data.notes,
        )
    except PartialFailureError as exc:
        return _restock_response(exc.result, warning=exc.message)

    return _restock_response(result)


@router.get("/{ingredient_id}/movements", response_model=List[MovementResponse])
def get_movements(
    ingredient_id: UUID,
    start_date: Optional[date] = Query(None, description="Filter from date"),
    end_date: Optional[date] = Query(None, description="Filter to date"),
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Initial stock, restocks and order consumption for one ingredient, newest first"""

    movements = ingredient_movements(db, account_id, ingredient_id, start_date, end_date)
    return [
        {
            "ingredient_id": m.ingredient_id,
            "movement_type": m.movement_type,
            "quantity": m.quantity,
            "unit": m.unit,
            "cost_per_unit": m.cost_per_unit,
            "reference": m.reference,
            "notes": m.notes,
            "occurred_at": m.occurred_at,
            "movement_date": m.movement_date,
        }
        for m in movements
    ]


@router.get("/status", response_model=List[IngredientStatusResponse])
def get_inventory_status(
    stock_status: Optional[str] = Query(None, description="out_of_stock, low_stock or sufficient"),
    expiry_status: Optional[str] = Query(None, description="expired, expiring_soon, ok or unknown"),
    slow_moving_only: bool = Query(False, description="Show only slow-moving items"),
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Stock, expiry and staleness status for every ingredient"""

    today = get_local_today()
    rows = [_status_row(i, today) for i in ingredient_service.list_ingredients(db, account_id)]

    if stock_status:
        rows = [r for r in rows if r["stock_status"] == stock_status]
    if expiry_status:
        rows = [r for r in rows if r["expiry_status"] == expiry_status]
    if slow_moving_only:
        rows = [r for r in rows if r["is_slow_moving"]]

    return rows


@router.get("/alerts")
def get_inventory_alerts(
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Ingredients needing attention, grouped by reason"""

    today = get_local_today()
    rows = [_status_row(i, today) for i in ingredient_service.list_ingredients(db, account_id)]

    out_of_stock = [r for r in rows if r["stock_status"] == classification.OUT_OF_STOCK]
    low_stock = [r for r in rows if r["stock_status"] == classification.LOW_STOCK]
    expired = [r for r in rows if r["expiry_status"] == classification.EXPIRED]
    expiring = sorted(
        (r for r in rows if r["expiry_status"] == classification.EXPIRING_SOON),
        key=lambda r: r["days_until_expiry"],
    )
    slow_moving = sorted(
        (r for r in rows if r["is_slow_moving"]),
        key=lambda r: r["days_since_purchase"],
        reverse=True,
    )

    return {
        "total_alerts": len(out_of_stock) + len(low_stock) + len(expired) + len(expiring) + len(slow_moving),
        "out_of_stock": out_of_stock,
        "low_stock": [
            {**r, "shortage": Decimal(str(r["min_stock"])) - Decimal(str(r["current_stock"]))}
            for r in low_stock
        ],
        "expired": expired,
        "expiring_soon": expiring,
        "slow_moving": slow_moving,
    }


@router.get("/usage", response_model=List[IngredientUsage])
def get_ingredient_usage(
    days: int = Query(7, ge=1, le=90, description="Number of days to analyze"),
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Daily ingredient usage projected from orders"""

    end_date = get_local_today()
    start_date = end_date - timedelta(days=days - 1)

    ingredients = {i.id: i for i in ingredient_service.list_ingredients(db, account_id)}
    movements = consumption_for_account(db, account_id, start_date, end_date)
    usage = daily_usage(movements, start_date, end_date)

    results = []
    for ingredient_id, points in usage.items():
        ingredient = ingredients[ingredient_id]
        results.append({
            "ingredient_id": ingredient_id,
            "ingredient_name": ingredient.name,
            "unit": ingredient.unit,
            "total": sum((p["quantity"] for p in points), Decimal(0)),
            "daily": points,
        })

    results.sort(key=lambda r: r["total"], reverse=True)
    return results
