"""
Restock: merge a received lot into an ingredient and record it in the log.

The stock/cost update and the ``restock`` log row are written in one
transaction. With ``LEDGER_ATOMIC_RESTOCK`` disabled the stock update is
committed on its own first; a failing log append then raises
``PartialFailureError`` carrying the committed result.

Restocks are not idempotent: replaying one adds the quantity again.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import PartialFailureError, PersistenceError
from app.models import Ingredient, InventoryLog
from app.models.enums import MovementType
from app.services.ingredients import get_ingredient
from app.services.valuation import RestockValuation, value_restock
from app.utils.timezone import get_local_today

logger = logging.getLogger(__name__)


@dataclass
class RestockResult:
    ingredient: Ingredient
    valuation: RestockValuation
    log: Optional[InventoryLog]


def _build_log(account_id: UUID, ingredient: Ingredient, valuation: RestockValuation,
               reference: Optional[str], notes: Optional[str]) -> InventoryLog:
    return InventoryLog(
        user_id=account_id,
        ingredient_id=ingredient.id,
        transaction_type=MovementType.RESTOCK.value,
        quantity=valuation.quantity_added,
        unit=ingredient.unit,
        cost_per_unit=valuation.lot_cost,
        reference=reference,
        notes=notes,
    )


def _persistence_message(exc: SQLAlchemyError) -> str:
    return str(exc.orig) if getattr(exc, "orig", None) else str(exc)


def restock_ingredient(
    db: Session,
    account_id: UUID,
    ingredient_id: UUID,
    quantity,
    new_cost_per_unit=None,
    purchase_date: Optional[date] = None,
    reference: Optional[str] = None,
    notes: Optional[str] = None,
    atomic: Optional[bool] = None,
) -> RestockResult:
    if atomic is None:
        atomic = settings.LEDGER_ATOMIC_RESTOCK

    ingredient = get_ingredient(db, account_id, ingredient_id)
    valuation = value_restock(ingredient.current_stock, ingredient.cost_per_unit, quantity, new_cost_per_unit)

    ingredient.current_stock = valuation.new_stock
    ingredient.cost_per_unit = valuation.new_cost_per_unit
    ingredient.last_purchase_date = purchase_date or get_local_today()

    log = _build_log(account_id, ingredient, valuation, reference, notes)

    if atomic:
        db.add(log)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("restock failed", extra={"ingredient_id": str(ingredient_id)}, exc_info=True)
            raise PersistenceError(_persistence_message(exc)) from exc
    else:
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("restock stock update failed", extra={"ingredient_id": str(ingredient_id)}, exc_info=True)
            raise PersistenceError(_persistence_message(exc)) from exc

        db.add(log)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            db.refresh(ingredient)
            logger.warning(
                "restock log append failed; stock already updated",
                extra={"ingredient_id": str(ingredient_id), "quantity": str(valuation.quantity_added)},
            )
            raise PartialFailureError(
                "Stock was updated but the restock could not be recorded in the movement log",
                result=RestockResult(ingredient=ingredient, valuation=valuation, log=None),
            ) from exc

    db.refresh(ingredient)
    db.refresh(log)

    logger.info(
        "ingredient restocked",
        extra={
            "ingredient_id": str(ingredient.id),
            "quantity": str(valuation.quantity_added),
            "lot_cost": str(valuation.lot_cost),
            "average_cost": str(valuation.new_cost_per_unit),
            "stock": str(valuation.new_stock),
        },
    )
    return RestockResult(ingredient=ingredient, valuation=valuation, log=log)
