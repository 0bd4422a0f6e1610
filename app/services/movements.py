"""
Movement history for an ingredient, merged from three sources:

* ``import``  - the initial stock, reconstructed from the ingredient's creation
* ``restock`` - rows persisted in ``inventory_logs``
* ``export``  - order consumption projected through recipe links

Only restocks are stored. The initial quantity is what remains after taking
logged restocks out of the current stock, and its cost is recovered from the
value balance. Manual edits make both approximate.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models import Ingredient, InventoryLog
from app.models.enums import MovementType
from app.services.consumption import Movement, consumption_for_account
from app.services.ingredients import get_ingredient
from app.services.valuation import COST_QUANTUM
from app.utils.timezone import to_local_tz


def restock_movements(logs: List[InventoryLog]) -> List[Movement]:
    return [
        Movement(
            ingredient_id=log.ingredient_id,
            movement_type=log.transaction_type,
            quantity=Decimal(str(log.quantity)),
            unit=log.unit,
            occurred_at=to_local_tz(log.created_at),
            cost_per_unit=Decimal(str(log.cost_per_unit)) if log.cost_per_unit is not None else None,
            reference=log.reference,
            notes=log.notes,
        )
        for log in logs
    ]


def initial_movement(ingredient: Ingredient, logs: List[InventoryLog]) -> Optional[Movement]:
    restocked = sum((Decimal(str(log.quantity)) for log in logs), Decimal(0))
    quantity = Decimal(str(ingredient.current_stock)) - restocked
    if quantity <= 0:
        return None

    restocked_value = sum(
        (Decimal(str(log.quantity)) * Decimal(str(log.cost_per_unit or 0)) for log in logs),
        Decimal(0),
    )
    value = Decimal(str(ingredient.current_stock)) * Decimal(str(ingredient.cost_per_unit)) - restocked_value
    cost = (value / quantity).quantize(COST_QUANTUM, rounding=ROUND_HALF_UP) if value >= 0 else None

    return Movement(
        ingredient_id=ingredient.id,
        movement_type=MovementType.IMPORT.value,
        quantity=quantity,
        unit=ingredient.unit,
        occurred_at=to_local_tz(ingredient.created_at),
        cost_per_unit=cost,
        reference=ingredient.code,
        notes="Initial stock",
    )


def merge_movements(*sources: List[Movement]) -> List[Movement]:
    """Newest first; Python's sort is stable so ties keep source order"""
    merged = [movement for source in sources for movement in source]
    merged.sort(key=lambda movement: movement.occurred_at, reverse=True)
    return merged


def ingredient_movements(
    db: Session,
    account_id: UUID,
    ingredient_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[Movement]:
    ingredient = get_ingredient(db, account_id, ingredient_id)
    logs = list(ingredient.logs)

    initial = initial_movement(ingredient, logs)
    imports = [initial] if initial else []
    restocks = restock_movements(logs)
    exports = consumption_for_account(db, account_id, start_date, end_date, ingredient_id=ingredient.id)

    merged = merge_movements(imports, restocks, exports)
    if start_date:
        merged = [movement for movement in merged if movement.movement_date >= start_date]
    if end_date:
        merged = [movement for movement in merged if movement.movement_date <= end_date]
    return merged
