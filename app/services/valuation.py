"""
Weighted-average cost valuation for restocks.

Merging a lot of ``quantity`` units at ``lot_cost`` into existing stock gives::

    average = (stock * cost + quantity * lot_cost) / (stock + quantity)

so ``cost_per_unit`` always reflects everything on hand, not the last price paid.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from app.exceptions import ValidationError

COST_QUANTUM = Decimal("0.0001")


@dataclass(frozen=True)
class RestockValuation:
    quantity_added: Decimal
    lot_cost: Decimal
    new_stock: Decimal
    new_cost_per_unit: Decimal


def to_decimal(value, field: str) -> Decimal:
    """Parse a user-supplied number; reject non-finite values"""
    try:
        result = Decimal(str(value))
    except (ArithmeticError, ValueError, TypeError):
        raise ValidationError(f"{field} must be a number", field=field)
    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    return result


def weighted_average_cost(
    current_stock: Decimal,
    current_cost: Decimal,
    quantity: Decimal,
    lot_cost: Decimal,
) -> Decimal:
    total_quantity = current_stock + quantity
    if total_quantity <= 0:
        return lot_cost
    total_value = current_stock * current_cost + quantity * lot_cost
    return (total_value / total_quantity).quantize(COST_QUANTUM, rounding=ROUND_HALF_UP)


def value_restock(
    current_stock,
    current_cost,
    quantity,
    lot_cost: Optional[object] = None,
) -> RestockValuation:
    """
    Compute stock and unit cost after receiving a lot.

    ``lot_cost`` of None or a blank string keeps the current price.
    """
    stock = to_decimal(current_stock, "current_stock")
    cost = to_decimal(current_cost, "cost_per_unit")
    qty = to_decimal(quantity, "quantity")

    if qty <= 0:
        raise ValidationError("quantity must be greater than 0", field="quantity")

    if lot_cost is None or (isinstance(lot_cost, str) and not lot_cost.strip()):
        new_cost = cost
    else:
        new_cost = to_decimal(lot_cost, "cost_per_unit")
        if new_cost < 0:
            raise ValidationError("cost_per_unit must not be negative", field="cost_per_unit")

    return RestockValuation(
        quantity_added=qty,
        lot_cost=new_cost,
        new_stock=stock + qty,
        new_cost_per_unit=weighted_average_cost(stock, cost, qty, new_cost),
    )


def inventory_value(current_stock, cost_per_unit) -> Decimal:
    return Decimal(str(current_stock)) * Decimal(str(cost_per_unit))
