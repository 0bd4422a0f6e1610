from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID
from decimal import Decimal


class RestockCreate(BaseModel):
    quantity: Decimal
    # Blank or missing keeps the current price
    new_cost_per_unit: Optional[Decimal] = None
    purchase_date: Optional[date] = None
    reference: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("new_cost_per_unit", mode="before")
    @classmethod
    def blank_cost_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class RestockResponse(BaseModel):
    success: bool = True
    message: str
    warning: Optional[str] = None
    ingredient_id: UUID
    quantity_added: Decimal
    lot_cost: Decimal
    current_stock: Decimal
    cost_per_unit: Decimal
    last_purchase_date: Optional[date]
    log_id: Optional[UUID] = None


class MovementResponse(BaseModel):
    ingredient_id: UUID
    movement_type: str  # import, restock, export
    quantity: Decimal
    unit: str
    cost_per_unit: Optional[Decimal] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    occurred_at: datetime
    movement_date: date


class IngredientStatusResponse(BaseModel):
    id: UUID
    code: str
    name: str
    category: str
    unit: str
    current_stock: Decimal
    min_stock: Decimal
    cost_per_unit: Decimal
    stock_value: Decimal
    stock_status: str  # out_of_stock, low_stock, sufficient
    expiry_status: str  # expired, expiring_soon, ok, unknown
    days_until_expiry: Optional[int] = None
    days_since_purchase: int
    is_slow_moving: bool


class UsagePoint(BaseModel):
    date: date
    quantity: Decimal


class IngredientUsage(BaseModel):
    ingredient_id: UUID
    ingredient_name: str
    unit: str
    total: Decimal
    daily: List[UsagePoint]
