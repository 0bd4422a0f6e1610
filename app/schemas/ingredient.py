from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from app.models.enums import IngredientCategory, MeasureUnit


class IngredientBase(BaseModel):
    code: str
    name: str
    category: IngredientCategory
    unit: MeasureUnit
    current_stock: Decimal = Decimal(0)
    min_stock: Decimal = Decimal(0)
    cost_per_unit: Decimal = Decimal(0)
    last_purchase_date: Optional[date] = None
    manufacture_date: Optional[date] = None
    expiration_date: Optional[date] = None
    supplier_info: Optional[str] = None


class IngredientCreate(IngredientBase):
    pass


class IngredientUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[IngredientCategory] = None
    unit: Optional[MeasureUnit] = None
    current_stock: Optional[Decimal] = None
    min_stock: Optional[Decimal] = None
    cost_per_unit: Optional[Decimal] = None
    last_purchase_date: Optional[date] = None
    manufacture_date: Optional[date] = None
    expiration_date: Optional[date] = None
    supplier_info: Optional[str] = None


class IngredientResponse(IngredientBase):
    id: UUID
    user_id: UUID
    created_at: datetime
    category_label: Optional[str] = None
    unit_label: Optional[str] = None
    stock_value: Optional[Decimal] = None

    model_config = ConfigDict(from_attributes=True)
