from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID
from decimal import Decimal

from app.models.enums import FinancialType


class FinancialRecordBase(BaseModel):
    type: FinancialType
    amount: Decimal
    category: Optional[str] = None
    description: Optional[str] = None
    record_date: date


class FinancialRecordCreate(FinancialRecordBase):
    pass


class FinancialRecordResponse(FinancialRecordBase):
    id: UUID
    user_id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FinancialEntry(BaseModel):
    id: str
    record_date: date
    type: FinancialType
    amount: Decimal
    category: str
    description: Optional[str] = None
    source: str  # manual, order
    status: Optional[str] = None


class TrendPoint(BaseModel):
    date: date
    revenue: Decimal
    expenses: Decimal
    profit: Decimal


class CategorySlice(BaseModel):
    category: str
    revenue: Decimal
    expense: Decimal


class FinancialSummary(BaseModel):
    start_date: date
    end_date: date
    revenue: Decimal
    expenses: Decimal
    profit: Decimal
    profit_margin: Decimal
    daily_burn: Decimal
    order_count: int
    average_order_value: Decimal
    trend: List[TrendPoint]
    categories: List[CategorySlice]
    records: List[FinancialEntry]
