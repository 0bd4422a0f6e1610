from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import date, timedelta

from app.database import get_db
from app.dependencies import get_account_context
from app.schemas.financial import (
    FinancialRecordCreate,
    FinancialRecordResponse,
    FinancialSummary
)
from app.services import financial as financial_service
from app.utils.timezone import get_local_today

router = APIRouter()


def _month_bounds(today: date):
    first_day = today.replace(day=1)
    next_month = (first_day + timedelta(days=32)).replace(day=1)
    return first_day, next_month - timedelta(days=1)


@router.get("/records", response_model=List[FinancialRecordResponse])
def get_financial_records(
    start_date: Optional[date] = Query(None, description="Filter from date"),
    end_date: Optional[date] = Query(None, description="Filter to date"),
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Get manual revenue and expense records"""

    return financial_service.list_records(db, account_id, start_date, end_date)


@router.post("/records", response_model=FinancialRecordResponse, status_code=status.HTTP_201_CREATED)
def create_financial_record(
    data: FinancialRecordCreate,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Record a manual revenue or expense"""

    return financial_service.create_record(db, account_id, data)


@router.delete("/records/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_financial_record(
    record_id: UUID,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Delete a manual record"""

    financial_service.delete_record(db, account_id, record_id)
    return None


@router.get("/summary", response_model=FinancialSummary)
def get_financial_summary(
    start_date: Optional[date] = Query(None, description="Defaults to the first day of this month"),
    end_date: Optional[date] = Query(None, description="Defaults to the last day of this month"),
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """
    Revenue, expenses and profit for a date range
    Non-cancelled orders count as revenue alongside manual records
    """

    month_start, month_end = _month_bounds(get_local_today())
    return financial_service.financial_summary(
        db,
        account_id,
        start_date or month_start,
        end_date or month_end,
    )
