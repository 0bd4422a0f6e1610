"""
Revenue and expense reporting.

Manual ``financial_records`` are combined with non-cancelled orders, each
order counting as revenue in the "orders" category.
"""

import logging
from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, PersistenceError, ValidationError
from app.models import FinancialRecord, Order
from app.models.enums import FinancialType, OrderStatus
from app.schemas.financial import FinancialRecordCreate
from app.services.valuation import to_decimal

logger = logging.getLogger(__name__)

ORDER_CATEGORY = "Đơn hàng"
OTHER_REVENUE = "Doanh thu khác"
OTHER_EXPENSE = "Chi phí khác"
TWO_PLACES = Decimal("0.01")


def create_record(db: Session, account_id: UUID, data: FinancialRecordCreate) -> FinancialRecord:
    amount = to_decimal(data.amount, "amount")
    if amount < 0:
        raise ValidationError("amount must not be negative", field="amount")

    record = FinancialRecord(
        user_id=account_id,
        type=data.type.value,
        amount=amount,
        category=data.category or None,
        description=data.description or None,
        record_date=data.record_date,
    )
    db.add(record)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(str(exc.orig) if getattr(exc, "orig", None) else str(exc)) from exc
    db.refresh(record)

    logger.info("financial record created", extra={"record_id": str(record.id), "type": record.type})
    return record


def list_records(
    db: Session,
    account_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[FinancialRecord]:
    query = db.query(FinancialRecord).filter(FinancialRecord.user_id == account_id)
    if start_date:
        query = query.filter(FinancialRecord.record_date >= start_date)
    if end_date:
        query = query.filter(FinancialRecord.record_date <= end_date)
    return query.order_by(FinancialRecord.record_date.desc()).all()


def delete_record(db: Session, account_id: UUID, record_id: UUID) -> None:
    record = (
        db.query(FinancialRecord)
        .filter(FinancialRecord.id == record_id, FinancialRecord.user_id == account_id)
        .first()
    )
    if record is None:
        raise NotFoundError("Financial record", record_id)
    db.delete(record)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(str(exc.orig) if getattr(exc, "orig", None) else str(exc)) from exc


def combined_entries(records: List[FinancialRecord], orders: List[Order]) -> List[dict]:
    entries = []
    for record in records:
        default_category = OTHER_REVENUE if record.type == FinancialType.REVENUE.value else OTHER_EXPENSE
        entries.append({
            "id": str(record.id),
            "record_date": record.record_date,
            "type": record.type,
            "amount": Decimal(str(record.amount)),
            "category": record.category or default_category,
            "description": record.description,
            "source": "manual",
        })
    for order in orders:
        entries.append({
            "id": f"order-{order.id}",
            "record_date": order.order_date,
            "type": FinancialType.REVENUE.value,
            "amount": Decimal(str(order.total_amount)),
            "category": ORDER_CATEGORY,
            "description": f"Khách {order.customer_name}" if order.customer_name else f"Đơn #{order.code}",
            "source": "order",
            "status": order.status,
        })

    # newest day first, larger amounts first within a day
    entries.sort(key=lambda e: (e["record_date"], e["amount"]), reverse=True)
    return entries


def trend(entries: List[dict], start_date: date, end_date: date) -> List[dict]:
    buckets = OrderedDict()
    day = start_date
    while day <= end_date:
        buckets[day] = {"revenue": Decimal(0), "expenses": Decimal(0)}
        day += timedelta(days=1)

    for entry in entries:
        bucket = buckets.get(entry["record_date"])
        if bucket is None:
            continue
        if entry["type"] == FinancialType.REVENUE.value:
            bucket["revenue"] += entry["amount"]
        else:
            bucket["expenses"] += entry["amount"]

    return [
        {"date": day, "revenue": b["revenue"], "expenses": b["expenses"], "profit": b["revenue"] - b["expenses"]}
        for day, b in buckets.items()
    ]


def categories(entries: List[dict]) -> List[dict]:
    slices = OrderedDict()
    for entry in entries:
        slice_ = slices.setdefault(
            entry["category"], {"category": entry["category"], "revenue": Decimal(0), "expense": Decimal(0)}
        )
        if entry["type"] == FinancialType.REVENUE.value:
            slice_["revenue"] += entry["amount"]
        else:
            slice_["expense"] += entry["amount"]
    return sorted(slices.values(), key=lambda s: s["revenue"] + s["expense"], reverse=True)


def financial_summary(db: Session, account_id: UUID, start_date: date, end_date: date) -> dict:
    if end_date < start_date:
        raise ValidationError("end_date must not be before start_date", field="end_date")

    records = list_records(db, account_id, start_date, end_date)
    orders = (
        db.query(Order)
        .filter(
            Order.user_id == account_id,
            Order.order_date >= start_date,
            Order.order_date <= end_date,
            Order.status != OrderStatus.CANCELLED.value,
        )
        .all()
    )
    entries = combined_entries(records, orders)

    revenue = sum((e["amount"] for e in entries if e["type"] == FinancialType.REVENUE.value), Decimal(0))
    expenses = sum((e["amount"] for e in entries if e["type"] == FinancialType.EXPENSE.value), Decimal(0))
    profit = revenue - expenses
    days_in_range = (end_date - start_date).days + 1
    order_revenue = sum((Decimal(str(o.total_amount)) for o in orders), Decimal(0))

    return {
        "start_date": start_date,
        "end_date": end_date,
        "revenue": revenue,
        "expenses": expenses,
        "profit": profit,
        "profit_margin": (profit / revenue * 100).quantize(TWO_PLACES, ROUND_HALF_UP) if revenue else Decimal(0),
        "daily_burn": (expenses / days_in_range).quantize(TWO_PLACES, ROUND_HALF_UP),
        "order_count": len(orders),
        "average_order_value": (order_revenue / len(orders)).quantize(TWO_PLACES, ROUND_HALF_UP) if orders else Decimal(0),
        "trend": trend(entries, start_date, end_date),
        "categories": categories(entries),
        "records": entries,
    }
