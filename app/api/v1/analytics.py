from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import date

from app.database import get_db
from app.dependencies import get_account_context
from app.services import classification
from app.services import ingredients as ingredient_service
from app.services import reports
from app.services.orders import list_orders
from app.utils.timezone import get_local_today

router = APIRouter()


@router.get("/dashboard-summary")
def get_dashboard_summary(
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """
    Get dashboard summary with key metrics:
    - This month's orders and revenue
    - Inventory value and stock alerts
    - Recent orders
    - Ingredients to restock
    """

    summary = reports.dashboard_summary(db, account_id, get_local_today())

    summary["recent_orders"] = [
        {
            "id": str(o.id),
            "code": o.code,
            "customer_name": o.customer_name,
            "order_date": o.order_date,
            "total_amount": float(o.total_amount),
            "status": o.status,
        }
        for o in summary["recent_orders"]
    ]
    summary["restock_needed"] = [
        {
            "id": str(i.id),
            "code": i.code,
            "name": i.name,
            "unit": i.unit,
            "current_stock": float(i.current_stock),
            "min_stock": float(i.min_stock),
            "stock_status": classification.stock_status(i),
        }
        for i in summary["restock_needed"]
    ]
    return summary


@router.get("/inventory-valuation")
def get_inventory_valuation(
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Total stock value with a breakdown by ingredient category"""

    ingredients = ingredient_service.list_ingredients(db, account_id)
    return {
        "summary": reports.inventory_summary(ingredients, get_local_today()),
        "by_category": reports.group_by_category(ingredients),
    }


@router.get("/suppliers")
def get_supplier_breakdown(
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Stock value grouped by supplier with a relationship tier"""

    ingredients = ingredient_service.list_ingredients(db, account_id)
    suppliers = reports.group_by_supplier(ingredients)
    return {"total_suppliers": len(suppliers), "suppliers": suppliers}


@router.get("/customers")
def get_customer_frequency(
    start_date: Optional[date] = Query(None, description="Filter from date"),
    end_date: Optional[date] = Query(None, description="Filter to date"),
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Order count and return frequency per customer"""

    orders = list_orders(db, account_id, start_date=start_date, end_date=end_date, limit=None)
    customers = reports.customer_return_frequency(orders)
    return {"total_customers": len(customers), "customers": customers}
