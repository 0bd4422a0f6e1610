from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import date

from app.database import get_db
from app.dependencies import get_account_context
from app.models import Order
from app.models.enums import ORDER_STATUS_LABELS, OrderStatus
from app.schemas.inventory import MovementResponse
from app.schemas.order import (
    OrderCreate,
    OrderResponse,
    OrderStatusUpdate
)
from app.services import orders as order_service
from app.services.consumption import consumption_for_order

router = APIRouter()


def order_to_dict(order: Order) -> dict:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "code": order.code,
        "customer_name": order.customer_name,
        "customer_phone": order.customer_phone,
        "delivery_address": order.delivery_address,
        "order_date": order.order_date,
        "expected_delivery_date": order.expected_delivery_date,
        "total_amount": order.total_amount,
        "status": order.status,
        "status_label": ORDER_STATUS_LABELS.get(OrderStatus(order.status)),
        "notes": order.notes,
        "created_at": order.created_at,
        "items": [
            {
                "id": item.id,
                "menu_item_id": item.menu_item_id,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "subtotal": item.subtotal,
                "menu_item_name": item.menu_item.name if item.menu_item else None,
            }
            for item in order.items
        ],
    }


@router.get("/", response_model=List[OrderResponse])
def get_all_orders(
    start_date: Optional[date] = Query(None, description="Filter from date"),
    end_date: Optional[date] = Query(None, description="Filter to date"),
    order_status: Optional[OrderStatus] = Query(None, alias="status", description="Filter by status"),
    search: Optional[str] = Query(None, description="Search by customer, phone or code"),
    limit: int = Query(100, le=1000, description="Limit results"),
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Get all orders"""

    orders = order_service.list_orders(
        db,
        account_id,
        start_date=start_date,
        end_date=end_date,
        status=order_status.value if order_status else None,
        search=search,
        limit=limit,
    )
    return [order_to_dict(o) for o in orders]


@router.get("/{order_id}", response_model=OrderResponse)
def get_order_by_id(
    order_id: UUID,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Get order by ID"""

    return order_to_dict(order_service.get_order(db, account_id, order_id))


@router.get("/{order_id}/consumption", response_model=List[MovementResponse])
def get_order_consumption(
    order_id: UUID,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Ingredients this order uses according to current recipes"""

    order = order_service.get_order(db, account_id, order_id)
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
        for m in consumption_for_order(db, account_id, order)
    ]


@router.post("/", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    data: OrderCreate,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Create new order; ingredient stock is not deducted"""

    return order_to_dict(order_service.create_order(db, account_id, data))


@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Change order status"""

    return order_to_dict(order_service.update_order_status(db, account_id, order_id, data.status))


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: UUID,
    account_id: UUID = Depends(get_account_context),
    db: Session = Depends(get_db),
):
    """Delete order with its items"""

    order_service.delete_order(db, account_id, order_id)
    return None
