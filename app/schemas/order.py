from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID
from decimal import Decimal

from app.models.enums import OrderStatus


class OrderItemBase(BaseModel):
    menu_item_id: UUID
    quantity: int


class OrderItemCreate(OrderItemBase):
    # Defaults to the menu item's current price
    unit_price: Optional[Decimal] = None


class OrderItemResponse(OrderItemBase):
    id: UUID
    unit_price: Decimal
    subtotal: Decimal
    menu_item_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderBase(BaseModel):
    customer_name: str
    customer_phone: Optional[str] = None
    delivery_address: Optional[str] = None
    order_date: Optional[date] = None
    expected_delivery_date: Optional[date] = None
    notes: Optional[str] = None


class OrderCreate(OrderBase):
    status: OrderStatus = OrderStatus.PENDING
    items: List[OrderItemCreate]


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderResponse(OrderBase):
    id: UUID
    user_id: UUID
    code: str
    order_date: date
    total_amount: Decimal
    status: str
    status_label: Optional[str] = None
    created_at: datetime
    items: List[OrderItemResponse] = []

    model_config = ConfigDict(from_attributes=True)
