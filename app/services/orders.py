import logging
import re
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.exceptions import NotFoundError, PersistenceError, ValidationError
from app.models import MenuItem, Order, OrderItem
from app.models.enums import OrderStatus
from app.schemas.order import OrderCreate
from app.services.valuation import to_decimal
from app.utils.timezone import get_local_today

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^[0-9+\-\s()]{0,15}$")
CODE_PREFIX = "DH"


def generate_order_code(db: Session, account_id: UUID) -> str:
    """Next sequential order code for the account, e.g. DH-007"""
    codes = db.query(Order.code).filter(Order.user_id == account_id).all()
    highest = 0
    for (code,) in codes:
        match = re.fullmatch(rf"{CODE_PREFIX}-(\d+)", code or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{CODE_PREFIX}-{highest + 1:03d}"


def _validate_order(data: OrderCreate) -> str:
    name = (data.customer_name or "").strip()
    if not name or len(name) > 100:
        raise ValidationError("Customer name is required (max 100 characters)", field="customer_name")
    if data.customer_phone and not PHONE_PATTERN.match(data.customer_phone):
        raise ValidationError("Invalid phone number", field="customer_phone")
    if data.delivery_address and len(data.delivery_address) > 500:
        raise ValidationError("Delivery address too long (max 500 characters)", field="delivery_address")
    if data.notes and len(data.notes) > 2000:
        raise ValidationError("Notes too long (max 2000 characters)", field="notes")
    if not data.items:
        raise ValidationError("At least one item is required", field="items")
    return name


def get_order(db: Session, account_id: UUID, order_id: UUID) -> Order:
    order = (
        db.query(Order)
        .options(selectinload(Order.items).selectinload(OrderItem.menu_item))
        .filter(Order.id == order_id, Order.user_id == account_id)
        .first()
    )
    if order is None:
        raise NotFoundError("Order", order_id)
    return order


def list_orders(
    db: Session,
    account_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    limit: Optional[int] = 100,
) -> List[Order]:
    query = (
        db.query(Order)
        .options(selectinload(Order.items).selectinload(OrderItem.menu_item))
        .filter(Order.user_id == account_id)
    )
    if start_date:
        query = query.filter(Order.order_date >= start_date)
    if end_date:
        query = query.filter(Order.order_date <= end_date)
    if status:
        query = query.filter(Order.status == status)
    orders = query.order_by(Order.order_date.desc(), Order.created_at.desc()).all()

    if search:
        keyword = search.lower()
        orders = [
            o for o in orders
            if keyword in o.customer_name.lower()
            or keyword in (o.customer_phone or "")
            or keyword in o.code.lower()
        ]
    return orders[:limit]


def create_order(db: Session, account_id: UUID, data: OrderCreate) -> Order:
    """
    Record an order and its items in one transaction.

    Ingredient stock is left untouched; usage is projected from recipes on read.
    """
    customer_name = _validate_order(data)

    items = []
    total_amount = Decimal(0)
    for item_data in data.items:
        if item_data.quantity <= 0:
            raise ValidationError("quantity must be greater than 0", field="quantity")

        menu_item = (
            db.query(MenuItem)
            .filter(MenuItem.id == item_data.menu_item_id, MenuItem.user_id == account_id)
            .first()
        )
        if menu_item is None:
            raise NotFoundError("Menu item", item_data.menu_item_id)

        if item_data.unit_price is None:
            unit_price = Decimal(str(menu_item.price))
        else:
            unit_price = to_decimal(item_data.unit_price, "unit_price")
            if unit_price < 0:
                raise ValidationError("unit_price must not be negative", field="unit_price")

        subtotal = unit_price * item_data.quantity
        total_amount += subtotal
        items.append(
            OrderItem(
                menu_item_id=menu_item.id,
                quantity=item_data.quantity,
                unit_price=unit_price,
                subtotal=subtotal,
            )
        )

    order = Order(
        user_id=account_id,
        code=generate_order_code(db, account_id),
        customer_name=customer_name,
        customer_phone=data.customer_phone,
        delivery_address=data.delivery_address,
        order_date=data.order_date or get_local_today(),
        expected_delivery_date=data.expected_delivery_date,
        total_amount=total_amount,
        status=data.status.value,
        notes=data.notes,
        items=items,
    )
    db.add(order)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("order create failed", exc_info=True)
        raise PersistenceError(str(exc.orig) if getattr(exc, "orig", None) else str(exc)) from exc

    logger.info(
        "order created",
        extra={"order_id": str(order.id), "code": order.code, "total": str(total_amount), "items": len(items)},
    )
    return get_order(db, account_id, order.id)


def update_order_status(db: Session, account_id: UUID, order_id: UUID, status: OrderStatus) -> Order:
    order = get_order(db, account_id, order_id)
    previous = order.status
    order.status = status.value
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(str(exc.orig) if getattr(exc, "orig", None) else str(exc)) from exc

    logger.info("order status changed", extra={"order_id": str(order_id), "from": previous, "to": status.value})
    return get_order(db, account_id, order_id)


def delete_order(db: Session, account_id: UUID, order_id: UUID) -> None:
    order = get_order(db, account_id, order_id)
    db.delete(order)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(str(exc.orig) if getattr(exc, "orig", None) else str(exc)) from exc
    logger.info("order deleted", extra={"order_id": str(order_id)})
