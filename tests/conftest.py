import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.dependencies import get_account_context
from app.main import app
from app.models import Ingredient, MenuItem, MenuItemIngredient, Order, OrderItem

ACCOUNT_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
OTHER_ACCOUNT_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_account_context] = lambda: ACCOUNT_ID
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_ingredient(db):
    def _make(code="ING-001", name="Gạo", stock="10", cost="20000", min_stock="2",
              account_id=ACCOUNT_ID, **fields):
        ingredient = Ingredient(
            user_id=account_id,
            code=code,
            name=name,
            category=fields.pop("category", "do_kho"),
            unit=fields.pop("unit", "kg"),
            current_stock=Decimal(stock),
            min_stock=Decimal(min_stock),
            cost_per_unit=Decimal(cost),
            **fields,
        )
        db.add(ingredient)
        db.commit()
        db.refresh(ingredient)
        return ingredient

    return _make


@pytest.fixture
def make_menu_item(db):
    def _make(name="Cơm gà", price="45000", links=(), account_id=ACCOUNT_ID, **fields):
        item = MenuItem(
            user_id=account_id,
            name=name,
            price=Decimal(price),
            category=fields.pop("category", "main"),
            **fields,
        )
        item.ingredient_links = [
            MenuItemIngredient(ingredient_id=ingredient.id, quantity_needed=Decimal(qty))
            for ingredient, qty in links
        ]
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make


@pytest.fixture
def make_order(db):
    counter = {"n": 0}

    def _make(lines, order_date=None, status="pending", customer_name="Nguyễn Văn A",
              customer_phone="0901234567", account_id=ACCOUNT_ID):
        counter["n"] += 1
        items = []
        total = Decimal(0)
        for menu_item, quantity in lines:
            subtotal = Decimal(str(menu_item.price)) * quantity
            total += subtotal
            items.append(
                OrderItem(
                    menu_item_id=menu_item.id,
                    quantity=quantity,
                    unit_price=menu_item.price,
                    subtotal=subtotal,
                )
            )
        order = Order(
            user_id=account_id,
            code=f"DH-{counter['n']:03d}",
            customer_name=customer_name,
            customer_phone=customer_phone,
            order_date=order_date or date(2024, 3, 15),
            total_amount=total,
            status=status,
            items=items,
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    return _make
