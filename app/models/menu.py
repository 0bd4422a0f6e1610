from sqlalchemy import Column, String, Boolean, ForeignKey, Integer, Numeric, Date, Uuid
from sqlalchemy.orm import relationship
import uuid

from app.database import Base
from app.models.base import TimestampMixin


class MenuItem(Base, TimestampMixin):
    __tablename__ = "menu_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    code = Column(String(50))
    name = Column(String(255), nullable=False)
    description = Column(String)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    category = Column(String(50), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    # Relationships
    ingredient_links = relationship(
        "MenuItemIngredient",
        back_populates="menu_item",
        cascade="all, delete-orphan",
    )
    order_items = relationship("OrderItem", back_populates="menu_item", cascade="all, delete")
    weekly_entries = relationship("WeeklyMenuEntry", back_populates="menu_item", cascade="all, delete-orphan")


class MenuItemIngredient(Base):
    __tablename__ = "menu_item_ingredients"

    menu_item_id = Column(Uuid, ForeignKey('menu_items.id', ondelete='CASCADE'), primary_key=True)
    ingredient_id = Column(Uuid, ForeignKey('ingredients.id', ondelete='CASCADE'), primary_key=True)
    quantity_needed = Column(Numeric(14, 4), nullable=False, default=0)

    # Relationships
    menu_item = relationship("MenuItem", back_populates="ingredient_links")
    ingredient = relationship("Ingredient", back_populates="recipe_links")


class WeeklyMenuEntry(Base):
    __tablename__ = "weekly_menu"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    menu_item_id = Column(Uuid, ForeignKey('menu_items.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday, 1 = Monday
    week_start_date = Column(Date, nullable=False, index=True)

    # Relationships
    menu_item = relationship("MenuItem", back_populates="weekly_entries")
