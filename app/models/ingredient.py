from sqlalchemy import Column, String, Date, Numeric, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from app.database import Base
from app.models.base import TimestampMixin


class Ingredient(Base, TimestampMixin):
    __tablename__ = "ingredients"
    __table_args__ = (
        UniqueConstraint("user_id", "code", name="uq_ingredients_user_code"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    code = Column(String(50), nullable=False)
    name = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False)
    unit = Column(String(20), nullable=False)
    current_stock = Column(Numeric(14, 4), nullable=False, default=0)
    min_stock = Column(Numeric(14, 4), nullable=False, default=0)
    cost_per_unit = Column(Numeric(14, 4), nullable=False, default=0)
    last_purchase_date = Column(Date)
    manufacture_date = Column(Date)
    expiration_date = Column(Date)
    supplier_info = Column(String)

    # Relationships
    logs = relationship(
        "InventoryLog",
        back_populates="ingredient",
        cascade="all, delete-orphan",
        order_by="InventoryLog.created_at",
    )
    recipe_links = relationship(
        "MenuItemIngredient",
        back_populates="ingredient",
        cascade="all, delete-orphan",
    )
