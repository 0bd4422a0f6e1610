from sqlalchemy import Column, String, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship
import uuid

from app.database import Base
from app.models.base import TimestampMixin


class InventoryLog(Base, TimestampMixin):
    __tablename__ = "inventory_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    ingredient_id = Column(Uuid, ForeignKey('ingredients.id', ondelete='CASCADE'), nullable=False, index=True)
    transaction_type = Column(String(20), nullable=False)  # restock
    quantity = Column(Numeric(14, 4), nullable=False)
    unit = Column(String(20), nullable=False)
    cost_per_unit = Column(Numeric(14, 4))
    reference = Column(String(255))
    notes = Column(String)

    # Relationships
    ingredient = relationship("Ingredient", back_populates="logs")
