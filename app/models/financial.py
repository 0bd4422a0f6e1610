from sqlalchemy import Column, String, Date, Numeric, Uuid
import uuid

from app.database import Base
from app.models.base import TimestampMixin


class FinancialRecord(Base, TimestampMixin):
    __tablename__ = "financial_records"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    type = Column(String(20), nullable=False)  # revenue, expense
    amount = Column(Numeric(14, 2), nullable=False)
    category = Column(String(100))
    description = Column(String)
    record_date = Column(Date, nullable=False)
