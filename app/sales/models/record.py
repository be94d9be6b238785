"""
SQLAlchemy model for sale record persistence.
"""
from sqlalchemy import Column, Float, Integer, String, Text

from app.sales.database import Base


class SaleRecordModel(Base):
    __tablename__ = "records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    upload_id = Column(String, nullable=False, index=True)
    tour_name = Column(String)
    date = Column(String, index=True)  # YYYY-MM-DD
    time = Column(String)  # HH:MM
    order_id = Column(String, index=True)
    participant_name = Column(String)
    ticket_category = Column(String)
    ticket_price = Column(Float)
    quantity = Column(Integer)
    paid_amount = Column(Float)
    commission_percent = Column(Float)
    guide_amount = Column(Float)
    platform_amount = Column(Float)
    comment = Column(Text)
    created_at = Column(String, nullable=False)  # Moscow local time
