from core.database import Base
from sqlalchemy import (Column, String, Numeric, DateTime, Text)
from .mixins import CreatedAtMixin, UpdatedAtMixin

class Order(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "orders"

    #pk
    id = Column(String(64), primary_key=True, index=True)

    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False, index=True)
    order_date = Column(DateTime(timezone=True), index=True)
    # Plain string so unknown values survive storage and get rejected on read
    status = Column(String(20), nullable=False, default="pending")
    total_amount = Column(Numeric(10, 2), nullable=False)

    # JSON documents, stored as text
    items = Column(Text)
    shipping_address = Column(Text)
