from core.database import Base
from sqlalchemy import (Column, Integer, String, ForeignKey)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class CartItem(Base, CreatedAtMixin):
    __tablename__ = "cart_items"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(String(64), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    #relationships
    product = relationship("Product", back_populates="cart_items")

    quantity = Column(Integer, nullable=False, default=1)
