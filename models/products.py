from core.database import Base
from sqlalchemy import (Column, Integer, String, Numeric, Boolean, Float)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin, UpdatedAtMixin

class Product(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "products"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #relationships
    cart_items = relationship("CartItem", back_populates="product")
    wishlist_entries = relationship("WishlistEntry", back_populates="product")

    name = Column(String, nullable=False)
    category = Column(String)
    price = Column(Numeric(10, 2), nullable=False)
    discount = Column(Integer, default=0, nullable=False)  # percent
    image_url = Column(String)
    in_stock = Column(Boolean, default=True, nullable=False)
    rating = Column(Float)
    sales_count = Column(Integer)
