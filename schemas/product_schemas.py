from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict
from schemas.notification_schemas import ActionResponse


class ProductData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Decimal
    discount: int = 0
    image_url: Optional[str] = None
    category: Optional[str] = None
    in_stock: bool = True
    rating: Optional[float] = None
    sales_count: Optional[int] = None


class StarEntry(BaseModel):
    key: int
    type: str


class ProductCardView(BaseModel):
    id: int
    name: str
    category: Optional[str]
    image_url: Optional[str]
    link: str
    final_price: Decimal
    formatted_price: str
    formatted_original_price: Optional[str] = None
    discount_badge: Optional[str] = None
    out_of_stock: bool
    star_rating: list[StarEntry] = []
    rating_label: Optional[str] = None
    sales_label: Optional[str] = None
    is_wishlisted: bool
    add_to_cart_label: str
    add_to_cart_disabled: bool


class WishlistToggleResponse(ActionResponse):
    is_wishlisted: bool


class AddToCartResponse(ActionResponse):
    pass
