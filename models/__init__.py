from models.orders import Order
from models.products import Product
from models.cart_items import CartItem
from models.wishlist import WishlistEntry

__all__ = ["Order", "Product", "CartItem", "WishlistEntry"]
