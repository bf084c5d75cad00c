from typing import Optional
from schemas.product_schemas import ProductData, ProductCardView, StarEntry
from services.base_view import BaseView
from services.data_client import DataClient, DataClientError
from services.notifications import NotificationSink
from utils.formatting import format_currency, calculate_discount_price, get_star_rating
from utils.logger import get_logger

logger = get_logger(__name__)


class ProductCard(BaseView):
    """
    A single product tile with wishlist toggle and add-to-cart.

    ``user`` is the decoded token payload (see utils.deps) or None for an
    anonymous visitor.
    """

    def __init__(self, client: DataClient, product: ProductData,
                 user: Optional[dict] = None,
                 notifier: Optional[NotificationSink] = None):
        super().__init__(notifier)
        self.client = client
        self.product = product
        self.user = user

        self.is_wishlisted = False
        self.is_loading_wishlist = False
        self.is_adding_to_cart = False

    @property
    def user_id(self) -> Optional[str]:
        if not self.user:
            return None
        return str(self.user.get("user_id"))

    @property
    def final_price(self):
        if self.product.discount > 0:
            return calculate_discount_price(self.product.price, self.product.discount)
        return self.product.price

    def mount(self) -> "ProductCard":
        """
        Load the wishlist flag for the current user. Failures are only
        logged: this is a background check.
        """
        if self.user_id is None:
            return self

        self._set_state(is_loading_wishlist=True)
        try:
            found = self.client.check_wishlist_membership(self.user_id, self.product.id)
        except DataClientError as e:
            logger.error(
                f"Error checking wishlist status: {e.message}",
                extra={"product_id": self.product.id, "user_id": self.user_id}
            )
        else:
            self._set_state(is_wishlisted=found)
        finally:
            self._set_state(is_loading_wishlist=False)
        return self

    def toggle_wishlist(self) -> bool:
        if self.user_id is None:
            self._notify("error", "Login Required", "Please log in to add items to your wishlist.")
            return False

        name = self.product.name
        self._set_state(is_loading_wishlist=True)
        try:
            if self.is_wishlisted:
                self.client.remove_wishlist_entry(self.user_id, self.product.id)
                self._set_state(is_wishlisted=False)
                self._notify("info", "Removed from Wishlist", f"{name} has been removed from your wishlist.")
            else:
                self.client.add_wishlist_entry(self.user_id, self.product.id)
                self._set_state(is_wishlisted=True)
                self._notify("success", "Added to Wishlist", f"{name} has been added to your wishlist.")
        except DataClientError as e:
            logger.error(
                f"Error updating wishlist: {e.message}",
                extra={"product_id": self.product.id, "user_id": self.user_id},
                exc_info=True
            )
            self._notify("error", "Error Updating Wishlist", e.message or "An unexpected error occurred.")
            return False
        finally:
            self._set_state(is_loading_wishlist=False)
        return True

    def add_to_cart(self) -> bool:
        """
        Insert a cart row with quantity 1. An existing row for this user and
        product is left alone (no quantity increment).
        """
        if self.user_id is None:
            self._notify("error", "Login Required", "Please log in to add items to your cart.")
            return False

        if not self.product.in_stock:
            self._notify("error", "Out of Stock", "This product is currently out of stock.")
            return False

        name = self.product.name
        self._set_state(is_adding_to_cart=True)
        try:
            if self.client.check_cart_membership(self.user_id, self.product.id):
                self._notify("info", "Already in Cart", f"{name} is already in your cart.")
                return False

            self.client.add_cart_item(self.user_id, self.product.id, quantity=1)
            self._notify("success", "Added to Cart", f"{name} has been added to your cart.")
            return True
        except DataClientError as e:
            logger.error(
                f"Error adding to cart: {e.message}",
                extra={"product_id": self.product.id, "user_id": self.user_id},
                exc_info=True
            )
            self._notify("error", "Error Adding to Cart", e.message or "An unexpected error occurred.")
            return False
        finally:
            self._set_state(is_adding_to_cart=False)

    def render(self) -> ProductCardView:
        product = self.product
        discounted = product.discount > 0

        return ProductCardView(
            id=product.id,
            name=product.name,
            category=product.category,
            image_url=product.image_url,
            link=f"/product/{product.id}",
            final_price=self.final_price,
            formatted_price=format_currency(self.final_price),
            formatted_original_price=format_currency(product.price) if discounted else None,
            discount_badge=f"{product.discount}% OFF" if discounted else None,
            out_of_stock=not product.in_stock,
            star_rating=[StarEntry(**star) for star in get_star_rating(product.rating)] if product.rating else [],
            rating_label=f"({product.rating:.1f})" if product.rating else None,
            sales_label=f"{product.sales_count} sold" if product.sales_count is not None else None,
            is_wishlisted=self.is_wishlisted,
            add_to_cart_label="Adding..." if self.is_adding_to_cart else "Add to Cart",
            add_to_cart_disabled=not product.in_stock or self.is_adding_to_cart,
        )
