from decimal import Decimal
from models.cart_items import CartItem
from models.wishlist import WishlistEntry
from schemas.notification_schemas import ToastVariant
from schemas.product_schemas import ProductData
from services.product_card import ProductCard


def card_for(client, product, user=None):
    return ProductCard(client, ProductData.model_validate(product), user=user)


def test_mount_without_user_skips_wishlist_check(recording_client, product):
    card = card_for(recording_client, product).mount()

    assert card.is_wishlisted is False
    assert recording_client.calls == []


def test_mount_reads_wishlist_flag(recording_client, product, customer):
    recording_client.add_wishlist_entry("user-1", product.id)
    recording_client.calls.clear()

    card = card_for(recording_client, product, customer).mount()

    assert card.is_wishlisted is True
    assert recording_client.calls == ["check_wishlist_membership"]


def test_mount_failure_is_logged_not_toasted(failing_client, product, customer):
    client = failing_client("check_wishlist_membership")
    card = card_for(client, product, customer).mount()

    assert card.is_wishlisted is False
    assert card.is_loading_wishlist is False
    assert card.notifier.toasts == []


def test_toggle_requires_login(recording_client, product):
    card = card_for(recording_client, product)

    assert card.toggle_wishlist() is False
    assert recording_client.calls == []
    toast = card.notifier.toasts[0]
    assert toast.title == "Login Required"
    assert toast.description == "Please log in to add items to your wishlist."


def test_toggle_twice_restores_membership_with_two_mutations(recording_client, session, product, customer):
    card = card_for(recording_client, product, customer).mount()
    original = card.is_wishlisted

    assert card.toggle_wishlist() is True
    assert card.is_wishlisted is not original
    assert card.toggle_wishlist() is True

    assert card.is_wishlisted is original
    assert recording_client.mutations == ["add_wishlist_entry", "remove_wishlist_entry"]
    assert session.query(WishlistEntry).count() == 0
    assert [t.title for t in card.notifier.toasts] == ["Added to Wishlist", "Removed from Wishlist"]
    assert card.notifier.toasts[0].variant == ToastVariant.success


def test_toggle_failure_keeps_state(failing_client, product, customer):
    client = failing_client("add_wishlist_entry")
    card = card_for(client, product, customer).mount()

    assert card.toggle_wishlist() is False
    assert card.is_wishlisted is False
    assert card.is_loading_wishlist is False
    assert card.notifier.toasts[-1].title == "Error Updating Wishlist"


def test_add_to_cart_requires_login(recording_client, product):
    card = card_for(recording_client, product)

    assert card.add_to_cart() is False
    assert card.notifier.toasts[0].description == "Please log in to add items to your cart."
    assert recording_client.calls == []


def test_add_to_cart_requires_stock(recording_client, out_of_stock_product, customer):
    card = card_for(recording_client, out_of_stock_product, customer)

    assert card.add_to_cart() is False
    assert card.notifier.toasts[0].title == "Out of Stock"
    assert recording_client.calls == []


def test_add_to_cart_inserts_quantity_one(recording_client, session, product, customer):
    card = card_for(recording_client, product, customer)

    assert card.add_to_cart() is True

    item = session.query(CartItem).one()
    assert (item.user_id, item.product_id, item.quantity) == ("user-1", product.id, 1)
    assert card.notifier.toasts[-1].title == "Added to Cart"
    assert card.is_adding_to_cart is False


def test_duplicate_add_to_cart_is_skipped(recording_client, session, product, customer):
    card_for(recording_client, product, customer).add_to_cart()
    recording_client.calls.clear()

    card = card_for(recording_client, product, customer)
    assert card.add_to_cart() is False

    assert recording_client.mutations == []
    toast = card.notifier.toasts[-1]
    assert toast.title == "Already in Cart"
    assert toast.description == "Banarasi Silk Saree is already in your cart."
    rows = session.query(CartItem).filter(CartItem.user_id == "user-1", CartItem.product_id == product.id).all()
    assert len(rows) == 1
    assert rows[0].quantity == 1


def test_add_to_cart_failure(failing_client, product, customer):
    card = card_for(failing_client("add_cart_item"), product, customer)

    assert card.add_to_cart() is False
    assert card.notifier.toasts[-1].title == "Error Adding to Cart"
    assert card.notifier.toasts[-1].variant == ToastVariant.destructive


def test_render_discounted_card(recording_client, product):
    view = card_for(recording_client, product).render()

    assert view.final_price == Decimal("2000")
    assert view.formatted_price == "₹2,000.00"
    assert view.formatted_original_price == "₹2,500.00"
    assert view.discount_badge == "20% OFF"
    assert view.link == "/product/1"
    assert [star.type for star in view.star_rating] == ["full", "full", "full", "full", "half"]
    assert view.rating_label == "(4.5)"
    assert view.sales_label == "32 sold"
    assert view.add_to_cart_label == "Add to Cart"


def test_render_out_of_stock_card(recording_client, out_of_stock_product):
    view = card_for(recording_client, out_of_stock_product).render()

    assert view.final_price == Decimal("4200.00")
    assert view.formatted_original_price is None
    assert view.discount_badge is None
    assert view.out_of_stock is True
    assert view.add_to_cart_disabled is True
    assert view.star_rating == []
    assert view.sales_label is None
