from fastapi import APIRouter, HTTPException, Request
from starlette import status
from schemas.product_schemas import ProductData, ProductCardView, WishlistToggleResponse, AddToCartResponse
from services.data_client import DataClient
from services.product_card import ProductCard
from utils.deps import optional_user_dependency, data_client_dependency
from middleware.rate_limiter import limiter
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/products",
    tags=["products"]
)


def load_card(client: DataClient, product_id: int, user: dict | None) -> ProductCard:
    row = client.get_product(product_id)

    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    return ProductCard(client, ProductData.model_validate(row), user=user).mount()


@router.get("/{product_id}/card", response_model=ProductCardView)
@limiter.limit("120/minute")
async def product_card(request: Request, product_id: int, user: optional_user_dependency,
                       client: data_client_dependency):
    card = load_card(client, product_id, user)
    try:
        return card.render()
    finally:
        card.unmount()


@router.post("/{product_id}/wishlist/toggle", response_model=WishlistToggleResponse)
@limiter.limit("30/minute")
async def toggle_wishlist(request: Request, product_id: int, user: optional_user_dependency,
                          client: data_client_dependency):
    card = load_card(client, product_id, user)
    try:
        success = card.toggle_wishlist()
        return WishlistToggleResponse(
            success=success,
            is_wishlisted=card.is_wishlisted,
            notifications=card.notifier.drain(),
        )
    finally:
        card.unmount()


@router.post("/{product_id}/cart", response_model=AddToCartResponse)
@limiter.limit("30/minute")
async def add_to_cart(request: Request, product_id: int, user: optional_user_dependency,
                      client: data_client_dependency):
    card = load_card(client, product_id, user)
    try:
        success = card.add_to_cart()
        return AddToCartResponse(success=success, notifications=card.notifier.drain())
    finally:
        card.unmount()
