from fastapi import APIRouter, HTTPException, Request, Query
from starlette import status
from schemas.order_schemas import (OrderListPage, OrderDetail, RecentOrdersPanel,
    StatusUpdateRequest, StatusUpdateResponse)
from services.order_list_view import OrderListView, order_detail
from services.recent_orders import RecentOrdersWidget
from utils.deps import admin_dependency, repository_dependency
from middleware.rate_limiter import limiter
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/admin/orders",
    tags=["admin-orders"]
)


@router.get("", response_model=OrderListPage)
@limiter.limit("60/minute")
async def list_orders(request: Request, admin: admin_dependency, repository: repository_dependency,
                      search: str = "", status_filter: str = Query("all", alias="status"),
                      page: int = Query(1, ge=1)):
    """
    One page of the orders table.

    Filters don't reset the page: asking for a page past the filtered
    results returns an empty page.
    """
    view = OrderListView(repository)
    try:
        try:
            view.set_status_filter(status_filter)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                                detail=f"Unknown status filter: {status_filter}")

        view.load()
        if view.error:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=view.error)

        view.set_search_term(search)
        view.go_to_page(page)
        return view.render()
    finally:
        view.unmount()


@router.get("/recent", response_model=RecentOrdersPanel)
@limiter.limit("60/minute")
async def recent_orders(request: Request, admin: admin_dependency, repository: repository_dependency):
    widget = RecentOrdersWidget(repository)
    try:
        widget.load()
        if widget.state == "error":
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=widget.error)
        return widget.render()
    finally:
        widget.unmount()


@router.get("/{order_id}", response_model=OrderDetail)
@limiter.limit("60/minute")
async def get_order(request: Request, order_id: str, admin: admin_dependency,
                    repository: repository_dependency):
    order = repository.get(order_id)

    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    return order_detail(order)


@router.patch("/{order_id}/status", response_model=StatusUpdateResponse)
@limiter.limit("30/minute")
async def update_order_status(request: Request, order_id: str, body: StatusUpdateRequest,
                              admin: admin_dependency, repository: repository_dependency):
    """
    Move an order to another status. Any status may follow any other;
    asking for the status it already has is a no-op.
    """
    view = OrderListView(repository)
    try:
        view.load()
        if view.error:
            return StatusUpdateResponse(success=False, notifications=view.notifier.drain())

        updated = view.update_status(order_id, body.status)
        order = next((o for o in view.orders if o.id == order_id), None)

        if updated:
            logger.info(
                "Order status changed",
                extra={"order_id": order_id, "status": body.status.value,
                       "admin_id": admin.get("user_id"), "admin_email": admin.get("email")}
            )

        return StatusUpdateResponse(
            success=updated,
            notifications=view.notifier.drain(),
            order=order,
        )
    finally:
        view.unmount()
