from typing import Optional
from core.config import settings
from schemas.order_schemas import (Order, OrderStatus, StatusFilter, parse_status_filter,
    StatusBadge, StatusMenuItem, OrderRow, OrderDetail, OrderDetailItem, Pagination, OrderListPage)
from services.base_view import BaseView
from services.data_client import DataClientError
from services.notifications import NotificationSink
from services.order_repository import OrderRepository, OrderEvent, ORDER_STATUS_CHANGED
from utils.formatting import format_date_short, format_date_long
from utils.pagination import page_count, page_slice, page_window
from utils.logger import get_logger

logger = get_logger(__name__)


STATUS_BADGES = {
    OrderStatus.pending: StatusBadge(label="Pending", color_class="bg-yellow-50 text-yellow-700"),
    OrderStatus.processing: StatusBadge(label="Processing", color_class="bg-blue-50 text-blue-700"),
    OrderStatus.shipped: StatusBadge(label="Shipped", color_class="bg-purple-50 text-purple-700"),
    OrderStatus.completed: StatusBadge(label="Completed", color_class="bg-green-50 text-green-700"),
    OrderStatus.cancelled: StatusBadge(label="Cancelled", color_class="bg-red-50 text-red-700"),
}
UNKNOWN_BADGE = StatusBadge(label="Unknown", color_class="")

STATUS_MENU_LABELS = (
    (OrderStatus.pending, "Mark as Pending"),
    (OrderStatus.processing, "Mark as Processing"),
    (OrderStatus.shipped, "Mark as Shipped"),
    (OrderStatus.completed, "Mark as Completed"),
    (OrderStatus.cancelled, "Cancel Order"),
)


def status_badge(status) -> StatusBadge:
    try:
        return STATUS_BADGES[OrderStatus(status)]
    except ValueError:
        return UNKNOWN_BADGE


def status_menu(order: Order) -> list[StatusMenuItem]:
    """
    Status change entries for an order; the entry for its current status
    is disabled. There is no transition graph: every other status is
    allowed.
    """
    return [
        StatusMenuItem(
            status=status,
            label=label,
            disabled=order.status == status,
            destructive=status == OrderStatus.cancelled,
        )
        for status, label in STATUS_MENU_LABELS
    ]


def money(amount) -> str:
    # Table cells show the stored amount as-is
    return f"{settings.CURRENCY_SYMBOL}{amount}"


def order_detail(order: Order) -> OrderDetail:
    """
    Detail dialog contents. Line subtotals are price x quantity; the
    subtotal/total lines repeat the stored total_amount and are not
    recomputed from the lines.
    """
    address = []
    if order.shipping_address is not None:
        shipping = order.shipping_address
        address.append(shipping.line1)
        if shipping.line2:
            address.append(shipping.line2)
        address.append(f"{shipping.city}, {shipping.state} {shipping.postal_code}")

    return OrderDetail(
        id=order.id,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        order_date=format_date_long(order.order_date),
        status=order.status,
        badge=status_badge(order.status),
        shipping_address=address,
        items=[
            OrderDetailItem(
                id=item.id,
                name=item.name,
                price=money(item.price),
                quantity=item.quantity,
                subtotal=money(item.price * item.quantity),
            )
            for item in order.items
        ],
        subtotal=money(order.total_amount),
        shipping=money("0.00"),
        total=money(order.total_amount),
    )


class OrderListView(BaseView):
    """
    Orders management table: search, status filter, pagination, status
    changes and a detail dialog over a locally held copy of all orders.
    """

    def __init__(self, repository: OrderRepository,
                 notifier: Optional[NotificationSink] = None,
                 page_size: int | None = None):
        super().__init__(notifier)
        self.repository = repository
        self.page_size = page_size or settings.ORDERS_PAGE_SIZE

        self.orders: list[Order] = []
        self.is_loading = True
        self.error: Optional[str] = None
        self.search_term = ""
        self.status_filter: StatusFilter = "all"
        self.current_page = 1
        self.selected_order: Optional[Order] = None
        self.is_view_modal_open = False

        self._unsubscribe = repository.subscribe(self._on_order_event)

    def load(self) -> "OrderListView":
        self._set_state(is_loading=True, error=None)
        try:
            orders = self.repository.fetch_all()
        except DataClientError as e:
            logger.error(
                f"Error fetching orders: {e.message}",
                extra={"operation": e.operation},
                exc_info=True
            )
            self._set_state(error=e.message or "Failed to fetch orders.")
            self._notify("error", "Error fetching orders", e.message or "An unexpected error occurred.")
        else:
            self._set_state(orders=orders)
            logger.info("Orders loaded", extra={"count": len(orders)})
        finally:
            self._set_state(is_loading=False)
        return self

    # Filters

    def set_search_term(self, term: str) -> None:
        # current_page is not reset
        self._set_state(search_term=term or "")

    def set_status_filter(self, value) -> None:
        self._set_state(status_filter=parse_status_filter(value))

    def matches(self, order: Order) -> bool:
        term = self.search_term.lower()
        matches_search = (
            term in order.id.lower()
            or term in order.customer_name.lower()
            or term in order.customer_email.lower()
        )
        matches_status = self.status_filter == "all" or order.status == self.status_filter
        return matches_search and matches_status

    @property
    def filtered_orders(self) -> list[Order]:
        return [order for order in self.orders if self.matches(order)]

    # Pagination

    @property
    def page_count(self) -> int:
        return page_count(len(self.filtered_orders), self.page_size)

    @property
    def current_orders(self) -> list[Order]:
        return page_slice(self.filtered_orders, self.current_page, self.page_size)

    @property
    def page_links(self) -> list[int]:
        return page_window(self.current_page, self.page_count)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.page_count

    def go_to_page(self, page: int) -> None:
        self._set_state(current_page=max(1, page))

    def previous_page(self) -> None:
        self._set_state(current_page=max(self.current_page - 1, 1))

    def next_page(self) -> None:
        self._set_state(current_page=max(1, min(self.current_page + 1, self.page_count)))

    def pagination(self) -> Pagination:
        filtered = self.filtered_orders
        total_pages = page_count(len(filtered), self.page_size)
        return Pagination(
            current_page=self.current_page,
            page_size=self.page_size,
            page_count=total_pages,
            total_items=len(filtered),
            page_links=page_window(self.current_page, total_pages),
            has_previous=self.current_page > 1,
            has_next=self.current_page < total_pages,
        )

    # Status changes

    def _find(self, order_id: str) -> Optional[Order]:
        return next((order for order in self.orders if order.id == order_id), None)

    def update_status(self, order_id: str, new_status) -> bool:
        new_status = OrderStatus(new_status)

        order = self._find(order_id)
        if order is not None and order.status == new_status:
            self._notify("info", "Status unchanged", f"Order {order_id} is already {new_status.value}")
            return False

        try:
            stored = self.repository.update_status(order_id, new_status)
        except DataClientError as e:
            logger.error(
                f"Error updating status: {e.message}",
                extra={"order_id": order_id, "status": new_status.value},
                exc_info=True
            )
            self._notify("error", "Error updating status", e.message or "An unexpected error occurred.")
            return False

        if stored is None:
            self._notify("error", "Failed to update status", "Order not found or no changes made.")
            return False

        self._apply_status(order_id, stored)
        self._notify("info", "Order status updated", f"Order {order_id} status changed to {new_status.value}")
        return True

    def _apply_status(self, order_id: str, status: OrderStatus) -> None:
        orders = [
            order.model_copy(update={"status": status}) if order.id == order_id else order
            for order in self.orders
        ]
        changes = {"orders": orders}
        if self.selected_order is not None and self.selected_order.id == order_id:
            changes["selected_order"] = self.selected_order.model_copy(update={"status": status})
        self._set_state(**changes)

    def _on_order_event(self, event: OrderEvent) -> None:
        if event.kind == ORDER_STATUS_CHANGED and event.status is not None:
            self._apply_status(event.order_id, event.status)

    # Detail dialog

    def view_order(self, order_id: str) -> Optional[OrderDetail]:
        order = self._find(order_id)
        if order is None:
            return None
        self._set_state(selected_order=order, is_view_modal_open=True)
        return order_detail(order)

    def close_order(self) -> None:
        self._set_state(is_view_modal_open=False)

    # Rendering

    def row(self, order: Order) -> OrderRow:
        return OrderRow(
            id=order.id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            date=format_date_short(order.order_date),
            status=order.status,
            badge=status_badge(order.status),
            total=money(order.total_amount),
            menu=status_menu(order),
        )

    def render(self) -> OrderListPage:
        status_filter = self.status_filter
        return OrderListPage(
            rows=[self.row(order) for order in self.current_orders],
            pagination=self.pagination(),
            search=self.search_term,
            status_filter=getattr(status_filter, "value", status_filter),
            notifications=self.notifier.drain(),
        )
