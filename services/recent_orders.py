from typing import Optional
from core.config import settings
from schemas.order_schemas import OrderStatus, RecentOrder, RecentOrderRow, RecentOrdersPanel
from services.base_view import BaseView
from services.data_client import DataClientError
from services.notifications import NotificationSink
from services.order_repository import OrderRepository, OrderEvent, ORDER_STATUS_CHANGED
from utils.formatting import format_currency
from utils.logger import get_logger

logger = get_logger(__name__)


VIEW_ALL_HREF = "/admin/orders"

BADGE_COLORS = {
    OrderStatus.completed: "bg-green-100 text-green-700",
    OrderStatus.processing: "bg-blue-100 text-blue-700",
    OrderStatus.shipped: "bg-purple-100 text-purple-700",
    OrderStatus.pending: "bg-amber-100 text-amber-700",
    OrderStatus.cancelled: "bg-red-100 text-red-700",
}


class RecentOrdersWidget(BaseView):
    """
    Dashboard summary of the most recent orders. Read-only.
    """

    def __init__(self, repository: OrderRepository,
                 notifier: Optional[NotificationSink] = None,
                 limit: int | None = None):
        super().__init__(notifier)
        self.repository = repository
        self.limit = limit or settings.RECENT_ORDERS_LIMIT

        self.recent_orders: list[RecentOrder] = []
        self.is_loading = True
        self.error: Optional[str] = None
        self.stale = False

        self._unsubscribe = repository.subscribe(self._on_order_event)

    def load(self) -> "RecentOrdersWidget":
        self._set_state(is_loading=True, error=None)
        try:
            orders = self.repository.fetch_recent(self.limit)
        except DataClientError as e:
            message = e.message or "Failed to fetch recent orders."
            logger.error(f"Error fetching recent orders: {message}", exc_info=True)
            self._set_state(error=message)
            self._notify("error", "Error Fetching Recent Orders", message)
        else:
            self._set_state(recent_orders=orders, stale=False)
        finally:
            self._set_state(is_loading=False)
        return self

    def _on_order_event(self, event: OrderEvent) -> None:
        if event.kind == ORDER_STATUS_CHANGED:
            self._set_state(stale=True)

    def refresh_if_stale(self) -> bool:
        if not self.stale:
            return False
        self.load()
        return True

    @property
    def state(self) -> str:
        if self.is_loading:
            return "loading"
        if self.error:
            return "error"
        if not self.recent_orders:
            return "empty"
        return "ready"

    @staticmethod
    def row(order: RecentOrder) -> RecentOrderRow:
        return RecentOrderRow(
            id=order.id,
            short_id=order.id[-8:],
            status=order.status,
            status_label=order.status.value.capitalize(),
            color_class=BADGE_COLORS[order.status],
            formatted_amount=format_currency(order.total_amount),
        )

    def render(self) -> RecentOrdersPanel:
        state = self.state
        return RecentOrdersPanel(
            state=state,
            error=self.error if state == "error" else None,
            rows=[self.row(order) for order in self.recent_orders] if state == "ready" else [],
            view_all_href=VIEW_ALL_HREF,
            notifications=self.notifier.drain(),
        )
