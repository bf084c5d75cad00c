"""
Shared access point for order data.

Views read orders through one OrderRepository per data client and are told
through it when an order they may be holding has changed, so each view's
local copy can be refreshed instead of silently going stale.
"""

from dataclasses import dataclass
from typing import Callable, Optional
from pydantic import ValidationError
from schemas.order_schemas import Order, OrderStatus, RecentOrder, OrderReportRow
from services.data_client import DataClient
from utils.logger import get_logger

logger = get_logger(__name__)


ORDER_STATUS_CHANGED = "order_status_changed"

RECENT_ORDER_COLUMNS = ("id", "status", "total_amount", "order_date")
REPORT_COLUMNS = ("id", "customer_name", "customer_email", "order_date", "status", "total_amount")


@dataclass(frozen=True)
class OrderEvent:
    kind: str
    order_id: str
    status: Optional[OrderStatus] = None


Subscriber = Callable[[OrderEvent], None]


def _validate_rows(model, rows: list[dict]) -> list:
    """
    Parse raw rows into ``model``; rows that don't parse (unknown status,
    malformed JSON documents) are dropped with a warning.
    """
    parsed = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed order row",
                extra={"order_id": row.get("id"), "errors": e.error_count()}
            )
    return parsed


def normalize_order_row(row: dict) -> Order:
    """
    Parse one stored row: decode JSON documents, canonicalize the date,
    check the status. Raises pydantic.ValidationError on bad input.
    """
    return Order.model_validate(row)


class OrderRepository:

    def __init__(self, client: DataClient):
        self.client = client
        self._subscribers: list[Subscriber] = []

    # Reads

    def fetch_all(self) -> list[Order]:
        return _validate_rows(Order, self.client.list_orders())

    def fetch_recent(self, limit: int = 5) -> list[RecentOrder]:
        rows = self.client.list_orders(
            columns=RECENT_ORDER_COLUMNS,
            order_by="order_date",
            descending=True,
            limit=limit,
        )
        return _validate_rows(RecentOrder, rows)

    def fetch_report_rows(self) -> list[OrderReportRow]:
        return _validate_rows(OrderReportRow, self.client.list_orders(columns=REPORT_COLUMNS))

    def get(self, order_id: str) -> Order | None:
        row = self.client.get_order(order_id)
        if row is None:
            return None
        try:
            return normalize_order_row(row)
        except ValidationError:
            logger.warning("Stored order failed to parse", extra={"order_id": order_id})
            return None

    # Writes

    def update_status(self, order_id: str, status: OrderStatus) -> OrderStatus | None:
        """
        Persist a new status. Returns the stored status, or None when no
        order matched. Subscribers are notified on success.
        """
        rows = self.client.update_order_status(order_id, status)
        if not rows:
            return None

        stored = OrderStatus(rows[0]["status"])
        self.publish(OrderEvent(kind=ORDER_STATUS_CHANGED, order_id=order_id, status=stored))
        return stored

    # Subscriptions

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register ``callback`` for order events. Returns an unsubscribe
        function; calling it twice is harmless.
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: OrderEvent) -> None:
        logger.debug(
            "Publishing order event",
            extra={"kind": event.kind, "order_id": event.order_id,
                   "subscribers": len(self._subscribers)}
        )
        for callback in list(self._subscribers):
            callback(event)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
