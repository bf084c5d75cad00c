import json
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel, field_validator
from utils.formatting import to_iso_timestamp
from schemas.notification_schemas import Toast, ActionResponse


class OrderStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    shipped = "shipped"
    completed = "completed"
    cancelled = "cancelled"


StatusFilter = OrderStatus | Literal["all"]


def parse_status_filter(value) -> StatusFilter:
    """
    "all" or a known status. Raises ValueError for anything else.
    """
    if value is None or value == "all":
        return "all"
    return OrderStatus(value)


def _load_json(value):
    # Rows may carry nested documents as JSON text or already decoded
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


class OrderItem(BaseModel):
    id: int | str
    name: str
    price: Decimal
    quantity: int


class ShippingAddress(BaseModel):
    line1: str
    line2: Optional[str] = None
    city: str
    state: str
    postal_code: str


class Order(BaseModel):
    id: str
    customer_name: str
    customer_email: str
    order_date: str
    status: OrderStatus
    total_amount: Decimal
    items: list[OrderItem] = []
    shipping_address: Optional[ShippingAddress] = None

    @field_validator('order_date', mode='before')
    @classmethod
    def canonical_order_date(cls, value):
        """
        Coerce to the canonical ISO timestamp. A missing or empty date
        becomes now.
        """
        return to_iso_timestamp(value or None)

    @field_validator('items', mode='before')
    @classmethod
    def parse_items(cls, value):
        return _load_json(value) or []

    @field_validator('shipping_address', mode='before')
    @classmethod
    def parse_shipping_address(cls, value):
        return _load_json(value)


class RecentOrder(BaseModel):
    id: str
    status: OrderStatus
    total_amount: Decimal
    order_date: str

    @field_validator('order_date', mode='before')
    @classmethod
    def canonical_order_date(cls, value):
        return to_iso_timestamp(value or None)


class OrderReportRow(BaseModel):
    """
    One CSV line. Status stays a raw string: the report exports what is
    stored.
    """
    id: str
    customer_name: str
    customer_email: str
    order_date: Optional[str] = None
    status: str
    total_amount: Decimal

    @field_validator('order_date', mode='before')
    @classmethod
    def canonical_order_date(cls, value):
        if not value:
            return None
        return to_iso_timestamp(value)


class StatusUpdateRequest(BaseModel):
    status: OrderStatus


class StatusBadge(BaseModel):
    label: str
    color_class: str


class StatusMenuItem(BaseModel):
    status: OrderStatus
    label: str
    disabled: bool
    destructive: bool = False


class OrderRow(BaseModel):
    id: str
    customer_name: str
    customer_email: str
    date: str
    status: OrderStatus
    badge: StatusBadge
    total: str
    menu: list[StatusMenuItem]


class Pagination(BaseModel):
    current_page: int
    page_size: int
    page_count: int
    total_items: int
    page_links: list[int]
    has_previous: bool
    has_next: bool


class OrderDetailItem(BaseModel):
    id: int | str
    name: str
    price: str
    quantity: int
    subtotal: str


class OrderDetail(BaseModel):
    id: str
    customer_name: str
    customer_email: str
    order_date: str
    status: OrderStatus
    badge: StatusBadge
    shipping_address: list[str]
    items: list[OrderDetailItem]
    subtotal: str
    shipping: str
    total: str


class RecentOrderRow(BaseModel):
    id: str
    short_id: str
    status: OrderStatus
    status_label: str
    color_class: str
    formatted_amount: str


class OrderListPage(BaseModel):
    rows: list[OrderRow]
    pagination: Pagination
    search: str
    status_filter: str
    notifications: list[Toast] = []


class RecentOrdersPanel(BaseModel):
    state: Literal["loading", "error", "empty", "ready"]
    error: Optional[str] = None
    rows: list[RecentOrderRow]
    view_all_href: str
    notifications: list[Toast] = []


class StatusUpdateResponse(ActionResponse):
    order: Optional[Order] = None
