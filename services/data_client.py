import time
from contextlib import contextmanager
from typing import Iterable, Optional
from sqlalchemy import select, delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from models.orders import Order
from models.products import Product
from models.wishlist import WishlistEntry
from models.cart_items import CartItem
from utils.logger import get_logger, log_database_query

logger = get_logger(__name__)


ORDER_COLUMNS = (
    "id", "customer_name", "customer_email", "order_date",
    "status", "total_amount", "items", "shipping_address",
)

PRODUCT_COLUMNS = (
    "id", "name", "price", "discount", "image_url", "category",
    "in_stock", "rating", "sales_count",
)


class DataClientError(Exception):
    """
    A call to the backing store failed. Carries a user-presentable message.
    """
    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation


class DataClient:
    """
    Query/mutation gateway over the orders, wishlist, cart_items and
    products tables.

    Rows come back as plain dicts keyed by column name. Every failure of
    the underlying store surfaces as DataClientError; nothing is retried.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _call(self, operation: str, query_type: str, table: str):
        start_time = time.perf_counter()
        stats = {"rows": None}
        try:
            yield stats
        except SQLAlchemyError as e:
            self.db.rollback()
            message = str(getattr(e, "orig", None) or e)
            logger.error(
                f"{operation} failed: {message}",
                extra={"operation": operation, "table": table, "error_type": type(e).__name__}
            )
            raise DataClientError(message, operation=operation) from e
        finally:
            duration = (time.perf_counter() - start_time) * 1000
            log_database_query(logger, query_type, table, duration, rows_affected=stats["rows"])

    @staticmethod
    def _columns(model, names: Iterable[str]):
        try:
            return [getattr(model, name) for name in names]
        except AttributeError as e:
            raise ValueError(f"Unknown column for {model.__tablename__}: {e}") from e

    # Orders

    def list_orders(
        self,
        columns: Optional[Iterable[str]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict]:
        """
        All orders, optionally projected, sorted and limited.
        """
        query = select(*self._columns(Order, columns or ORDER_COLUMNS))

        if order_by:
            column = self._columns(Order, [order_by])[0]
            query = query.order_by(column.desc() if descending else column.asc())

        if limit is not None:
            query = query.limit(limit)

        with self._call("list_orders", "SELECT", "orders") as stats:
            rows = [dict(row) for row in self.db.execute(query).mappings().all()]
            stats["rows"] = len(rows)
        return rows

    def get_order(self, order_id: str) -> dict | None:
        query = select(*self._columns(Order, ORDER_COLUMNS)).where(Order.id == order_id)

        with self._call("get_order", "SELECT", "orders") as stats:
            row = self.db.execute(query).mappings().one_or_none()
            stats["rows"] = 0 if row is None else 1
        return dict(row) if row is not None else None

    def update_order_status(self, order_id: str, status) -> list[dict]:
        """
        Set an order's status. Returns the updated rows (empty when no
        order has that id).
        """
        value = getattr(status, "value", status)

        with self._call("update_order_status", "UPDATE", "orders") as stats:
            result = self.db.execute(
                update(Order).where(Order.id == order_id).values(status=value)
            )
            self.db.commit()
            stats["rows"] = result.rowcount

            if not result.rowcount:
                return []

            row = self.db.execute(
                select(*self._columns(Order, ORDER_COLUMNS)).where(Order.id == order_id)
            ).mappings().one()
        return [dict(row)]

    # Wishlist

    def check_wishlist_membership(self, user_id: str, product_id: int) -> bool:
        query = select(WishlistEntry.product_id).where(
            WishlistEntry.user_id == user_id,
            WishlistEntry.product_id == product_id,
        )

        with self._call("check_wishlist_membership", "SELECT", "wishlist") as stats:
            found = self.db.execute(query).first() is not None
            stats["rows"] = int(found)
        return found

    def add_wishlist_entry(self, user_id: str, product_id: int) -> None:
        with self._call("add_wishlist_entry", "INSERT", "wishlist") as stats:
            self.db.add(WishlistEntry(user_id=user_id, product_id=product_id))
            self.db.commit()
            stats["rows"] = 1

    def remove_wishlist_entry(self, user_id: str, product_id: int) -> None:
        with self._call("remove_wishlist_entry", "DELETE", "wishlist") as stats:
            result = self.db.execute(
                delete(WishlistEntry).where(
                    WishlistEntry.user_id == user_id,
                    WishlistEntry.product_id == product_id,
                )
            )
            self.db.commit()
            stats["rows"] = result.rowcount

    # Cart

    def check_cart_membership(self, user_id: str, product_id: int) -> bool:
        query = select(CartItem.product_id).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id,
        )

        with self._call("check_cart_membership", "SELECT", "cart_items") as stats:
            found = self.db.execute(query).first() is not None
            stats["rows"] = int(found)
        return found

    def add_cart_item(self, user_id: str, product_id: int, quantity: int = 1) -> None:
        with self._call("add_cart_item", "INSERT", "cart_items") as stats:
            self.db.add(CartItem(user_id=user_id, product_id=product_id, quantity=quantity))
            self.db.commit()
            stats["rows"] = 1

    # Products

    def get_product(self, product_id: int) -> dict | None:
        query = select(*self._columns(Product, PRODUCT_COLUMNS)).where(Product.id == product_id)

        with self._call("get_product", "SELECT", "products") as stats:
            row = self.db.execute(query).mappings().one_or_none()
            stats["rows"] = 0 if row is None else 1
        return dict(row) if row is not None else None
