import csv
import io
from dataclasses import dataclass
from typing import Optional
from core.config import settings
from schemas.dashboard_schemas import QuickAction
from schemas.order_schemas import OrderReportRow
from services.base_view import BaseView
from services.data_client import DataClientError
from services.notifications import NotificationSink
from services.order_repository import OrderRepository
from utils.formatting import format_report_date
from utils.logger import get_logger

logger = get_logger(__name__)


REPORT_HEADERS = ["Order ID", "Customer Name", "Customer Email", "Order Date", "Status", "Total Amount"]
REPORT_MEDIA_TYPE = "text/csv;charset=utf-8"

NAVIGATION = (
    QuickAction(key="add_product", label="Add Product", href="/admin/products?action=add"),
    QuickAction(key="manage_categories", label="Manage Categories", href="/admin/categories"),
    QuickAction(key="process_orders", label="Process Orders", href="/admin/orders"),
)


@dataclass
class ReportFile:
    filename: str
    media_type: str
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


def report_fields(row: OrderReportRow) -> list[str]:
    return [
        row.id,
        row.customer_name,
        row.customer_email,
        format_report_date(row.order_date) if row.order_date else "",
        row.status,
        str(row.total_amount),
    ]


def build_orders_csv(rows: list[OrderReportRow], quoting: bool = False) -> str:
    """
    Header plus one line per order, joined with ``\\n`` and no trailing
    newline.

    Without ``quoting`` fields are comma-joined as-is, so a comma or quote
    inside a customer name shifts the columns. With ``quoting`` fields are
    quoted where needed (RFC 4180).
    """
    if not quoting:
        lines = [",".join(REPORT_HEADERS)]
        lines.extend(",".join(report_fields(row)) for row in rows)
        return "\n".join(lines)

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(REPORT_HEADERS)
    writer.writerows(report_fields(row) for row in rows)
    return buffer.getvalue().rstrip("\n")


class QuickActions(BaseView):
    """
    Dashboard shortcuts and the orders CSV export.
    """

    def __init__(self, repository: OrderRepository,
                 notifier: Optional[NotificationSink] = None):
        super().__init__(notifier)
        self.repository = repository
        self.is_generating_report = False
        self.last_error: Optional[str] = None

    @staticmethod
    def navigation() -> list[QuickAction]:
        return list(NAVIGATION)

    def generate_report(self) -> Optional[ReportFile]:
        """
        Export every order as CSV.

        Returns None when there is nothing to export (informational notice)
        or when the fetch fails (destructive notice, ``last_error`` set).
        """
        self._set_state(is_generating_report=True, last_error=None)
        logger.info("Generating orders report")
        try:
            rows = self.repository.fetch_report_rows()

            if not rows:
                self._notify("info", "No Data", "No orders found to generate a report.")
                return None

            content = build_orders_csv(rows, quoting=settings.REPORT_CSV_QUOTING)
            report = ReportFile(
                filename=settings.REPORT_FILENAME,
                media_type=REPORT_MEDIA_TYPE,
                content=content.encode("utf-8"),
            )
            logger.info("Orders report generated", extra={"rows": len(rows)})
            self._notify("success", "Report Generated Successfully", "The orders report has been downloaded.")
            return report

        except DataClientError as e:
            logger.error(f"Error generating report: {e.message}", exc_info=True)
            self._set_state(last_error=e.message or "An unexpected error occurred.")
            self._notify("error", "Error Generating Report", e.message or "An unexpected error occurred.")
            return None
        finally:
            self._set_state(is_generating_report=False)
