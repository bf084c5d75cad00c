from schemas.notification_schemas import Toast, ToastVariant
from utils.logger import get_logger

logger = get_logger(__name__)


class NotificationSink:
    """
    Collects toasts raised while handling one user action.

    The HTTP layer drains them into the response so the client can show
    them; every toast is also logged.
    """

    def __init__(self):
        self._toasts: list[Toast] = []

    def toast(self, title: str, description: str = "",
              variant: ToastVariant = ToastVariant.default) -> Toast:
        toast = Toast(title=title, description=description, variant=variant)
        self._toasts.append(toast)

        log = logger.warning if variant == ToastVariant.destructive else logger.info
        log(
            f"Toast: {title}",
            extra={"toast_title": title, "toast_variant": variant.value}
        )
        return toast

    def info(self, title: str, description: str = "") -> Toast:
        return self.toast(title, description, ToastVariant.default)

    def success(self, title: str, description: str = "") -> Toast:
        return self.toast(title, description, ToastVariant.success)

    def error(self, title: str, description: str = "") -> Toast:
        return self.toast(title, description, ToastVariant.destructive)

    @property
    def toasts(self) -> list[Toast]:
        return list(self._toasts)

    def drain(self) -> list[Toast]:
        toasts, self._toasts = self._toasts, []
        return toasts
