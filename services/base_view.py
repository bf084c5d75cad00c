from typing import Callable, Optional
from services.notifications import NotificationSink
from utils.logger import get_logger

logger = get_logger(__name__)


class BaseView:
    """
    Stateful view with a mount lifetime.

    State changes go through _set_state and toasts through _notify so that
    anything landing after unmount() (a fetch that finished late) is dropped
    instead of touching a view nobody is looking at.
    """

    def __init__(self, notifier: Optional[NotificationSink] = None):
        self.notifier = notifier or NotificationSink()
        self.mounted = True
        self._unsubscribe: Optional[Callable[[], None]] = None

    def _set_state(self, **changes) -> bool:
        if not self.mounted:
            logger.debug(
                "Dropping state update after unmount",
                extra={"view": type(self).__name__, "fields": sorted(changes)}
            )
            return False

        for name, value in changes.items():
            setattr(self, name, value)
        return True

    def _notify(self, kind: str, title: str, description: str = "") -> None:
        if not self.mounted:
            logger.debug(
                "Dropping toast after unmount",
                extra={"view": type(self).__name__, "toast_title": title}
            )
            return
        getattr(self.notifier, kind)(title, description)

    def unmount(self) -> None:
        self.mounted = False
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
