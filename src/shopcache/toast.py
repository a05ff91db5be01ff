"""Toast notification sink."""

import logging
from typing import Protocol, runtime_checkable

from shopcache.types import ToastKind

logger = logging.getLogger(__name__)

_LEVELS: dict[str, int] = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@runtime_checkable
class ToastSink(Protocol):
    """Fire-and-forget user notification."""

    def show_toast(
        self, message: str, kind: ToastKind = "info", duration: int | None = None
    ) -> None:
        """Show message to the user."""
        ...


class LoggingToastSink:
    """Default sink: writes toasts to the ``shopcache.toast`` logger."""

    def show_toast(
        self, message: str, kind: ToastKind = "info", duration: int | None = None
    ) -> None:
        logger.log(_LEVELS.get(kind, logging.INFO), "[toast:%s] %s", kind, message)
