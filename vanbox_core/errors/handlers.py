# =============================================================================
# vanbox_core/errors/handlers.py
# Error Handling Utilities for Vanbox
# =============================================================================

from __future__ import annotations
import traceback
from typing import Optional, TYPE_CHECKING

from vanbox_core.logging import get_logger
from .exceptions import VanboxError

if TYPE_CHECKING:
    from vanbox_core.notifications import NotificationChannel

logger = get_logger(__name__)


def handle_error(
    error: Exception,
    notifications: Optional[NotificationChannel] = None,
    user_message: Optional[str] = None,
    duration_ms: Optional[int] = None,
    log_error: bool = True,
) -> Optional[str]:
    """
    Centralized error handling function.

    Logs the error with its traceback and turns it into a user-facing error
    notification. Store errors are never shown verbatim unless no
    ``user_message`` is given.

    Args:
        error: The exception to handle
        notifications: Channel to post the error notification to (optional)
        user_message: Message shown to the user (uses error message if None)
        duration_ms: Display duration override for the notification
        log_error: Whether to log the error

    Returns:
        The notification id, or None when nothing was posted
    """
    if isinstance(error, VanboxError):
        message = user_message or error.message
        code = error.code
        details = error.details
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}

    if log_error:
        logger.error(
            f"[{code}] {error}",
            extra={"details": details},
            exc_info=error,
        )

    if notifications is None:
        return None
    return notifications.error(message, duration_ms=duration_ms)
