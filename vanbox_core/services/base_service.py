# =============================================================================
# vanbox_core/services/base_service.py
# Operation results and the shared service base
# =============================================================================

from __future__ import annotations
from abc import ABC
from dataclasses import dataclass
from typing import Any, Dict, Optional, TYPE_CHECKING

from vanbox_core.errors import VanboxError, handle_error
from vanbox_core.logging import LogContext, get_logger

if TYPE_CHECKING:
    from vanbox_core.notifications import NotificationChannel

# Result codes that are not VanboxError codes
BUSY = "BUSY"
STALE = "STALE"


@dataclass
class ServiceResult:
    """
    Outcome of one controller operation.

    Truthy on success. Failed results carry ``error_code``: a VanboxError
    code (``STORE_001``...) or one of the controller's own codes
    (``BUSY``, ``STALE``, ``EMPTY_EXPORT``, ``NO_PENDING_DELETE``).
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @property
    def discarded(self) -> bool:
        """True if the operation never ran or its result was thrown away."""
        return self.error_code in (BUSY, STALE)

    @classmethod
    def ok(cls, data: Any = None, metadata: Optional[Dict[str, Any]] = None) -> ServiceResult:
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str, error_code: str = "UNKNOWN", metadata: Optional[Dict[str, Any]] = None) -> ServiceResult:
        return cls(success=False, error=error, error_code=error_code, metadata=metadata)

    @classmethod
    def busy(cls, operation: str) -> ServiceResult:
        return cls.fail(f"{operation.capitalize()} already in progress", BUSY)

    @classmethod
    def stale(cls, operation: str) -> ServiceResult:
        return cls.fail(f"Stale {operation} result discarded", STALE)

    @classmethod
    def from_exception(cls, e: Exception) -> ServiceResult:
        if isinstance(e, VanboxError):
            return cls.fail(e.message, e.code, metadata=e.details)
        return cls.fail(str(e), "EXCEPTION")


class BaseService(ABC):
    """
    Base for services that talk to the user through a notification channel.

    Usage:
        class MyService(BaseService):
            async def do_something(self) -> ServiceResult:
                try:
                    with self.log_operation("Doing something"):
                        result = await ...
                except Exception as e:
                    return self.report_failure(e, "Something failed.")
                return ServiceResult.ok(result)
    """

    def __init__(self, notifications: Optional[NotificationChannel] = None):
        self.logger = get_logger(self.__class__.__name__)
        self.notifications = notifications

    def log_operation(self, operation: str) -> LogContext:
        """Timed started/completed/failed log lines around ``operation``."""
        return LogContext(self.logger, operation)

    def report_failure(
        self,
        error: Exception,
        user_message: Optional[str] = None,
        duration_ms: Optional[int] = None,
    ) -> ServiceResult:
        """
        Show ``error`` to the user and turn it into a failed result.

        The failure was already logged by ``log_operation``, so it is not
        logged again here.
        """
        handle_error(
            error,
            self.notifications,
            user_message=user_message,
            duration_ms=duration_ms,
            log_error=False,
        )
        return ServiceResult.from_exception(error)
