# =============================================================================
# vanbox_core/errors/exceptions.py
# Custom Exception Hierarchy for Vanbox
# =============================================================================

from typing import Optional, Dict, Any


class VanboxError(Exception):
    """
    Base exception for all Vanbox errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "STORE_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "VB_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# ENTRY EXCEPTIONS
# =============================================================================

class ContentValidationError(VanboxError):
    """Raised when note content is blank or over the length limit"""

    def __init__(
        self,
        message: str,
        length: Optional[int] = None,
        limit: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if length is not None:
            details["length"] = length
        if limit is not None:
            details["limit"] = limit

        super().__init__(
            message=message,
            code="ENTRY_001",
            details=details,
            **kwargs,
        )


class EntryStoreError(VanboxError):
    """Raised when a call to the entry store fails (network or store-side)"""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            code=kwargs.pop("code", "STORE_001"),
            details=details,
            **kwargs,
        )


class DeletionNotAppliedError(EntryStoreError):
    """
    Raised when a delete call succeeds but removes no rows.

    Row-level security reports a denied delete as an empty result rather than
    an error, so zero removed rows is treated as a permissions failure.
    """

    def __init__(
        self,
        message: str = "Deletion failed. Please check permissions or try again.",
        entry_id: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if entry_id:
            details["entry_id"] = entry_id

        super().__init__(
            message=message,
            operation="delete",
            code="STORE_002",
            details=details,
            **kwargs,
        )


# =============================================================================
# AUTH EXCEPTIONS
# =============================================================================

class NotAuthenticatedError(VanboxError):
    """Raised when an operation needs a signed-in user and there is none"""

    def __init__(self, message: str = "You need to sign in first.", **kwargs):
        super().__init__(message=message, code="AUTH_001", **kwargs)


class SessionProviderError(VanboxError):
    """Raised when the identity provider rejects a sign-in or sign-out"""

    def __init__(self, message: str, action: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if action:
            details["action"] = action

        super().__init__(message=message, code="AUTH_002", details=details, **kwargs)


# =============================================================================
# RUNTIME EXCEPTIONS
# =============================================================================

class OperationTimeoutError(VanboxError):
    """Raised when a background call does not finish within the page's wait"""

    def __init__(self, message: str, timeout: Optional[float] = None, **kwargs):
        details = kwargs.pop("details", {})
        if timeout is not None:
            details["timeout"] = timeout

        super().__init__(message=message, code="TIMEOUT_001", details=details, **kwargs)


# =============================================================================
# OFFLINE SHELL CACHE EXCEPTIONS
# =============================================================================

class ShellInstallError(VanboxError):
    """Raised when any shell resource fails to download during install"""

    def __init__(
        self,
        message: str,
        failed_paths: Optional[list] = None,
        cache_name: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if failed_paths:
            details["failed_paths"] = failed_paths
        if cache_name:
            details["cache_name"] = cache_name

        super().__init__(message=message, code="CACHE_001", details=details, **kwargs)


class ShellFetchError(VanboxError):
    """Raised when a non-document request misses the cache and the network is down"""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if url:
            details["url"] = url

        super().__init__(message=message, code="CACHE_002", details=details, **kwargs)


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(VanboxError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
