# =============================================================================
# vanbox_core/errors/__init__.py
# Centralized Error Handling for Vanbox
# =============================================================================

from .exceptions import (
    VanboxError,
    ContentValidationError,
    EntryStoreError,
    DeletionNotAppliedError,
    NotAuthenticatedError,
    SessionProviderError,
    OperationTimeoutError,
    ShellInstallError,
    ShellFetchError,
    ConfigurationError,
)

from .handlers import handle_error

__all__ = [
    # Exceptions
    "VanboxError",
    "ContentValidationError",
    "EntryStoreError",
    "DeletionNotAppliedError",
    "NotAuthenticatedError",
    "SessionProviderError",
    "OperationTimeoutError",
    "ShellInstallError",
    "ShellFetchError",
    "ConfigurationError",
    # Handlers
    "handle_error",
]
