# =============================================================================
# vanbox_core/services/__init__.py
# Service Layer for Vanbox
# Separates note lifecycle logic from Streamlit presentation
# =============================================================================
"""
Service Layer for Vanbox

Usage Example:
-------------
    from vanbox_core.services import EntryLifecycleController

    controller = EntryLifecycleController(store, auth_session, notifications)
    await controller.reload()

    controller.draft = "First note"
    result = await controller.save()
    if not result.success:
        print(result.error_code)
"""

from .base_service import BaseService, ServiceResult
from .entry_controller import EntryLifecycleController, OperationKind

__all__ = [
    "BaseService",
    "ServiceResult",
    "EntryLifecycleController",
    "OperationKind",
]
