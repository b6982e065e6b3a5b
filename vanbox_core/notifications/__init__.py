# =============================================================================
# vanbox_core/notifications/__init__.py
# =============================================================================

from .channel import Notification, NotificationChannel, NotificationKind

__all__ = ["Notification", "NotificationChannel", "NotificationKind"]
