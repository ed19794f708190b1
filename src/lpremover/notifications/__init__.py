"""User-facing notifications."""

from lpremover.notifications.notifier import Notification, Notifier, Variant

__all__ = ["Notification", "Notifier", "Variant"]
