"""
Notifications module - In-app notification inbox.
"""

from campus_connect.services.notifications.notification_store import NotificationStore

__all__ = ["NotificationStore"]
