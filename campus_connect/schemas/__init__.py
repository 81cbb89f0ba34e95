"""
Campus Connect request/response schemas.
"""

from campus_connect.schemas.notifications import (
    NotificationType,
    NotificationPayload,
    Notification,
    CreateNotificationRequest,
    parse_notification_payload,
)
from campus_connect.schemas.messages import (
    SendMessageRequest,
    MarkAllReadRequest,
)

__all__ = [
    "NotificationType",
    "NotificationPayload",
    "Notification",
    "CreateNotificationRequest",
    "parse_notification_payload",
    "SendMessageRequest",
    "MarkAllReadRequest",
]
