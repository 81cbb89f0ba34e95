"""
Campus Connect Services.

All service classes organized by feature.
"""

# Notification services
from campus_connect.services.notifications.notification_store import NotificationStore

# Messaging services
from campus_connect.services.messages.message_service import MessageService
from campus_connect.services.messages.conversation_aggregator import aggregate_conversations

__all__ = [
    "NotificationStore",
    "MessageService",
    "aggregate_conversations",
]
