"""
Messages module - Direct messaging and conversation summaries.
"""

from campus_connect.services.messages.message_service import MessageService
from campus_connect.services.messages.conversation_aggregator import (
    aggregate_conversations,
    counterpart_of,
)

__all__ = ["MessageService", "aggregate_conversations", "counterpart_of"]
