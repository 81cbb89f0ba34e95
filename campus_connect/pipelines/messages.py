"""
Direct message pipeline functions.

Orchestrates sending messages (with the receiver's in-app notification),
listing conversation summaries, and opening a conversation thread.
"""

from typing import Any, Dict, List, Optional

from common.logger import get_logger
from campus_connect.schemas.notifications import MessageReceivedPayload
from campus_connect.services.messages.conversation_aggregator import (
    aggregate_conversations,
    counterpart_of,
)
from campus_connect.services.messages.message_service import MessageService
from campus_connect.services.notifications.notification_store import NotificationStore

logger = get_logger(__name__)

PREVIEW_LENGTH = 100


async def send_direct_message(
    message_service: MessageService,
    notification_store: NotificationStore,
    sender_id: str,
    receiver_id: str,
    content: str,
    message_type: str = "text",
    attachments: Optional[List[Dict[str, Any]]] = None,
    related_to: Optional[Dict[str, Any]] = None,
    preview_length: int = PREVIEW_LENGTH,
) -> Dict[str, Any]:
    """
    Send a message and notify its receiver.

    1. Save the message (validation happens in the service)
    2. Look up the sender's display name
    3. Push a MESSAGE_RECEIVED notification to the receiver
    4. Return the saved message

    A failed notification is logged and does not undo the send.
    """
    # 1. Save message
    saved_message = await message_service.send_message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        message_type=message_type,
        attachments=attachments,
        related_to=related_to,
    )

    # 2 + 3. Notify receiver
    try:
        profiles = await message_service.get_user_profiles([sender_id])
        sender_name = profiles.get(str(sender_id), {}).get("fullName") or "Someone"

        notification_store.create(
            saved_message["receiver"],
            MessageReceivedPayload(
                title=f"New message from {sender_name}",
                message=saved_message["content"][:preview_length],
                link=f"/messages/{sender_id}",
                messageId=saved_message["id"],
                senderId=str(sender_id),
                senderName=sender_name,
            ),
        )
    except Exception as e:
        logger.warning(
            f"Failed to create message notification for user {receiver_id}: {e}"
        )

    return saved_message


async def list_conversations(
    message_service: MessageService,
    user_id: str,
) -> List[Dict[str, Any]]:
    """
    Conversation summaries for the user, most recent first.

    1. Fetch the user's message feed
    2. Look up counterpart profiles
    3. Aggregate into one summary per counterpart
    """
    feed = await message_service.get_feed(user_id)
    if not feed:
        return []

    counterpart_ids = {counterpart_of(msg, str(user_id)) for msg in feed}
    counterpart_ids.discard(None)
    profiles = await message_service.get_user_profiles(sorted(counterpart_ids))

    return aggregate_conversations(feed, str(user_id), users=profiles)


async def open_conversation(
    message_service: MessageService,
    user_id: str,
    other_user_id: str,
    limit: int = 50,
) -> Dict[str, Any]:
    """
    Return the thread with ``other_user_id`` and mark its unread messages read.

    Only messages addressed to the viewer are marked; the returned messages
    reflect the new read state.
    """
    messages = await message_service.get_conversation(user_id, other_user_id, limit=limit)

    unread_ids = [
        msg["id"] for msg in messages
        if msg["receiver"] == str(user_id) and not msg["isRead"]
    ]

    if unread_ids:
        await message_service.mark_messages_read(unread_ids)
        unread = set(unread_ids)
        for msg in messages:
            if msg["id"] in unread:
                msg["isRead"] = True

    return {"messages": messages, "count": len(messages)}


async def message_stats(
    message_service: MessageService,
    user_id: str,
) -> Dict[str, int]:
    """Sent/received/unread totals plus the number of conversations."""
    stats = await message_service.get_stats(user_id)
    conversations = await list_conversations(message_service, user_id)
    stats["totalConversations"] = len(conversations)
    return stats
