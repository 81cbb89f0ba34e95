"""
Direct message API endpoints.

Paths mirror the frontend ``messagesAPI`` client.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from common.utils import success_response

from campus_connect.config import settings
from campus_connect.dependencies import (
    require_auth,
    get_message_service,
    get_notification_store,
)
from campus_connect.pipelines.messages import (
    send_direct_message,
    list_conversations,
    open_conversation,
    message_stats,
)
from campus_connect.schemas.messages import SendMessageRequest, MarkAllReadRequest
from campus_connect.services.messages import MessageService
from campus_connect.services.notifications import NotificationStore


router = APIRouter(prefix="/messages", tags=["Messages"])

MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]


# =============================================================================
# Conversations
# =============================================================================

@router.get("")
@router.get("/conversations")
async def get_conversations(
    user: Annotated[dict, Depends(require_auth)],
    service: MessageServiceDep,
):
    """List conversation summaries, most recent first."""
    conversations = await list_conversations(service, user.get("user_id"))

    return success_response(
        {"conversations": conversations, "count": len(conversations)},
        message="Conversations retrieved successfully",
    )


@router.get("/conversation/{other_user_id}")
async def get_conversation(
    other_user_id: str,
    user: Annotated[dict, Depends(require_auth)],
    service: MessageServiceDep,
    limit: int = Query(default=settings.CONVERSATION_DEFAULT_LIMIT, ge=1, le=200),
):
    """Get the thread with another user and mark it read."""
    result = await open_conversation(
        service,
        user_id=user.get("user_id"),
        other_user_id=other_user_id,
        limit=limit,
    )

    return success_response(result, message="Conversation retrieved successfully")


@router.delete("/conversation/{other_user_id}")
async def delete_conversation(
    other_user_id: str,
    user: Annotated[dict, Depends(require_auth)],
    service: MessageServiceDep,
):
    """Delete the conversation with another user for the current user only."""
    await service.delete_conversation(user.get("user_id"), other_user_id)

    return success_response(message="Conversation deleted successfully")


# =============================================================================
# Messages
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def send_message(
    body: SendMessageRequest,
    user: Annotated[dict, Depends(require_auth)],
    service: MessageServiceDep,
    store: Annotated[NotificationStore, Depends(get_notification_store)],
):
    """Send a direct message."""
    message = await send_direct_message(
        service,
        store,
        sender_id=user.get("user_id"),
        receiver_id=body.receiver,
        content=body.content,
        message_type=body.messageType,
        attachments=[a.model_dump() for a in body.attachments],
        related_to=body.relatedTo.model_dump() if body.relatedTo else None,
        preview_length=settings.MESSAGE_PREVIEW_LENGTH,
    )

    return success_response({"message": message}, message="Message sent successfully")


@router.put("/mark-all-read")
async def mark_all_as_read(
    body: MarkAllReadRequest,
    user: Annotated[dict, Depends(require_auth)],
    service: MessageServiceDep,
):
    """Mark every message from one user as read."""
    count = await service.mark_all_from(user.get("user_id"), body.userId)

    return success_response({"count": count}, message="All messages marked as read")


@router.put("/{message_id}/read")
async def mark_as_read(
    message_id: str,
    user: Annotated[dict, Depends(require_auth)],
    service: MessageServiceDep,
):
    """Mark a message as read (receiver only)."""
    message = await service.mark_as_read(message_id, user.get("user_id"))

    return success_response({"message": message}, message="Message marked as read")


@router.delete("/{message_id}")
async def delete_message(
    message_id: str,
    user: Annotated[dict, Depends(require_auth)],
    service: MessageServiceDep,
):
    """Delete a message for the current user."""
    await service.delete_for_user(message_id, user.get("user_id"))

    return success_response(message="Message deleted successfully")


@router.get("/unread-count")
async def get_unread_count(
    user: Annotated[dict, Depends(require_auth)],
    service: MessageServiceDep,
):
    """Count of unread messages addressed to the current user."""
    count = await service.get_unread_count(user.get("user_id"))

    return success_response({"count": count}, message="Unread count retrieved successfully")


@router.get("/search")
async def search_messages(
    user: Annotated[dict, Depends(require_auth)],
    service: MessageServiceDep,
    query: str = Query(default=""),
    limit: int = Query(default=50, ge=1, le=200),
):
    """Search the current user's messages."""
    messages = await service.search(user.get("user_id"), query, limit=limit)

    return success_response(
        {"messages": messages, "count": len(messages)},
        message="Messages found successfully",
    )


@router.get("/stats")
async def get_message_stats(
    user: Annotated[dict, Depends(require_auth)],
    service: MessageServiceDep,
):
    """Sent/received/unread totals and conversation count."""
    stats = await message_stats(service, user.get("user_id"))

    return success_response(stats, message="Statistics retrieved successfully")
