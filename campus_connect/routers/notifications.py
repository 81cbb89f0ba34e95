"""
Notification API endpoints.

Handles in-app notification retrieval and management.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from common.utils import success_response
from common.utils.exceptions import ForbiddenException, NotFoundException

from campus_connect.config import settings
from campus_connect.dependencies import require_auth, get_notification_store
from campus_connect.schemas.notifications import CreateNotificationRequest
from campus_connect.services.notifications import NotificationStore


router = APIRouter(prefix="/notifications", tags=["Notifications"])

StoreDep = Annotated[NotificationStore, Depends(get_notification_store)]


# =============================================================================
# Notification Endpoints
# =============================================================================

@router.get("")
async def get_notifications(
    user: Annotated[dict, Depends(require_auth)],
    store: StoreDep,
    limit: int = Query(
        default=settings.NOTIFICATION_DEFAULT_LIMIT,
        ge=1,
        le=settings.NOTIFICATION_MAX_LIMIT,
    ),
):
    """
    Get the most recent notifications for the current user.

    Args:
        limit: Maximum number of notifications (default 20)

    Returns:
        Notifications (newest first) and the unread count
    """
    user_id = user.get("user_id")

    notifications = store.list(user_id, limit=limit)

    return success_response({
        "notifications": [n.to_dict() for n in notifications],
        "unreadCount": store.unread_count(user_id),
    })


@router.get("/unread-count")
async def get_unread_count(
    user: Annotated[dict, Depends(require_auth)],
    store: StoreDep,
):
    """Get count of unread notifications."""
    count = store.unread_count(user.get("user_id"))

    return success_response({"count": count})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_notification(
    body: CreateNotificationRequest,
    user: Annotated[dict, Depends(require_auth)],
    store: StoreDep,
):
    """
    Create a notification for a user.

    Used by the other campus services when a domain event happens. Only
    admins may notify someone other than themselves.
    """
    if body.userId != user.get("user_id") and user.get("role") != "admin":
        raise ForbiddenException(
            message="Not authorized to notify other users",
            code="NOT_AUTHORIZED",
        )

    notification = store.create(body.userId, body.notification)

    return success_response(notification.to_dict(), message="Notification created")


@router.put("/read-all")
async def mark_all_as_read(
    user: Annotated[dict, Depends(require_auth)],
    store: StoreDep,
):
    """Mark all notifications as read."""
    result = store.mark_all_read(user.get("user_id"))

    return success_response(result, message="All notifications marked as read")


@router.put("/{notification_id}/read")
async def mark_as_read(
    notification_id: str,
    user: Annotated[dict, Depends(require_auth)],
    store: StoreDep,
):
    """
    Mark a notification as read.

    Args:
        notification_id: ID of the notification to mark as read
    """
    notification = store.mark_read(user.get("user_id"), notification_id)

    if notification is None:
        raise NotFoundException(
            message="Notification not found",
            code="NOTIFICATION_NOT_FOUND",
        )

    return success_response(notification.to_dict(), message="Notification marked as read")


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    user: Annotated[dict, Depends(require_auth)],
    store: StoreDep,
):
    """Delete a notification. Deleting an unknown id still succeeds."""
    result = store.delete(user.get("user_id"), notification_id)

    return success_response(result, message="Notification deleted")
