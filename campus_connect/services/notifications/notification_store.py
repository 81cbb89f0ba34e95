"""
In-memory notification store.

Keeps one inbox per user, newest first, for the lifetime of the process.
Nothing is persisted: restarting the API empties every inbox.
"""

import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from common.logger import get_logger
from campus_connect.schemas.notifications import (
    Notification,
    NotificationPayload,
    parse_notification_payload,
)

logger = get_logger(__name__)


class NotificationStore:
    """
    Per-user notification inboxes with read-state tracking.

    Construct one per application (see ``init_all_services``) and share it;
    tests build a fresh instance each. Absent users and unknown ids are
    never errors: reads return empty results and writes are no-ops.
    """

    def __init__(self):
        self._inboxes: Dict[str, List[Notification]] = {}
        self._lock = threading.RLock()
        self._last_id = 0

    def _next_id(self) -> str:
        """Millisecond timestamp, bumped so ids never repeat within the store."""
        candidate = int(time.time() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def create(
        self,
        user_id: str,
        notification: Union[NotificationPayload, Dict[str, Any]],
    ) -> Notification:
        """
        Add a notification to the top of a user's inbox.

        Args:
            user_id: Owner of the inbox
            notification: Typed payload, or a dict carrying a ``type`` key

        Returns:
            The stored notification (unread, stamped with now)
        """
        try:
            payload = (
                parse_notification_payload(notification)
                if isinstance(notification, dict)
                else notification
            )
            with self._lock:
                record = Notification(
                    id=self._next_id(),
                    payload=payload,
                    is_read=False,
                    created_at=datetime.now(timezone.utc),
                )
                self._inboxes.setdefault(user_id, []).insert(0, record)

            logger.debug(
                f"Created {record.type.value} notification for user {user_id}",
                meta={"notificationId": record.id},
            )
            return record
        except Exception as e:
            logger.error(f"Create notification error: {e}", meta={"userId": user_id})
            raise

    def list(self, user_id: str, limit: int = 20) -> List[Notification]:
        """Return the ``limit`` most recent notifications, newest first."""
        try:
            if limit < 1:
                return []
            with self._lock:
                return list(self._inboxes.get(user_id, [])[:limit])
        except Exception as e:
            logger.error(f"Get notifications error: {e}", meta={"userId": user_id})
            raise

    def mark_read(self, user_id: str, notification_id: str) -> Optional[Notification]:
        """
        Mark one notification as read.

        Returns:
            The updated notification, or None if the user has no such id
        """
        try:
            with self._lock:
                for record in self._inboxes.get(user_id, []):
                    if record.id == notification_id:
                        record.is_read = True
                        return record
            return None
        except Exception as e:
            logger.error(f"Mark as read error: {e}", meta={"userId": user_id})
            raise

    def mark_all_read(self, user_id: str) -> Dict[str, bool]:
        """Mark every notification in the inbox as read."""
        try:
            with self._lock:
                for record in self._inboxes.get(user_id, []):
                    record.is_read = True
            return {"success": True}
        except Exception as e:
            logger.error(f"Mark all as read error: {e}", meta={"userId": user_id})
            raise

    def delete(self, user_id: str, notification_id: str) -> Dict[str, bool]:
        """Remove a notification. Deleting a missing id still succeeds."""
        try:
            with self._lock:
                inbox = self._inboxes.get(user_id)
                if inbox:
                    self._inboxes[user_id] = [
                        record for record in inbox if record.id != notification_id
                    ]
            return {"success": True}
        except Exception as e:
            logger.error(f"Delete notification error: {e}", meta={"userId": user_id})
            raise

    def unread_count(self, user_id: str) -> int:
        """Count unread notifications; 0 for users without an inbox."""
        try:
            with self._lock:
                return sum(1 for record in self._inboxes.get(user_id, []) if not record.is_read)
        except Exception as e:
            logger.error(f"Get unread count error: {e}", meta={"userId": user_id})
            raise

    def clear(self) -> None:
        """Drop every inbox."""
        with self._lock:
            self._inboxes.clear()
