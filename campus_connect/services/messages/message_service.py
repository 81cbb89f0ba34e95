"""
Direct message service.

Stores one document per message in the ``messages`` collection. Deleting a
message only hides it for the user who deleted it; it is flagged
``isDeleted`` once both participants have removed it.
"""

import re
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from common.logger import get_logger
from common.utils.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 2000
PROFILE_PROJECTION = {"fullName": 1, "email": 1, "avatar": 1}


def _user_object_id(user_id: str) -> ObjectId:
    if not ObjectId.is_valid(str(user_id)):
        raise BadRequestException(message="Invalid user id", code="INVALID_USER_ID")
    return ObjectId(str(user_id))


def _message_object_id(message_id: str) -> ObjectId:
    if not ObjectId.is_valid(str(message_id)):
        raise NotFoundException(message="Message not found", code="MESSAGE_NOT_FOUND")
    return ObjectId(str(message_id))


def _between(user_a: ObjectId, user_b: ObjectId) -> Dict[str, Any]:
    return {
        "$or": [
            {"sender": user_a, "receiver": user_b},
            {"sender": user_b, "receiver": user_a},
        ]
    }


class MessageService:
    """Handles CRUD operations for direct messages between two users."""

    def __init__(self, db: AsyncIOMotorDatabase, max_length: int = MAX_MESSAGE_LENGTH):
        self._db = db
        self._collection = db["messages"]
        self._users = db["users"]
        self._max_length = max_length

    async def ensure_indexes(self) -> None:
        """Create the indexes the conversation and unread queries rely on."""
        await self._collection.create_index([("sender", ASCENDING), ("receiver", ASCENDING)])
        await self._collection.create_index([("receiver", ASCENDING), ("isRead", ASCENDING)])
        await self._collection.create_index([("createdAt", DESCENDING)])

    async def send_message(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        message_type: str = "text",
        attachments: Optional[List[Dict[str, Any]]] = None,
        related_to: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Store a new message from sender to receiver.

        Raises:
            ValidationException: Empty or oversized content
            BadRequestException: Sender and receiver are the same user
            NotFoundException: Receiver does not exist
        """
        content = content.strip() if content else ""

        if not content:
            raise ValidationException(
                message="Message content cannot be empty",
                code="EMPTY_MESSAGE",
            )

        if len(content) > self._max_length:
            raise ValidationException(
                message=f"Message cannot be more than {self._max_length} characters",
                code="MESSAGE_TOO_LONG",
            )

        if str(sender_id) == str(receiver_id):
            raise BadRequestException(
                message="Cannot send message to yourself",
                code="SELF_MESSAGE",
            )

        if not ObjectId.is_valid(str(receiver_id)):
            raise NotFoundException(message="Receiver not found", code="RECEIVER_NOT_FOUND")

        receiver_oid = ObjectId(str(receiver_id))
        receiver = await self._users.find_one({"_id": receiver_oid}, PROFILE_PROJECTION)
        if not receiver:
            raise NotFoundException(message="Receiver not found", code="RECEIVER_NOT_FOUND")

        related = related_to or {}
        related_id = related.get("id")
        now = datetime.now(timezone.utc)

        message_doc = {
            "sender": _user_object_id(sender_id),
            "receiver": receiver_oid,
            "content": content,
            "messageType": message_type,
            "attachments": attachments or [],
            "isRead": False,
            "readAt": None,
            "isDeleted": False,
            "deletedBy": [],
            "relatedTo": {
                "type": related.get("type", "general"),
                "id": ObjectId(related_id) if related_id and ObjectId.is_valid(related_id) else None,
            },
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._collection.insert_one(message_doc)
        message_doc["_id"] = result.inserted_id

        logger.info(f"Message sent from {sender_id} to {receiver_id}")
        return self._format_message(message_doc)

    async def get_feed(self, user_id: str) -> List[Dict[str, Any]]:
        """Every message the user sent or received and has not deleted, oldest first."""
        user_oid = _user_object_id(user_id)
        cursor = self._collection.find({
            "$or": [{"sender": user_oid}, {"receiver": user_oid}],
            "deletedBy": {"$nin": [user_oid]},
        }).sort("createdAt", 1)

        docs = await cursor.to_list(length=None)
        return [self._format_message(doc) for doc in docs]

    async def get_conversation(
        self,
        user_id: str,
        other_user_id: str,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        """Messages between two users, newest first, hiding those the user deleted."""
        user_oid = _user_object_id(user_id)
        other_oid = _user_object_id(other_user_id)

        query = _between(user_oid, other_oid)
        query["deletedBy"] = {"$nin": [user_oid]}

        cursor = self._collection.find(query).sort("createdAt", -1).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [self._format_message(doc) for doc in docs]

    async def mark_as_read(self, message_id: str, user_id: str) -> Dict[str, Any]:
        """
        Mark a message as read. Only its receiver may do so.

        Raises:
            NotFoundException: Message does not exist
            ForbiddenException: Caller is not the receiver
        """
        message_oid = _message_object_id(message_id)
        message = await self._collection.find_one({"_id": message_oid})

        if not message:
            raise NotFoundException(message="Message not found", code="MESSAGE_NOT_FOUND")

        if str(message["receiver"]) != str(user_id):
            raise ForbiddenException(
                message="Not authorized to mark this message as read",
                code="NOT_MESSAGE_RECEIVER",
            )

        if message.get("isRead"):
            return self._format_message(message)

        now = datetime.now(timezone.utc)
        await self._collection.update_one(
            {"_id": message_oid},
            {"$set": {"isRead": True, "readAt": now, "updatedAt": now}},
        )

        message["isRead"] = True
        message["readAt"] = now
        return self._format_message(message)

    async def mark_messages_read(self, message_ids: List[str]) -> int:
        """Mark the given messages as read; returns how many changed."""
        if not message_ids:
            return 0

        now = datetime.now(timezone.utc)
        result = await self._collection.update_many(
            {
                "_id": {"$in": [ObjectId(mid) for mid in message_ids]},
                "isRead": False,
            },
            {"$set": {"isRead": True, "readAt": now, "updatedAt": now}},
        )
        return result.modified_count

    async def mark_all_from(self, user_id: str, sender_id: str) -> int:
        """Mark every unread message from ``sender_id`` to the user as read."""
        now = datetime.now(timezone.utc)
        result = await self._collection.update_many(
            {
                "sender": _user_object_id(sender_id),
                "receiver": _user_object_id(user_id),
                "isRead": False,
            },
            {"$set": {"isRead": True, "readAt": now, "updatedAt": now}},
        )

        logger.info(f"Marked {result.modified_count} messages from {sender_id} as read for user {user_id}")
        return result.modified_count

    async def delete_for_user(self, message_id: str, user_id: str) -> Dict[str, Any]:
        """
        Hide a message for one participant.

        Raises:
            NotFoundException: Message does not exist
            ForbiddenException: Caller is neither sender nor receiver
        """
        message_oid = _message_object_id(message_id)
        message = await self._collection.find_one({"_id": message_oid})

        if not message:
            raise NotFoundException(message="Message not found", code="MESSAGE_NOT_FOUND")

        participants = {str(message["sender"]), str(message["receiver"])}
        if str(user_id) not in participants:
            raise ForbiddenException(
                message="Not authorized to delete this message",
                code="NOT_MESSAGE_PARTICIPANT",
            )

        # Both participants may delete at once; let the server merge deletedBy.
        updated = await self._collection.find_one_and_update(
            {"_id": message_oid},
            {
                "$addToSet": {"deletedBy": ObjectId(str(user_id))},
                "$set": {"updatedAt": datetime.now(timezone.utc)},
            },
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFoundException(message="Message not found", code="MESSAGE_NOT_FOUND")

        flagged = await self._collection.update_one(
            {
                "_id": message_oid,
                "deletedBy": {"$all": [message["sender"], message["receiver"]]},
            },
            {"$set": {"isDeleted": True}},
        )
        if flagged.matched_count:
            updated["isDeleted"] = True

        logger.info(f"Message {message_id} deleted for user {user_id}")
        return self._format_message(updated)

    async def delete_conversation(self, user_id: str, other_user_id: str) -> int:
        """Hide every message between two users for ``user_id``."""
        user_oid = _user_object_id(user_id)
        other_oid = _user_object_id(other_user_id)
        now = datetime.now(timezone.utc)

        result = await self._collection.update_many(
            _between(user_oid, other_oid),
            {"$addToSet": {"deletedBy": user_oid}, "$set": {"updatedAt": now}},
        )

        both_deleted = _between(user_oid, other_oid)
        both_deleted["deletedBy"] = {"$all": [user_oid, other_oid]}
        await self._collection.update_many(both_deleted, {"$set": {"isDeleted": True}})

        logger.info(f"Conversation with {other_user_id} deleted for user {user_id}")
        return result.modified_count

    async def get_unread_count(self, user_id: str) -> int:
        """Unread messages addressed to the user."""
        user_oid = _user_object_id(user_id)
        return await self._collection.count_documents({
            "receiver": user_oid,
            "isRead": False,
            "deletedBy": {"$nin": [user_oid]},
        })

    async def search(self, user_id: str, query: str, limit: int = 50) -> List[Dict[str, Any]]:
        """Case-insensitive substring search over the user's messages."""
        query = query.strip() if query else ""
        if not query:
            raise BadRequestException(
                message="Please provide search query",
                code="EMPTY_QUERY",
            )

        user_oid = _user_object_id(user_id)
        cursor = self._collection.find({
            "$or": [{"sender": user_oid}, {"receiver": user_oid}],
            "content": {"$regex": re.escape(query), "$options": "i"},
            "deletedBy": {"$nin": [user_oid]},
        }).sort("createdAt", -1).limit(limit)

        docs = await cursor.to_list(length=limit)
        return [self._format_message(doc) for doc in docs]

    async def get_stats(self, user_id: str) -> Dict[str, int]:
        """Sent, received and unread totals for the user."""
        user_oid = _user_object_id(user_id)
        total_sent = await self._collection.count_documents({"sender": user_oid})
        total_received = await self._collection.count_documents({"receiver": user_oid})
        unread = await self.get_unread_count(user_id)

        return {
            "totalSent": total_sent,
            "totalReceived": total_received,
            "unreadCount": unread,
        }

    async def get_user_profiles(self, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """Public profile fields keyed by user id; unknown ids are left out."""
        oids = [ObjectId(uid) for uid in user_ids if ObjectId.is_valid(str(uid))]
        if not oids:
            return {}

        cursor = self._users.find({"_id": {"$in": oids}}, PROFILE_PROJECTION)
        docs = await cursor.to_list(length=len(oids))

        return {
            str(doc["_id"]): {
                "fullName": doc.get("fullName"),
                "email": doc.get("email"),
                "avatar": doc.get("avatar"),
            }
            for doc in docs
        }

    def _format_message(self, msg: Dict[str, Any]) -> Dict[str, Any]:
        """Format a message document for API responses."""
        related = msg.get("relatedTo") or {}
        return {
            "id": str(msg["_id"]),
            "sender": str(msg["sender"]),
            "receiver": str(msg["receiver"]),
            "content": msg.get("content", ""),
            "messageType": msg.get("messageType", "text"),
            "attachments": msg.get("attachments", []),
            "isRead": msg.get("isRead", False),
            "readAt": msg.get("readAt"),
            "isDeleted": msg.get("isDeleted", False),
            "deletedBy": [str(uid) for uid in msg.get("deletedBy") or []],
            "relatedTo": {
                "type": related.get("type", "general"),
                "id": str(related["id"]) if related.get("id") else None,
            },
            "createdAt": msg.get("createdAt"),
        }
