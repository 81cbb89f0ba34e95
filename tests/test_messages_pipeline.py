"""Unit tests for direct message pipeline functions."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from common.utils.exceptions import NotFoundException
from campus_connect.pipelines.messages import (
    send_direct_message,
    list_conversations,
    open_conversation,
    message_stats,
)
from campus_connect.schemas.notifications import NotificationType


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_message_service():
    service = AsyncMock()
    return service


@pytest.fixture
def saved_message(make_message, sample_user_id, other_user_id):
    return make_message(sample_user_id, other_user_id, content="Want to pair on the ML project?")


# ─────────────────────────────────────────────────────────────────
# send_direct_message
# ─────────────────────────────────────────────────────────────────


class TestSendDirectMessage:
    @pytest.mark.asyncio
    async def test_saves_and_notifies_receiver(
        self, mock_message_service, store, saved_message, sample_user_id, other_user_id,
    ):
        mock_message_service.send_message.return_value = saved_message
        mock_message_service.get_user_profiles.return_value = {
            sample_user_id: {"fullName": "Sara Student", "email": "sara@campus.edu", "avatar": None},
        }

        result = await send_direct_message(
            mock_message_service, store,
            sender_id=sample_user_id,
            receiver_id=other_user_id,
            content="Want to pair on the ML project?",
        )

        assert result is saved_message
        inbox = store.list(other_user_id)
        assert len(inbox) == 1
        notification = inbox[0]
        assert notification.type == NotificationType.MESSAGE_RECEIVED
        assert notification.payload.title == "New message from Sara Student"
        assert notification.payload.messageId == saved_message["id"]
        assert notification.payload.senderId == sample_user_id
        assert notification.payload.link == f"/messages/{sample_user_id}"
        assert store.list(sample_user_id) == []

    @pytest.mark.asyncio
    async def test_preview_is_truncated(
        self, mock_message_service, store, make_message, sample_user_id, other_user_id,
    ):
        long_text = "a" * 300
        mock_message_service.send_message.return_value = make_message(
            sample_user_id, other_user_id, content=long_text,
        )
        mock_message_service.get_user_profiles.return_value = {}

        await send_direct_message(
            mock_message_service, store, sample_user_id, other_user_id, long_text,
            preview_length=100,
        )

        notification = store.list(other_user_id)[0]
        assert notification.payload.message == "a" * 100
        assert notification.payload.senderName == "Someone"

    @pytest.mark.asyncio
    async def test_validation_failure_creates_no_notification(
        self, mock_message_service, store, sample_user_id, other_user_id,
    ):
        mock_message_service.send_message.side_effect = NotFoundException(
            "Receiver not found", code="RECEIVER_NOT_FOUND",
        )

        with pytest.raises(NotFoundException):
            await send_direct_message(mock_message_service, store, sample_user_id, other_user_id, "hi")

        assert store.list(other_user_id) == []

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_fail_send(
        self, mock_message_service, saved_message, sample_user_id, other_user_id,
    ):
        mock_message_service.send_message.return_value = saved_message
        mock_message_service.get_user_profiles.return_value = {}
        broken_store = MagicMock()
        broken_store.create.side_effect = RuntimeError("store unavailable")

        result = await send_direct_message(
            mock_message_service, broken_store, sample_user_id, other_user_id, "hi",
        )

        assert result is saved_message

    @pytest.mark.asyncio
    async def test_passes_message_fields_to_service(
        self, mock_message_service, store, saved_message, sample_user_id, other_user_id,
    ):
        mock_message_service.send_message.return_value = saved_message
        mock_message_service.get_user_profiles.return_value = {}
        attachments = [{"name": "cv.pdf", "url": "https://files.example/cv.pdf", "type": "pdf", "size": 1200}]

        await send_direct_message(
            mock_message_service, store, sample_user_id, other_user_id, "my CV",
            message_type="file",
            attachments=attachments,
            related_to={"type": "opportunity", "id": "abc"},
        )

        kwargs = mock_message_service.send_message.call_args.kwargs
        assert kwargs["message_type"] == "file"
        assert kwargs["attachments"] == attachments
        assert kwargs["related_to"] == {"type": "opportunity", "id": "abc"}


# ─────────────────────────────────────────────────────────────────
# list_conversations
# ─────────────────────────────────────────────────────────────────


class TestListConversations:
    @pytest.mark.asyncio
    async def test_empty_feed_skips_profile_lookup(self, mock_message_service, sample_user_id):
        mock_message_service.get_feed.return_value = []

        assert await list_conversations(mock_message_service, sample_user_id) == []
        mock_message_service.get_user_profiles.assert_not_called()

    @pytest.mark.asyncio
    async def test_summaries_with_profiles(self, mock_message_service, make_message):
        feed = [
            make_message("me", "bob", minutes=1),
            make_message("cat", "me", minutes=2),
            make_message("bob", "me", minutes=3),
        ]
        mock_message_service.get_feed.return_value = feed
        mock_message_service.get_user_profiles.return_value = {
            "bob": {"fullName": "Bob", "email": "bob@campus.edu", "avatar": None},
        }

        conversations = await list_conversations(mock_message_service, "me")

        mock_message_service.get_user_profiles.assert_awaited_once_with(["bob", "cat"])
        assert [c["counterpart"]["id"] for c in conversations] == ["bob", "cat"]
        assert conversations[0]["counterpart"]["fullName"] == "Bob"
        assert conversations[0]["lastMessage"] is feed[2]
        assert conversations[0]["unreadCount"] == 1
        # unknown user keeps only the id
        assert conversations[1]["counterpart"] == {"id": "cat"}


# ─────────────────────────────────────────────────────────────────
# open_conversation
# ─────────────────────────────────────────────────────────────────


class TestOpenConversation:
    @pytest.mark.asyncio
    async def test_marks_incoming_unread_as_read(self, mock_message_service, make_message):
        incoming = make_message("bob", "me", minutes=2)
        outgoing = make_message("me", "bob", minutes=1)
        mock_message_service.get_conversation.return_value = [incoming, outgoing]

        result = await open_conversation(mock_message_service, "me", "bob", limit=20)

        mock_message_service.get_conversation.assert_awaited_once_with("me", "bob", limit=20)
        mock_message_service.mark_messages_read.assert_awaited_once_with([incoming["id"]])
        assert result["count"] == 2
        assert incoming["isRead"] is True
        assert outgoing["isRead"] is False

    @pytest.mark.asyncio
    async def test_nothing_unread_skips_update(self, mock_message_service, make_message):
        mock_message_service.get_conversation.return_value = [
            make_message("bob", "me", is_read=True),
        ]

        await open_conversation(mock_message_service, "me", "bob")

        mock_message_service.mark_messages_read.assert_not_called()


# ─────────────────────────────────────────────────────────────────
# message_stats
# ─────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_message_stats_adds_conversation_count(mock_message_service, make_message):
    mock_message_service.get_stats.return_value = {"totalSent": 3, "totalReceived": 2, "unreadCount": 1}
    mock_message_service.get_feed.return_value = [
        make_message("me", "bob"),
        make_message("cat", "me"),
    ]
    mock_message_service.get_user_profiles.return_value = {}

    stats = await message_stats(mock_message_service, "me")

    assert stats == {"totalSent": 3, "totalReceived": 2, "unreadCount": 1, "totalConversations": 2}
