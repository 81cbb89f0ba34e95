"""Unit tests for the in-memory NotificationStore."""

import pytest
from unittest.mock import patch
from pydantic import ValidationError

from campus_connect.schemas.notifications import (
    EventReminderPayload,
    MessageReceivedPayload,
    NotificationType,
    ProfileViewPayload,
    SkillMatchPayload,
)
from campus_connect.services.notifications import NotificationStore


def _message_received(n=1):
    return MessageReceivedPayload(
        title="New message",
        message=f"hello #{n}",
        messageId=f"m{n}",
        senderId="u2",
    )


def _event_reminder():
    return EventReminderPayload(
        title="Hackathon tomorrow",
        message="Campus hackathon starts at 9am",
        eventId="e1",
        startsAt="2026-03-03T09:00:00Z",
    )


def _profile_view():
    return ProfileViewPayload(
        title="Profile view",
        message="A recruiter viewed your profile",
        viewerId="r1",
    )


# ─────────────────────────────────────────────────────────────────
# create
# ─────────────────────────────────────────────────────────────────


class TestCreate:
    def test_new_notification_is_unread_with_fresh_id(self, store):
        record = store.create("u1", _message_received())

        assert record.is_read is False
        assert record.id
        assert record.type == NotificationType.MESSAGE_RECEIVED
        assert record.created_at.tzinfo is not None

    def test_newest_first(self, store):
        first = store.create("u1", _message_received(1))
        second = store.create("u1", _message_received(2))

        assert [n.id for n in store.list("u1")] == [second.id, first.id]

    def test_ids_unique_even_within_same_millisecond(self, store):
        with patch("campus_connect.services.notifications.notification_store.time.time", return_value=1000.0):
            ids = [store.create("u1", _message_received(i)).id for i in range(5)]

        assert len(set(ids)) == 5

    def test_accepts_dict_payload(self, store):
        record = store.create("u1", {
            "type": "skill_match",
            "title": "New match",
            "message": "Backend intern at Acme matches your skills",
            "opportunityId": "o1",
            "matchedSkills": ["python", "mongodb"],
        })

        assert isinstance(record.payload, SkillMatchPayload)
        assert record.payload.matchedSkills == ["python", "mongodb"]

    def test_unknown_type_rejected(self, store):
        with pytest.raises(ValidationError):
            store.create("u1", {"type": "party_invite", "title": "x", "message": "y"})

        assert store.list("u1") == []

    def test_to_dict_flattens_payload(self, store):
        record = store.create("u1", _profile_view())

        data = record.to_dict()

        assert data["id"] == record.id
        assert data["type"] == "profile_view"
        assert data["viewerId"] == "r1"
        assert data["title"] == "Profile view"
        assert data["isRead"] is False
        assert "createdAt" in data
        assert "link" not in data

    def test_users_are_partitioned(self, store):
        store.create("u1", _message_received())

        assert store.list("u2") == []
        assert store.unread_count("u2") == 0


# ─────────────────────────────────────────────────────────────────
# list
# ─────────────────────────────────────────────────────────────────


class TestList:
    def test_returns_n_most_recent(self, store):
        created = [store.create("u1", _message_received(i)) for i in range(30)]

        listed = store.list("u1", 5)

        assert [n.id for n in listed] == [n.id for n in reversed(created)][:5]

    def test_default_limit_is_20(self, store):
        for i in range(25):
            store.create("u1", _message_received(i))

        assert len(store.list("u1")) == 20

    def test_unknown_user_gets_empty_list(self, store):
        assert store.list("nonexistent-user") == []

    def test_non_positive_limit_gets_empty_list(self, store):
        store.create("u1", _message_received())

        assert store.list("u1", 0) == []
        assert store.list("u1", -3) == []

    def test_does_not_change_read_state(self, store):
        store.create("u1", _message_received())

        store.list("u1")

        assert store.unread_count("u1") == 1

    def test_returned_list_is_a_copy(self, store):
        store.create("u1", _message_received())

        store.list("u1").clear()

        assert len(store.list("u1")) == 1


# ─────────────────────────────────────────────────────────────────
# mark_read / mark_all_read
# ─────────────────────────────────────────────────────────────────


class TestMarkRead:
    def test_marks_single_notification(self, store):
        first = store.create("u1", _message_received(1))
        store.create("u1", _message_received(2))

        result = store.mark_read("u1", first.id)

        assert result is first
        assert result.is_read is True
        assert store.unread_count("u1") == 1

    def test_unknown_id_returns_none_and_changes_nothing(self, store):
        store.create("u1", _message_received(1))
        store.create("u1", _message_received(2))

        assert store.mark_read("u1", "does-not-exist") is None
        assert all(not n.is_read for n in store.list("u1"))

    def test_other_users_id_not_marked(self, store):
        record = store.create("u1", _message_received())

        assert store.mark_read("u2", record.id) is None
        assert record.is_read is False

    def test_mark_all_read(self, store):
        for i in range(3):
            store.create("u1", _message_received(i))

        assert store.mark_all_read("u1") == {"success": True}
        assert store.unread_count("u1") == 0

    def test_mark_all_read_for_unknown_user_succeeds(self, store):
        assert store.mark_all_read("ghost") == {"success": True}
        assert store.list("ghost") == []


# ─────────────────────────────────────────────────────────────────
# delete / unread_count
# ─────────────────────────────────────────────────────────────────


class TestDelete:
    def test_removes_notification(self, store):
        keep = store.create("u1", _message_received(1))
        drop = store.create("u1", _message_received(2))

        assert store.delete("u1", drop.id) == {"success": True}
        assert [n.id for n in store.list("u1")] == [keep.id]

    def test_delete_is_idempotent(self, store):
        record = store.create("u1", _message_received())

        assert store.delete("u1", record.id) == {"success": True}
        assert store.delete("u1", record.id) == {"success": True}
        assert store.list("u1") == []

    def test_delete_for_unknown_user_succeeds(self, store):
        assert store.delete("ghost", "nope") == {"success": True}

    def test_unread_count_tracks_unread_records(self, store):
        a = store.create("u1", _message_received(1))
        store.create("u1", _message_received(2))
        store.create("u1", _message_received(3))
        store.mark_read("u1", a.id)

        assert store.unread_count("u1") == 2

    def test_clear_empties_every_inbox(self, store):
        store.create("u1", _message_received())
        store.create("u2", _message_received())

        store.clear()

        assert store.list("u1") == []
        assert store.list("u2") == []


# ─────────────────────────────────────────────────────────────────
# Failure propagation
# ─────────────────────────────────────────────────────────────────


class TestFaults:
    def test_internal_error_is_logged_and_reraised(self, store):
        store._inboxes = None  # simulate corrupted state

        with patch("campus_connect.services.notifications.notification_store.logger") as mock_logger:
            with pytest.raises(AttributeError):
                store.unread_count("u1")

        mock_logger.error.assert_called_once()


# ─────────────────────────────────────────────────────────────────
# Scenario
# ─────────────────────────────────────────────────────────────────


def test_inbox_scenario():
    store = NotificationStore()
    store.create("u1", _message_received())
    store.create("u1", _event_reminder())
    store.create("u1", _profile_view())

    latest = store.list("u1", 2)

    assert [n.type for n in latest] == [
        NotificationType.PROFILE_VIEW,
        NotificationType.EVENT_REMINDER,
    ]
    assert store.unread_count("u1") == 3

    store.mark_all_read("u1")

    assert store.unread_count("u1") == 0
