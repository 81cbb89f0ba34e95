"""Shared test fixtures for Campus Connect backend tests."""

import os

# Settings are read at import time; give the app a secret before anything imports it.
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from campus_connect.services.notifications import NotificationStore


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def other_user_id():
    return str(ObjectId())


@pytest.fixture
def store():
    """Fresh in-memory notification store per test."""
    return NotificationStore()


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like find_one, insert_one,
    # count_documents etc. stay as AsyncMock.
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_users_collection():
    collection = AsyncMock()
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection, mock_users_collection):
    collections = {
        "messages": mock_collection,
        "users": mock_users_collection,
    }
    db = MagicMock()
    db.__getitem__ = MagicMock(side_effect=lambda name: collections[name])
    return db


@pytest.fixture
def set_cursor():
    """Make ``collection.find(...)[.sort(...)][.limit(...)].to_list()`` return docs."""
    def _set(collection, docs):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.limit.return_value = cursor
        cursor.to_list = AsyncMock(return_value=docs)
        collection.find.return_value = cursor
        return cursor
    return _set


@pytest.fixture
def base_time():
    return datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_message(base_time):
    """Build a formatted message dict as MessageService returns it."""
    def _make(sender, receiver, minutes=0, is_read=False, content="hello", deleted_by=None):
        return {
            "id": str(ObjectId()),
            "sender": sender,
            "receiver": receiver,
            "content": content,
            "messageType": "text",
            "attachments": [],
            "isRead": is_read,
            "readAt": None,
            "isDeleted": False,
            "deletedBy": deleted_by or [],
            "relatedTo": {"type": "general", "id": None},
            "createdAt": base_time + timedelta(minutes=minutes),
        }
    return _make
