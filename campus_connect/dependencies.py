"""
FastAPI dependencies for Campus Connect.

Provides dependency injection for all services.
"""

from typing import Annotated, Any, Dict, Optional

from fastapi import Depends, Header
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import JWTAuth, create_auth_dependency
from campus_connect.config import settings
from campus_connect.services.notifications.notification_store import NotificationStore
from campus_connect.services.messages.message_service import MessageService


# ─────────────────────────────────────────────────────────────────
# Service singletons
# ─────────────────────────────────────────────────────────────────

_jwt_auth: Optional[JWTAuth] = None
_notification_store: Optional[NotificationStore] = None
_message_service: Optional[MessageService] = None


# ─────────────────────────────────────────────────────────────────
# Initialization functions
# ─────────────────────────────────────────────────────────────────

def init_auth_services(
    secret: str,
    algorithm: str = "HS256",
    access_token_expire_minutes: int = 30,
) -> None:
    """Initialize auth services."""
    global _jwt_auth

    _jwt_auth = JWTAuth(
        secret=secret,
        algorithm=algorithm,
        access_token_expire_minutes=access_token_expire_minutes,
    )


def init_notification_services(store: Optional[NotificationStore] = None) -> None:
    """Initialize the in-memory notification store."""
    global _notification_store

    _notification_store = store if store is not None else NotificationStore()


def init_message_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize messaging services."""
    global _message_service

    _message_service = MessageService(db=db, max_length=settings.MESSAGE_MAX_LENGTH)


def init_all_services(db: AsyncIOMotorDatabase) -> None:
    """
    Initialize all services at application startup.

    Args:
        db: Main MongoDB database connection
    """
    init_auth_services(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    init_notification_services()
    init_message_services(db)


def shutdown_services() -> None:
    """Release in-memory state at application shutdown."""
    global _notification_store, _message_service

    if _notification_store is not None:
        _notification_store.clear()
    _notification_store = None
    _message_service = None


# ─────────────────────────────────────────────────────────────────
# Getters
# ─────────────────────────────────────────────────────────────────

def get_jwt_auth() -> JWTAuth:
    """Get JWT auth provider."""
    if _jwt_auth is None:
        raise RuntimeError("Auth services not initialized.")
    return _jwt_auth


def get_notification_store() -> NotificationStore:
    """Get notification store instance."""
    if _notification_store is None:
        raise RuntimeError("Notification services not initialized.")
    return _notification_store


def get_message_service() -> MessageService:
    """Get message service instance."""
    if _message_service is None:
        raise RuntimeError("Message services not initialized.")
    return _message_service


# ─────────────────────────────────────────────────────────────────
# Auth
# ─────────────────────────────────────────────────────────────────

_get_current_user = create_auth_dependency(lambda: get_jwt_auth())


async def require_auth(
    authorization: Annotated[Optional[str], Header()] = None,
) -> Dict[str, Any]:
    """Dependency that requires a valid bearer token."""
    return await _get_current_user(authorization)
