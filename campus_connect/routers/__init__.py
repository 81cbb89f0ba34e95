"""
Campus Connect API Routers.

All routers are imported here for easy access.
"""

from campus_connect.routers.notifications import router as notifications_router
from campus_connect.routers.messages import router as messages_router

__all__ = [
    "notifications_router",
    "messages_router",
]
