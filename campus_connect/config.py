"""
Campus Connect application settings.

Extends the base settings with messaging and notification configuration.
"""

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Campus Connect-specific settings."""

    # ==========================================================================
    # Logging
    # ==========================================================================
    # Directory for error.log / combined.log (written in production only)
    LOG_DIR: str = "logs"

    # ==========================================================================
    # Notifications
    # ==========================================================================
    NOTIFICATION_DEFAULT_LIMIT: int = 20
    NOTIFICATION_MAX_LIMIT: int = 100

    # ==========================================================================
    # Messaging
    # ==========================================================================
    MESSAGE_MAX_LENGTH: int = 2000
    CONVERSATION_DEFAULT_LIMIT: int = 50
    # Characters of message content copied into MESSAGE_RECEIVED notifications
    MESSAGE_PREVIEW_LENGTH: int = 100


# Global settings instance
settings = Settings()
