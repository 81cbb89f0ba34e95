"""
Shared environment settings.

Pydantic Settings reads every field from the environment (or ``.env``).
Production deployments point at their own database and frontend through
the ``*_PROD`` variables, so one ``.env`` file can serve both.

Example:
    from common.config import BaseAppSettings

    class Settings(BaseAppSettings):
        LOG_DIR: str = "logs"

    settings = Settings()
    client = AsyncIOMotorClient(settings.get_mongodb_uri())
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    """Database, token and HTTP server settings shared by every service."""

    # ==========================================================================
    # Database
    # ==========================================================================
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_URI_PROD: Optional[str] = None
    MONGODB_DATABASE: str = "campus_connect"
    MONGODB_MAX_POOL_SIZE: int = 10
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MONGODB_SOCKET_TIMEOUT_MS: int = 45000

    # ==========================================================================
    # Bearer tokens (issued by the campus auth service)
    # ==========================================================================
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # ==========================================================================
    # HTTP server
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    ENVIRONMENT: str = "development"  # development, test, production

    FRONTEND_URL: str = "http://localhost:5173"
    FRONTEND_URL_PROD: Optional[str] = None
    CORS_ALLOW_CREDENTIALS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    def get_mongodb_uri(self) -> str:
        """Connection string for the current environment."""
        if self.is_production() and self.MONGODB_URI_PROD:
            return self.MONGODB_URI_PROD
        return self.MONGODB_URI

    def get_cors_origins(self) -> List[str]:
        """Allowed browser origins; FRONTEND_URL may list several, comma-separated."""
        raw = self.FRONTEND_URL_PROD if self.is_production() else self.FRONTEND_URL
        if not raw:
            return []
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    def validate_required(self) -> None:
        """
        Validate settings the app cannot start without.

        Raises:
            ValueError: Listing every problem found
        """
        errors = []

        if not self.JWT_SECRET:
            errors.append("JWT_SECRET is required to verify bearer tokens")

        if self.JWT_ACCESS_TOKEN_EXPIRE_MINUTES <= 0:
            errors.append("JWT_ACCESS_TOKEN_EXPIRE_MINUTES must be positive")

        if self.is_production() and not self.MONGODB_URI_PROD:
            errors.append("MONGODB_URI_PROD is required in production")

        if self.is_production() and not self.FRONTEND_URL_PROD:
            errors.append("FRONTEND_URL_PROD is required in production")

        if errors:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(errors))
