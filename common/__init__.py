"""
Common library for reusable infrastructure components.

- database: Async MongoDB connection (Motor)
- auth: JWT bearer tokens and FastAPI auth dependencies
- logger: Leveled console/file logging
- utils: Standard responses and exceptions
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import JWTAuth, create_auth_dependency
from common.logger import LoggerConfig, configure_logging, get_logger
from common.utils import (
    success_response,
    error_response,
    APIException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "JWTAuth",
    "create_auth_dependency",
    # Logging
    "LoggerConfig",
    "configure_logging",
    "get_logger",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ValidationException",
    # Config
    "BaseAppSettings",
]
