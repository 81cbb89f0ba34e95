"""
HTTP errors carrying a machine-readable code.

Raise these from services and routers; ``api.py`` renders them as
``{"success": false, "error": {"message", "code", "details"}}``.

Example:
    from common.utils import NotFoundException

    message = await collection.find_one({"_id": ObjectId(message_id)})
    if not message:
        raise NotFoundException("Message not found", code="MESSAGE_NOT_FOUND")
"""

from typing import Optional, Any, Dict
from fastapi import HTTPException


class APIException(HTTPException):
    """
    Base API error.

    Subclasses only pick a status and defaults; every instance exposes
    ``message``, ``code`` and ``details`` for the error envelope.
    """

    status: int = 500
    default_message: str = "Internal server error"
    default_code: str = "INTERNAL_ERROR"
    default_headers: Optional[Dict[str, str]] = None

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details

        detail: Dict[str, Any] = {"message": self.message, "code": self.code}
        if details is not None:
            detail["details"] = details

        super().__init__(
            status_code=self.status,
            detail=detail,
            headers=headers or self.default_headers,
        )


class BadRequestException(APIException):
    """400 - malformed input."""
    status = 400
    default_message = "Bad request"
    default_code = "BAD_REQUEST"


class UnauthorizedException(APIException):
    """401 - missing, malformed or expired bearer token."""
    status = 401
    default_message = "Not authorized"
    default_code = "UNAUTHORIZED"
    default_headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenException(APIException):
    """403 - authenticated but not allowed to touch the resource."""
    status = 403
    default_message = "Forbidden"
    default_code = "FORBIDDEN"


class NotFoundException(APIException):
    status = 404
    default_message = "Resource not found"
    default_code = "NOT_FOUND"


class ValidationException(APIException):
    """422 - input passed schema checks but breaks a business rule."""
    status = 422
    default_message = "Validation error"
    default_code = "VALIDATION_ERROR"
