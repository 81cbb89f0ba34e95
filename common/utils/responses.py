"""
Response envelope helpers.

Successful calls answer ``{"success": true, "data": ..., "message": ...}``
and failures ``{"success": false, "error": {...}}``, so the frontend client
only has to branch on ``success``.
"""

from typing import Any, Optional, Dict


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Wrap ``data`` in the success envelope; empty parts are left out."""
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return body


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Build the error envelope.

    Args:
        message: Human-readable explanation
        code: Stable machine-readable code (e.g. ``MESSAGE_NOT_FOUND``)
        details: Extra context such as field validation errors
    """
    error: Dict[str, Any] = {"message": message}
    if code:
        error["code"] = code
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}
