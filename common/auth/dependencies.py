"""
FastAPI authentication dependencies.

Provides a factory that turns a token provider into a dependency that can
be injected into route handlers.

Example:
    from common.auth import JWTAuth, create_auth_dependency

    auth = JWTAuth(secret="your-secret")
    require_auth = create_auth_dependency(lambda: auth)

    @app.get("/notifications")
    async def list_notifications(user: dict = Depends(require_auth)):
        return {"user_id": user["user_id"]}
"""

from typing import Callable, Dict, Any, Optional
from fastapi import Header

from common.auth.jwt_auth import JWTAuth
from common.utils.exceptions import UnauthorizedException


def create_auth_dependency(
    get_auth_provider: Callable[[], JWTAuth],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Factory to create FastAPI auth dependencies.

    Args:
        get_auth_provider: Callable that returns the JWTAuth instance
        header_name: Header to extract token from (default: Authorization)
        scheme: Auth scheme prefix (default: Bearer)

    Returns:
        A FastAPI dependency returning ``{"user_id": ..., "role": ...}``
    """

    async def get_current_user(
        authorization: Optional[str] = Header(None, alias=header_name),
    ) -> Dict[str, Any]:
        """
        Extract and verify the caller from the authorization header.

        Raises:
            UnauthorizedException: If token is missing, invalid, or expired
        """
        if not authorization:
            raise UnauthorizedException(
                message="Not authorized, no token provided",
                code="AUTH_REQUIRED",
            )

        prefix = f"{scheme} "
        if not authorization.startswith(prefix):
            raise UnauthorizedException(
                message=f"Invalid authorization scheme. Expected: {scheme}",
                code="INVALID_AUTH_SCHEME",
            )

        token = authorization[len(prefix):].strip()
        if not token:
            raise UnauthorizedException(message="Token is empty", code="EMPTY_TOKEN")

        auth = get_auth_provider()
        try:
            payload = await auth.verify_token(token)
        except ValueError as e:
            raise UnauthorizedException(message=str(e), code="INVALID_TOKEN")

        user_id = payload.get("sub") or payload.get("id")
        if not user_id:
            raise UnauthorizedException(
                message="Token has no subject",
                code="INVALID_TOKEN",
            )

        return {"user_id": str(user_id), "role": payload.get("role")}

    return get_current_user
