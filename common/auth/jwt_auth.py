"""
Bearer token signing and verification.

Users log in through the campus auth service, which signs its tokens with
the shared ``JWT_SECRET``. This module only needs to read those tokens; the
signing half exists for tests and internal callers.

Example:
    auth = JWTAuth(secret=settings.JWT_SECRET)

    token = await auth.create_token(user_id, role="student")
    claims = await auth.verify_token(token)
    claims["sub"]  # user_id
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from jose import jwt, ExpiredSignatureError, JWTError


class JWTAuth:
    """HMAC-signed access tokens; verification needs only the shared secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 30,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)

    async def create_token(self, user_id: str, **claims: Any) -> str:
        """Sign a token whose subject is ``user_id``; extra claims (e.g. role) are embedded."""
        issued_at = datetime.now(timezone.utc)
        return jwt.encode(
            {
                **claims,
                "sub": str(user_id),
                "iat": issued_at,
                "exp": issued_at + self.access_token_expire,
            },
            self.secret,
            algorithm=self.algorithm,
        )

    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Decode ``token`` and return its claims.

        Raises:
            ValueError: Expired, tampered with, or not a JWT at all
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise ValueError("Token expired")
        except JWTError as e:
            raise ValueError(f"Invalid token: {e}")
