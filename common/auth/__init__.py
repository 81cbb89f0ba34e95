"""
Authentication module - JWT bearer tokens and FastAPI dependencies.
"""

from common.auth.jwt_auth import JWTAuth
from common.auth.dependencies import create_auth_dependency

__all__ = ["JWTAuth", "create_auth_dependency"]
