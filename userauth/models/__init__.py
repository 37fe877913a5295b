"""Models package exports."""

from userauth.models.auth import TokenClaims
from userauth.models.user import (
    SignInRequest,
    UserCreate,
    UserCreateRequest,
    UserPublic,
    UserRecord,
)

__all__ = [
    "SignInRequest",
    "TokenClaims",
    "UserCreate",
    "UserCreateRequest",
    "UserPublic",
    "UserRecord",
]
