"""Services package exports."""

from userauth.services.auth_service import AuthService
from userauth.services.logging_service import configure_logging, get_logger
from userauth.services.user_service import UserService

__all__ = [
    "AuthService",
    "UserService",
    "configure_logging",
    "get_logger",
]
