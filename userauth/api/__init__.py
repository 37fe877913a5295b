"""API package exports."""

from userauth.api.auth import router as auth_router
from userauth.api.middleware import CorrelationIdMiddleware
from userauth.api.routes import router

__all__ = ["auth_router", "router", "CorrelationIdMiddleware"]
