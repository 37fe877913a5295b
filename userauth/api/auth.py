"""Registration and login endpoints."""

from fastapi import APIRouter, HTTPException, status
import structlog

from userauth.errors import TokenSigningError, UsernameTakenError
from userauth.models.user import SignInRequest, UserCreateRequest, UserPublic
from userauth.services.auth_service import AuthService
from userauth.services.user_service import UserService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Auth"])


@router.post("/register")
async def register(request: UserCreateRequest) -> UserPublic:
    """Register a new user.

    Args:
        request: Username, password and interests

    Returns:
        The stored user without any password material

    Raises:
        HTTPException 409: If the username is already registered
    """
    user_service = UserService()

    try:
        return await user_service.register_user(request)
    except UsernameTakenError as e:
        logger.info("user_registration_conflict", username=e.username)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already registered",
        )


@router.post("/login")
async def login(request: SignInRequest) -> str:
    """Exchange username and password for an access token.

    Returns:
        The encoded JWT as a JSON string

    Raises:
        HTTPException 401: If the username is unknown or the password is wrong
        HTTPException 500: If the token cannot be signed
    """
    user_service = UserService()

    user = await user_service.authenticate_user(request.username, request.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    try:
        token = AuthService().create_access_token(user.username)
    except TokenSigningError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not issue access token",
        )

    logger.info("user_logged_in", user_id=user.id, username=user.username)
    return token
