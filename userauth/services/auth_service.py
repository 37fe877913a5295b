"""Password hashing and access-token issuance."""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
import structlog

from userauth.config import get_settings
from userauth.errors import TokenSigningError
from userauth.models.auth import TokenClaims

logger = structlog.get_logger(__name__)


class AuthService:
    """bcrypt password hashing plus JWT issue/decode.

    The signing secret, algorithm and lifetime come from settings, so a
    rotated secret only needs a new ``JWT_SECRET`` and a restart.
    """

    def __init__(self):
        self.settings = get_settings()

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with a fresh random salt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Constant-time check of a password against a bcrypt hash.

        A malformed stored hash never matches.
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError:
            return False

    @property
    def token_lifetime(self) -> timedelta:
        return timedelta(hours=self.settings.token_expire_hours)

    def create_access_token(self, username: str) -> str:
        """Create a signed JWT carrying ``username``, ``iat`` and ``exp``.

        Args:
            username: Authenticated username

        Returns:
            Encoded JWT string

        Raises:
            TokenSigningError: If the claim set cannot be signed
        """
        now = datetime.now(timezone.utc)
        issued_at = int(now.timestamp())
        claims = TokenClaims(
            username=username,
            iat=issued_at,
            exp=issued_at + int(self.token_lifetime.total_seconds()),
        )
        try:
            token = jwt.encode(
                claims.model_dump(),
                self.settings.jwt_secret,
                algorithm=self.settings.jwt_algorithm,
            )
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
            logger.error("token_signing_failed", username=username, error=str(e))
            raise TokenSigningError(str(e)) from e

        logger.debug(
            "access_token_created",
            username=username,
            expires_hours=self.settings.token_expire_hours,
        )
        return token

    def decode_access_token(self, token: str) -> TokenClaims:
        """Decode and validate a JWT access token.

        Raises:
            ValueError: If the token is invalid, expired, or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[self.settings.jwt_algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise ValueError("Access token has expired")
        except jwt.InvalidTokenError as e:
            raise ValueError(f"Invalid access token: {e}")
        return TokenClaims.model_validate(payload)
