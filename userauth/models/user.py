"""User data-transfer models for the HTTP, service and repository layers."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

# bcrypt only reads the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72


class UserCreateRequest(BaseModel):
    """Registration payload.

    Attributes:
        username: Unique login name
        password: Plain-text password, hashed before it is stored
        interests: Free-text profile field
    """

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    interests: str

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        """Ensure username is not whitespace only."""
        if not v.strip():
            raise ValueError("Username cannot be empty or whitespace only")
        return v

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        """Reject passwords bcrypt cannot hash in full."""
        if len(v.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(
                f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes when UTF-8 encoded"
            )
        return v


class SignInRequest(BaseModel):
    """Login credentials."""

    username: str
    password: str


class UserCreate(BaseModel):
    """Row to insert, with the password already hashed."""

    username: str
    hashed_password: str
    registration_date: datetime
    interests: str


class UserRecord(BaseModel):
    """A stored ``users`` row."""

    id: int
    username: str
    hashed_password: str
    registration_date: datetime
    interests: str


class UserPublic(BaseModel):
    """Public projection of a user. Never carries password material."""

    id: int
    username: str
    interests: str

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserPublic":
        return cls(id=record.id, username=record.username, interests=record.interests)
