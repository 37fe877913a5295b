"""Signed credential claim set."""

from pydantic import BaseModel, model_validator


class TokenClaims(BaseModel):
    """Payload embedded in an access token.

    Attributes:
        username: Subject of the token
        iat: Issued-at, epoch seconds
        exp: Expiry, epoch seconds
    """

    username: str
    iat: int
    exp: int

    @model_validator(mode="after")
    def expiry_after_issue(self) -> "TokenClaims":
        """Reject claim sets that expire before they are issued."""
        if self.exp <= self.iat:
            raise ValueError("exp must be later than iat")
        return self
