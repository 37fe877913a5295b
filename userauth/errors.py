"""Exception types raised by the data-access and service layers."""


class UserAuthError(Exception):
    """Base class for all userauth errors."""


class StoreUnavailableError(UserAuthError):
    """The database could not be reached or rejected a connection-level operation.

    Mapped to 503 at the HTTP boundary. The request fails, the process keeps running.
    """


class TransactionError(UserAuthError):
    """A unit of work was driven out of order (nested begin, commit without begin, ...)."""


class UnsupportedSpecificationError(UserAuthError):
    """A repository was asked for a predicate shape it does not implement."""


class UsernameTakenError(UserAuthError):
    """An insert was rejected because the username already exists.

    Attributes:
        username: The conflicting username
    """

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username '{username}' is already registered")


class TokenSigningError(UserAuthError):
    """The token issuer failed to sign a claim set."""
