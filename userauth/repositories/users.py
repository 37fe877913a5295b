"""Repository for the ``users`` table."""

from typing import Any, Mapping, Optional

import asyncpg
import structlog

from userauth.database import STORE_CONNECTION_ERRORS
from userauth.errors import (
    StoreUnavailableError,
    UnsupportedSpecificationError,
    UsernameTakenError,
)
from userauth.models.user import UserCreate, UserRecord
from userauth.repositories.base import Repository
from userauth.repositories.specifications import (
    ById,
    ByUsername,
    Comparison,
    UsersSpecification,
)
from userauth.repositories.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)

_COLUMNS = "id, username, hashed_pwd, registration_date, interests"


def _to_record(row: Mapping[str, Any]) -> UserRecord:
    return UserRecord(
        id=row["id"],
        username=row["username"],
        hashed_password=row["hashed_pwd"],
        registration_date=row["registration_date"],
        interests=row["interests"],
    )


def _where_clause(specification: UsersSpecification) -> tuple[str, Any]:
    """Translate a specification into a parameterized WHERE clause.

    Only equality on ``id`` or ``username`` is implemented. Anything else is
    a caller bug and raises instead of returning an arbitrary row.
    """
    if isinstance(specification, (ById, ByUsername)):
        if specification.comparison is not Comparison.EQUALS:
            raise UnsupportedSpecificationError(
                f"Only equality is supported for users, got {specification.comparison.name} "
                f"on {type(specification).__name__}"
            )
        column = "id" if isinstance(specification, ById) else "username"
        return f"{column} = $1", specification.value

    raise UnsupportedSpecificationError(
        f"Unsupported users specification: {specification!r}"
    )


class UsersRepository(Repository[UserCreate, UserRecord, UsersSpecification]):
    """Insert and equality lookup for users."""

    async def create_from_dto(self, create: UserCreate, uow: UnitOfWork) -> UserRecord:
        """Insert a user and return the stored row with its assigned id.

        Raises:
            UsernameTakenError: If the username already exists
            StoreUnavailableError: If the connection fails mid-statement
        """
        try:
            row = await uow.connection.fetchrow(
                f"""
                INSERT INTO users (username, hashed_pwd, registration_date, interests)
                VALUES ($1, $2, $3, $4)
                RETURNING {_COLUMNS}
                """,
                create.username,
                create.hashed_password,
                create.registration_date,
                create.interests,
            )
        except asyncpg.exceptions.UniqueViolationError as e:
            raise UsernameTakenError(create.username) from e
        except STORE_CONNECTION_ERRORS as e:
            logger.error("store_unavailable", operation="insert_user", error=str(e))
            raise StoreUnavailableError("Database connection failed during insert") from e

        return _to_record(row)

    async def get_one_by(
        self, specification: UsersSpecification, uow: UnitOfWork
    ) -> Optional[UserRecord]:
        """Fetch one user by id or username equality.

        A statement the store rejects is logged and reported as no match.
        Losing the connection is not: that raises ``StoreUnavailableError``.

        Raises:
            UnsupportedSpecificationError: For any non-equality predicate
            StoreUnavailableError: If the connection fails
        """
        clause, value = _where_clause(specification)

        try:
            row = await uow.connection.fetchrow(
                f"SELECT {_COLUMNS} FROM users WHERE {clause} LIMIT 1",
                value,
            )
        except STORE_CONNECTION_ERRORS as e:
            logger.error("store_unavailable", operation="select_user", error=str(e))
            raise StoreUnavailableError("Database connection failed during lookup") from e
        except asyncpg.PostgresError as e:
            logger.warning(
                "user_lookup_failed",
                specification=type(specification).__name__,
                error=str(e),
            )
            return None

        if row is None:
            return None
        return _to_record(row)
