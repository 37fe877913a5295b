"""User registration, lookup and authentication."""

import asyncio
from datetime import datetime, timezone
from typing import Optional

import structlog

from userauth.database import get_pool
from userauth.models.user import UserCreate, UserCreateRequest, UserPublic, UserRecord
from userauth.repositories.specifications import ById, ByUsername, UsersSpecification
from userauth.repositories.unit_of_work import UnitOfWork
from userauth.repositories.users import UsersRepository
from userauth.services.auth_service import AuthService

logger = structlog.get_logger(__name__)


class UserService:
    """Orchestrates hashing, timestamping and the users repository.

    Each call checks out its own unit of work, so concurrent requests only
    contend for pool connections. Username uniqueness is left to the store.
    """

    def __init__(self):
        self.auth_service = AuthService()
        self.repository = UsersRepository()

    async def register_user(self, request: UserCreateRequest) -> UserPublic:
        """Hash the password, stamp the registration time and insert the user.

        Raises:
            UsernameTakenError: If the username already exists
            StoreUnavailableError: If the database cannot be reached
        """
        # bcrypt is CPU-bound
        hashed_password = await asyncio.to_thread(
            self.auth_service.hash_password, request.password
        )
        user_create = UserCreate(
            username=request.username,
            hashed_password=hashed_password,
            registration_date=datetime.now(timezone.utc),
            interests=request.interests,
        )

        pool = await get_pool()
        async with UnitOfWork(pool) as uow:
            record = await self.repository.create_from_dto(user_create, uow)

        logger.info("user_registered", user_id=record.id, username=record.username)
        return UserPublic.from_record(record)

    async def find_by_username(self, username: str) -> Optional[UserPublic]:
        record = await self._get_one_by(ByUsername(username))
        return UserPublic.from_record(record) if record else None

    async def find_by_id(self, user_id: int) -> Optional[UserPublic]:
        record = await self._get_one_by(ById(user_id))
        return UserPublic.from_record(record) if record else None

    async def authenticate_user(self, username: str, password: str) -> Optional[UserPublic]:
        """Return the user only if ``password`` matches the stored hash.

        An unknown username and a wrong password both return None.
        """
        record = await self._get_one_by(ByUsername(username))
        if record is None:
            logger.info("login_failed", username=username)
            return None

        matches = await asyncio.to_thread(
            self.auth_service.verify_password, password, record.hashed_password
        )
        if not matches:
            logger.info("login_failed", username=username)
            return None

        return UserPublic.from_record(record)

    async def _get_one_by(self, specification: UsersSpecification) -> Optional[UserRecord]:
        pool = await get_pool()
        async with UnitOfWork(pool) as uow:
            return await self.repository.get_one_by(specification, uow)
