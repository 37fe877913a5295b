"""Generic repository contract."""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from userauth.repositories.unit_of_work import UnitOfWork

CreateT = TypeVar("CreateT")
RecordT = TypeVar("RecordT")
SpecT = TypeVar("SpecT")


class Repository(ABC, Generic[CreateT, RecordT, SpecT]):
    """Maps between storage rows and data-transfer models for one table.

    Every operation runs on the caller's unit of work, so the caller owns
    the connection and any transaction around it.
    """

    @abstractmethod
    async def create_from_dto(self, create: CreateT, uow: UnitOfWork) -> RecordT:
        """Insert one row and return it as stored."""

    @abstractmethod
    async def get_one_by(self, specification: SpecT, uow: UnitOfWork) -> Optional[RecordT]:
        """Return the single row matching ``specification``, or None."""
