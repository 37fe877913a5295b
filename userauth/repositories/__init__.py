"""Data-access layer: unit of work, specifications and repositories."""

from userauth.repositories.base import Repository
from userauth.repositories.specifications import (
    ById,
    ByUsername,
    Comparison,
    UsersSpecification,
)
from userauth.repositories.unit_of_work import UnitOfWork
from userauth.repositories.users import UsersRepository

__all__ = [
    "ById",
    "ByUsername",
    "Comparison",
    "Repository",
    "UnitOfWork",
    "UsersRepository",
    "UsersSpecification",
]
