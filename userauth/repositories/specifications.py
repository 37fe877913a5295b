"""Closed predicate types describing which row a repository should fetch."""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Comparison(str, Enum):
    """How a specification's value is compared against the column."""

    EQUALS = "eq"
    GTE = "gte"
    LTE = "lte"
    LT = "lt"
    GT = "gt"


@dataclass(frozen=True)
class ById:
    """Match on the store-assigned id."""

    value: int
    comparison: Comparison = Comparison.EQUALS


@dataclass(frozen=True)
class ByUsername:
    """Match on the username."""

    value: str
    comparison: Comparison = Comparison.EQUALS


UsersSpecification = Union[ById, ByUsername]
