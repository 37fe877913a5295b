"""Unit of work: one pooled connection plus its transaction boundary.

A unit of work belongs to a single request. It is never shared between
concurrent tasks, and only one transaction may be open on it at a time.

Usage::

    async with UnitOfWork(pool) as uow:
        await uow.begin()
        ...
        await uow.commit()

Leaving the block returns the connection to the pool and rolls back any
transaction still open.
"""

from typing import Awaitable, Optional

import asyncpg
import structlog

from userauth.database import STORE_CONNECTION_ERRORS
from userauth.errors import StoreUnavailableError, TransactionError

logger = structlog.get_logger(__name__)


class UnitOfWork:
    """Gateway to the relational store for one request."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool
        self._conn: Optional[asyncpg.Connection] = None
        self._transaction = None

    @property
    def connection(self) -> asyncpg.Connection:
        """The checked-out connection.

        Raises:
            TransactionError: If ``acquire()`` has not been called
        """
        if self._conn is None:
            raise TransactionError("Unit of work has no connection; call acquire() first")
        return self._conn

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    async def acquire(self) -> asyncpg.Connection:
        """Check out one connection, waiting until the pool has one free.

        Raises:
            StoreUnavailableError: If the pool cannot hand out a connection
            TransactionError: If this unit of work already holds one
        """
        if self._conn is not None:
            raise TransactionError("Unit of work already holds a connection")
        try:
            self._conn = await self._pool.acquire()
        except STORE_CONNECTION_ERRORS as e:
            logger.error("store_unavailable", operation="acquire", error=str(e))
            raise StoreUnavailableError("Could not acquire a database connection") from e
        return self._conn

    async def release(self) -> None:
        """Roll back any open transaction and return the connection to the pool."""
        if self._conn is None:
            return
        try:
            if self._transaction is not None:
                await self.rollback()
        finally:
            conn, self._conn = self._conn, None
            await self._pool.release(conn)

    async def begin(self) -> None:
        """Open a transaction on the held connection.

        Raises:
            TransactionError: If a transaction is already open
            StoreUnavailableError: If the store rejects BEGIN
        """
        if self._transaction is not None:
            raise TransactionError("Nested transactions are not supported")
        transaction = self.connection.transaction()
        await self._run("begin", transaction.start())
        self._transaction = transaction

    async def commit(self) -> None:
        transaction = self._take_transaction("commit")
        await self._run("commit", transaction.commit())

    async def rollback(self) -> None:
        transaction = self._take_transaction("rollback")
        await self._run("rollback", transaction.rollback())

    def _take_transaction(self, operation: str):
        if self._transaction is None:
            raise TransactionError(f"Cannot {operation}: no transaction is open")
        # asyncpg transactions are finished after commit/rollback, even a failed one
        transaction, self._transaction = self._transaction, None
        return transaction

    async def _run(self, operation: str, step: Awaitable) -> None:
        try:
            await step
        except (asyncpg.PostgresError, *STORE_CONNECTION_ERRORS) as e:
            logger.error("store_unavailable", operation=operation, error=str(e))
            raise StoreUnavailableError(f"Transaction {operation} failed") from e

    async def __aenter__(self) -> "UnitOfWork":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()
