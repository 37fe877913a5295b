"""Unit tests for UnitOfWork connection and transaction handling."""

import asyncpg
import pytest

from userauth.errors import StoreUnavailableError, TransactionError
from userauth.repositories.unit_of_work import UnitOfWork


class FailingPool:
    """Pool whose checkout always fails."""

    def __init__(self, exc: Exception):
        self._exc = exc

    async def acquire(self):
        raise self._exc

    async def release(self, conn):
        raise AssertionError("nothing was acquired")


# ---------------------------------------------------------------------------
# acquire / release
# ---------------------------------------------------------------------------

class TestAcquireRelease:
    """Tests for connection checkout."""

    async def test_context_manager_acquires_and_releases(self, mock_pool):
        pool, conn = mock_pool

        async with UnitOfWork(pool) as uow:
            assert uow.connection is conn
            assert pool.acquired == 1

        assert pool.released == 1

    async def test_connection_before_acquire_raises(self, mock_pool):
        pool, _ = mock_pool
        uow = UnitOfWork(pool)

        with pytest.raises(TransactionError):
            _ = uow.connection

    async def test_double_acquire_raises(self, mock_pool):
        pool, _ = mock_pool

        async with UnitOfWork(pool) as uow:
            with pytest.raises(TransactionError):
                await uow.acquire()

    async def test_release_without_acquire_is_noop(self, mock_pool):
        pool, _ = mock_pool
        await UnitOfWork(pool).release()
        assert pool.released == 0

    @pytest.mark.parametrize(
        "exc",
        [
            OSError("connection refused"),
            asyncpg.exceptions.InterfaceError("pool is closing"),
            asyncpg.exceptions.ConnectionDoesNotExistError("gone"),
        ],
    )
    async def test_checkout_failure_is_store_unavailable(self, exc):
        with pytest.raises(StoreUnavailableError):
            async with UnitOfWork(FailingPool(exc)):
                pass

    async def test_released_even_when_body_raises(self, mock_pool):
        pool, _ = mock_pool

        with pytest.raises(RuntimeError):
            async with UnitOfWork(pool):
                raise RuntimeError("boom")

        assert pool.released == 1


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

class TestTransactions:
    """Tests for begin / commit / rollback."""

    async def test_begin_commit(self, mock_pool):
        pool, conn = mock_pool

        async with UnitOfWork(pool) as uow:
            await uow.begin()
            assert uow.in_transaction
            await uow.commit()
            assert not uow.in_transaction

        transaction = conn.transactions[0]
        transaction.start.assert_awaited_once()
        transaction.commit.assert_awaited_once()
        transaction.rollback.assert_not_awaited()

    async def test_begin_rollback(self, mock_pool):
        pool, conn = mock_pool

        async with UnitOfWork(pool) as uow:
            await uow.begin()
            await uow.rollback()

        conn.transactions[0].rollback.assert_awaited_once()
        conn.transactions[0].commit.assert_not_awaited()

    async def test_nested_begin_raises(self, mock_pool):
        pool, conn = mock_pool

        async with UnitOfWork(pool) as uow:
            await uow.begin()
            with pytest.raises(TransactionError, match="Nested"):
                await uow.begin()

        assert len(conn.transactions) == 1

    async def test_commit_without_begin_raises(self, mock_pool):
        pool, _ = mock_pool

        async with UnitOfWork(pool) as uow:
            with pytest.raises(TransactionError):
                await uow.commit()
            with pytest.raises(TransactionError):
                await uow.rollback()

    async def test_open_transaction_rolled_back_on_exit(self, mock_pool):
        pool, conn = mock_pool

        async with UnitOfWork(pool) as uow:
            await uow.begin()

        conn.transactions[0].rollback.assert_awaited_once()
        assert pool.released == 1

    async def test_commit_rejected_by_store(self, mock_pool):
        pool, conn = mock_pool

        async with UnitOfWork(pool) as uow:
            await uow.begin()
            conn.transactions[0].commit.side_effect = (
                asyncpg.exceptions.SerializationError("could not serialize access")
            )
            with pytest.raises(StoreUnavailableError):
                await uow.commit()
            assert not uow.in_transaction

        # the failed transaction is not rolled back a second time
        conn.transactions[0].rollback.assert_not_awaited()

    async def test_begin_rejected_by_store(self, mock_pool):
        pool, conn = mock_pool
        original = conn.transaction

        def failing_transaction():
            transaction = original()
            transaction.start.side_effect = OSError("reset by peer")
            return transaction

        conn.transaction = failing_transaction

        async with UnitOfWork(pool) as uow:
            with pytest.raises(StoreUnavailableError):
                await uow.begin()
            assert not uow.in_transaction
