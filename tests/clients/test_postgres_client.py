"""Tests for PostgresClient - pooling and context-bound transactions.

The psycopg2 pool is patched; these tests check which connection each call
uses and when it commits, rolls back or sets savepoints.
"""

from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from clients.postgres_client import PostgresClient


@pytest.fixture
def pool_cls():
    with patch("clients.postgres_client.psycopg2.pool.ThreadedConnectionPool") as pool_cls, \
            patch("clients.postgres_client.psycopg2.extras.register_default_jsonb"):
        yield pool_cls
    PostgresClient._connection_pools.clear()


@pytest.fixture
def pool(pool_cls):
    return pool_cls.return_value


@pytest.fixture
def conn(pool):
    conn = MagicMock(name="conn")
    pool.getconn.return_value = conn
    return conn


@pytest.fixture
def db(pool_cls):
    return PostgresClient(f"postgresql://test/{uuid4()}")


def _cursor(conn):
    return conn.cursor.return_value.__enter__.return_value


def _executed(conn):
    return [c.args[0] for c in _cursor(conn).execute.call_args_list]


class TestSingleStatements:

    def test_execute_commits_and_returns_connection(self, db, pool, conn):
        db.execute("UPDATE parties SET name = 'x'")

        conn.commit.assert_called_once()
        pool.putconn.assert_called_once_with(conn)

    def test_execute_returns_row_dicts(self, db, conn):
        _cursor(conn).fetchall.return_value = [{"num": 1}]

        assert db.execute("SELECT 1 AS num") == [{"num": 1}]

    def test_execute_single_empty_is_none(self, db, conn):
        _cursor(conn).fetchall.return_value = []

        assert db.execute_single("SELECT 1 WHERE false") is None

    def test_execute_scalar_returns_first_value(self, db, conn):
        _cursor(conn).fetchone.return_value = (7,)

        assert db.execute_scalar("SELECT 7") == 7

    def test_failed_statement_rolls_back(self, db, pool, conn):
        _cursor(conn).execute.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            db.execute("INSERT INTO parties ...")

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
        pool.putconn.assert_called_once_with(conn)

    def test_uuid_params_converted(self, db, conn):
        party_id = uuid4()

        db.execute("SELECT * FROM parties WHERE id = %s", (party_id,))

        assert _cursor(conn).execute.call_args[0][1] == (str(party_id),)


class TestTransaction:

    def test_statements_share_one_connection(self, db, pool, conn):
        with db.transaction():
            db.execute("INSERT INTO parties ...")
            db.execute_scalar("INSERT INTO invoice_sequence ...")
            db.execute_returning("INSERT INTO invoices ...")

        assert pool.getconn.call_count == 1
        conn.commit.assert_called_once()
        pool.putconn.assert_called_once_with(conn)

    def test_exception_rolls_back_everything(self, db, pool, conn):
        with pytest.raises(ValueError):
            with db.transaction():
                db.execute("INSERT INTO parties ...")
                raise ValueError("product not found")

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
        pool.putconn.assert_called_once_with(conn)

    def test_in_transaction_flag(self, db, conn):
        assert db.in_transaction is False
        with db.transaction():
            assert db.in_transaction is True
        assert db.in_transaction is False

    def test_nested_block_uses_savepoint(self, db, conn):
        with db.transaction():
            with db.transaction():
                db.execute("INSERT INTO products ...")

        assert _executed(conn) == [
            "SAVEPOINT sp_1",
            "INSERT INTO products ...",
            "RELEASE SAVEPOINT sp_1",
        ]
        conn.commit.assert_called_once()

    def test_failed_nested_block_rolls_back_to_savepoint_only(self, db, conn):
        with db.transaction():
            with pytest.raises(RuntimeError):
                with db.transaction():
                    raise RuntimeError("duplicate sku")
            db.execute("INSERT INTO products ...")

        assert _executed(conn) == [
            "SAVEPOINT sp_1",
            "ROLLBACK TO SAVEPOINT sp_1",
            "INSERT INTO products ...",
        ]
        conn.rollback.assert_not_called()
        conn.commit.assert_called_once()


class TestPools:

    def test_pool_created_once_per_url(self, pool_cls):
        url = f"postgresql://test/{uuid4()}"
        PostgresClient(url)
        PostgresClient(url)

        assert pool_cls.call_count == 1

    def test_close_all_pools(self, db, pool):
        PostgresClient.close_all_pools()

        pool.closeall.assert_called_once()
        assert PostgresClient._connection_pools == {}
