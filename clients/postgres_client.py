"""
PostgreSQL client with connection pooling and context-bound transactions.

Uses psycopg2 with ThreadedConnectionPool. Outside a transaction every call
borrows a pooled connection, runs one statement and commits. Inside
``transaction()`` all calls made from the same context share one connection
and commit (or roll back) together; nested ``transaction()`` blocks become
savepoints.
"""

import logging
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, List, Tuple
from uuid import UUID

import psycopg2
import psycopg2.extras
import psycopg2.pool

logger = logging.getLogger(__name__)

# Global JSONB registration flag
_jsonb_registered = False


class _ActiveTransaction:
    """Connection bound to the current context plus savepoint depth."""

    def __init__(self, conn):
        self.conn = conn
        self.depth = 0


class PostgresClient:
    """
    PostgreSQL client for the billing store.

    Usage:
        db = PostgresClient(database_url)

        parties = db.execute("SELECT * FROM parties ORDER BY name")

        # Several statements, one commit
        with db.transaction():
            db.execute_returning("INSERT INTO parties ... RETURNING *", params)
            db.execute_returning("INSERT INTO invoices ... RETURNING *", params)
    """

    # Class-level connection pools shared across instances
    _connection_pools: Dict[str, psycopg2.pool.ThreadedConnectionPool] = {}
    _pools_lock = threading.RLock()

    def __init__(self, database_url: str):
        self._database_url = database_url
        self._active: ContextVar[_ActiveTransaction | None] = ContextVar(
            f"postgres_tx_{id(self)}", default=None
        )
        self._ensure_connection_pool()

    def _ensure_connection_pool(self) -> None:
        """Create connection pool if it doesn't exist."""
        with self._pools_lock:
            if self._database_url not in self._connection_pools:
                pool = psycopg2.pool.ThreadedConnectionPool(
                    minconn=2,
                    maxconn=20,
                    dsn=self._database_url,
                    connect_timeout=30,
                )

                global _jsonb_registered
                if not _jsonb_registered:
                    psycopg2.extras.register_default_jsonb(globally=True)
                    _jsonb_registered = True

                self._connection_pools[self._database_url] = pool
                logger.info("Connection pool created")

    def _pool(self) -> psycopg2.pool.ThreadedConnectionPool:
        if self._database_url not in self._connection_pools:
            self._ensure_connection_pool()
        return self._connection_pools[self._database_url]

    @property
    def in_transaction(self) -> bool:
        """Whether the current context has an open transaction."""
        return self._active.get() is not None

    @contextmanager
    def get_connection(self):
        """Connection of the open transaction, or a pooled one for a single statement."""
        active = self._active.get()
        if active is not None:
            yield active.conn
            return

        pool = self._pool()
        conn = None
        try:
            conn = pool.getconn()
            if conn is None:
                raise RuntimeError("Could not get connection from pool")
            yield conn
        except Exception:
            if conn:
                conn.rollback()
            raise
        finally:
            if conn:
                pool.putconn(conn)

    @contextmanager
    def transaction(self):
        """
        Run the enclosed statements atomically.

        The outermost block commits on success and rolls back on any exception.
        Inner blocks use SAVEPOINT so a failed inner block can be retried
        without aborting the outer transaction.
        """
        active = self._active.get()

        if active is not None:
            active.depth += 1
            savepoint = f"sp_{active.depth}"
            with active.conn.cursor() as cur:
                cur.execute(f"SAVEPOINT {savepoint}")
            try:
                yield
            except Exception:
                with active.conn.cursor() as cur:
                    cur.execute(f"ROLLBACK TO SAVEPOINT {savepoint}")
                raise
            else:
                with active.conn.cursor() as cur:
                    cur.execute(f"RELEASE SAVEPOINT {savepoint}")
            finally:
                active.depth -= 1
        else:
            pool = self._pool()
            conn = pool.getconn()
            if conn is None:
                raise RuntimeError("Could not get connection from pool")
            token = self._active.set(_ActiveTransaction(conn))
            try:
                yield
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                self._active.reset(token)
                pool.putconn(conn)

    def _commit_unless_in_transaction(self, conn) -> None:
        if self._active.get() is None:
            conn.commit()

    def _convert_params(self, params: Tuple | Dict | None) -> Tuple | Dict | None:
        """Convert UUID objects to strings."""
        if params is None:
            return None

        def convert(value: Any) -> Any:
            if isinstance(value, UUID):
                return str(value)
            if isinstance(value, list):
                return [convert(v) for v in value]
            if isinstance(value, tuple):
                return tuple(convert(v) for v in value)
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            return value

        return convert(params)

    def execute(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """Execute query, return list of row dicts. Empty list if no results."""
        params = self._convert_params(params)
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(query, params)
                rows = [dict(row) for row in cur.fetchall()] if cur.description else []
            self._commit_unless_in_transaction(conn)
            return rows

    def execute_single(self, query: str, params: Tuple | Dict | None = None) -> Dict[str, Any] | None:
        """Execute query, return first row or None."""
        results = self.execute(query, params)
        return results[0] if results else None

    def execute_scalar(self, query: str, params: Tuple | Dict | None = None) -> Any:
        """Execute query, return first value of first row or None."""
        params = self._convert_params(params)
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                result = cur.fetchone() if cur.description else None
            self._commit_unless_in_transaction(conn)
            return result[0] if result else None

    def execute_returning(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """Execute INSERT/UPDATE/DELETE with RETURNING, return results."""
        params = self._convert_params(params)
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(query, params)
                rows = [dict(row) for row in cur.fetchall()]
            self._commit_unless_in_transaction(conn)
            return rows

    def close(self) -> None:
        """Close connection pool."""
        with self._pools_lock:
            if self._database_url in self._connection_pools:
                self._connection_pools[self._database_url].closeall()
                del self._connection_pools[self._database_url]

    @classmethod
    def close_all_pools(cls) -> None:
        """Close all connection pools."""
        with cls._pools_lock:
            for pool in cls._connection_pools.values():
                pool.closeall()
            cls._connection_pools.clear()
