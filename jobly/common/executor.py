"""
Query Executor

This module is the only place that talks to PostgreSQL. It takes statements
assembled from the pure fragment builders (positional `$k` placeholders plus a
value sequence), adapts them to psycopg2's parameter style, runs them on a
pooled connection and turns "zero rows" into a not-found outcome.

Key Features:
- Bounded pool: at most `max_connections` connections, shared across threads
- Queued acquisition: callers wait up to `acquire_timeout_seconds` for a slot
- Per-statement timeout: enforced server-side via `statement_timeout`
- Transactions: commit on success, rollback on any error
"""

import logging
import re
import threading
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from typing import Any, Optional

import psycopg2
import psycopg2.extras
import psycopg2.pool

from .db_config import DatabaseConfig
from .errors import NotFoundError

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\$(\d+)")


class DatabaseError(Exception):
    """Raised when a database operation fails."""

    pass


def to_driver_params(
    statement: str, values: Sequence[Any]
) -> tuple[str, Optional[list[Any]]]:
    """
    Rewrite `$k` placeholders into psycopg2's `%s` style.

    Values are reordered to follow placeholder appearance, so `$2 ... $1`
    binds correctly and a placeholder may be used more than once. Literal `%`
    characters are doubled whenever parameters are passed to the driver.

    Args:
        statement: SQL text with `$1..$n` placeholders
        values: Bound values; `values[k - 1]` belongs to `$k`

    Returns:
        Tuple of (driver SQL, driver parameters or None if nothing is bound)

    Raises:
        ValueError: If a placeholder refers to a missing value

    Example:
        >>> to_driver_params("UPDATE jobs SET title=$1 WHERE id = $2", ["New", 7])
        ('UPDATE jobs SET title=%s WHERE id = %s', ['New', 7])
    """
    if not _PLACEHOLDER_RE.search(statement):
        return statement, None

    ordered: list[Any] = []

    def _replace(match: "re.Match[str]") -> str:
        index = int(match.group(1))
        if index < 1 or index > len(values):
            raise ValueError(
                f"Placeholder ${index} has no bound value ({len(values)} values given)"
            )
        ordered.append(values[index - 1])
        return "%s"

    text = _PLACEHOLDER_RE.sub(_replace, statement.replace("%", "%%"))
    return text, ordered


class QueryExecutor:
    """
    Executes parameterized statements against PostgreSQL.

    This class provides methods to:
    - Fetch all rows of a query as dictionaries
    - Fetch exactly one row, raising NotFoundError when there is none
    - Manage a bounded, thread-safe connection pool

    Example:
        >>> executor = QueryExecutor(load_database_config())
        >>> executor.fetch_all("SELECT id FROM jobs WHERE salary >= $1", [20000])
        [{'id': 2}, {'id': 3}]
    """

    def __init__(self, config: DatabaseConfig, pool: Any = None):
        """
        Initialize the connection pool.

        Args:
            config: Pool size, timeouts and connection URL
            pool: Optional pre-built pool exposing getconn/putconn/closeall

        Raises:
            DatabaseError: If the pool cannot be created
        """
        self.config = config
        self._slots = threading.BoundedSemaphore(config.max_connections)

        if pool is not None:
            self._pool = pool
            return

        try:
            self._pool = psycopg2.pool.ThreadedConnectionPool(
                config.min_connections,
                config.max_connections,
                config.url,
                options=f"-c statement_timeout={config.statement_timeout_ms}",
            )
            logger.info(
                "Database connection pool created",
                extra={"max_connections": config.max_connections},
            )
        except psycopg2.Error as e:
            raise DatabaseError(f"Failed to connect to database: {e}") from e

    @contextmanager
    def _get_connection(self) -> Generator[Any, None, None]:
        """
        Context manager for pooled database connections.

        Waits for a free slot, commits on success, rolls back on error and
        always returns the connection to the pool.

        Yields:
            Database connection

        Raises:
            DatabaseError: If no connection frees up within the acquire timeout
        """
        if not self._slots.acquire(timeout=self.config.acquire_timeout_seconds):
            logger.error(
                "Timed out waiting for a database connection",
                extra={"acquire_timeout_seconds": self.config.acquire_timeout_seconds},
            )
            raise DatabaseError(
                f"No database connection available after "
                f"{self.config.acquire_timeout_seconds}s"
            )

        conn = None
        try:
            conn = self._pool.getconn()
            yield conn
            conn.commit()
        except Exception as e:
            if conn is not None:
                conn.rollback()
            logger.error(
                "Database operation failed, rolled back transaction",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise
        finally:
            if conn is not None:
                self._pool.putconn(conn)
            self._slots.release()

    def _run(self, statement: str, values: Sequence[Any]) -> list[dict[str, Any]]:
        text, params = to_driver_params(statement, values)

        try:
            with (
                self._get_connection() as conn,
                conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur,
            ):
                cur.execute(text, params)
                rows = cur.fetchall() if cur.description else []

                logger.debug(
                    "Executed statement",
                    extra={"rowcount": cur.rowcount, "params_count": len(params or [])},
                )
                return [dict(row) for row in rows]

        except psycopg2.Error as e:
            logger.error(
                "Statement failed",
                extra={"error": str(e), "pgcode": getattr(e, "pgcode", None)},
            )
            raise DatabaseError(f"Statement failed: {e}") from e

    def fetch_all(
        self, statement: str, values: Sequence[Any] = ()
    ) -> list[dict[str, Any]]:
        """
        Run a statement and return every row.

        Args:
            statement: SQL with `$k` placeholders
            values: Bound values

        Returns:
            List of rows as dictionaries (empty when nothing matched)

        Raises:
            DatabaseError: If execution fails
        """
        return self._run(statement, values)

    def fetch_one(
        self,
        statement: str,
        values: Sequence[Any] = (),
        not_found: str = "Not Found",
    ) -> dict[str, Any]:
        """
        Run a statement expected to return (or affect with RETURNING) one row.

        Args:
            statement: SQL with `$k` placeholders
            values: Bound values
            not_found: Message for the NotFoundError raised on zero rows

        Returns:
            The first row as a dictionary

        Raises:
            NotFoundError: If the statement returned no rows
            DatabaseError: If execution fails
        """
        rows = self._run(statement, values)
        if not rows:
            raise NotFoundError(not_found)
        return rows[0]

    def close(self) -> None:
        """Close every pooled connection."""
        self._pool.closeall()
        logger.info("Database connection pool closed")

    def __enter__(self) -> "QueryExecutor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


__all__ = ["DatabaseError", "QueryExecutor", "to_driver_params"]
