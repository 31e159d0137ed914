"""Database connection management"""
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from geo_elevate import config
from geo_elevate.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)


class Database:
    """
    SQLite database handle

    Each request acquires its own connection with connection() and releases
    it when the block exits. Connections run in autocommit mode; writes are
    grouped explicitly with transaction().
    """

    def __init__(
        self,
        path: Union[str, Path, None] = None,
        timeout: Optional[float] = None
    ):
        self.path = str(path if path is not None else config.DATABASE_PATH)
        self.timeout = config.SQLITE_TIMEOUT if timeout is None else timeout

    def connect(self) -> sqlite3.Connection:
        """Open a new configured connection (caller closes it)"""
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.path, timeout=self.timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Get a scoped database connection"""
        conn = self.connect()
        try:
            yield conn
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create tables if they don't exist"""
        from geo_elevate.db.schema import create_tables

        logger.info(f"Initializing database schema at {self.path}")
        with self.connection() as conn:
            create_tables(conn)


@contextmanager
def transaction(conn: sqlite3.Connection, immediate: bool = True) -> Iterator[sqlite3.Connection]:
    """
    Run a block inside a transaction, committing on success

    BEGIN IMMEDIATE takes the write lock up front so two submissions for the
    same user cannot both read the same daily total. If the connection is
    already inside a transaction the block joins it and the outer owner
    commits.

    A failed COMMIT rolls back like any other error, so the connection never
    stays inside a half-finished transaction. sqlite3 errors leave as
    ConflictError (lock contention) or QueryError.

    Raises:
        ConflictError: another connection held the lock past the timeout
        QueryError: any other sqlite3 failure
    """
    if conn.in_transaction:
        yield conn
        return

    try:
        conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
    except sqlite3.Error as e:
        raise wrap_external_exception(e, operation="begin_transaction") from e

    try:
        yield conn
        conn.execute("COMMIT")
    except BaseException as e:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
            logger.debug("Transaction rolled back")
        if isinstance(e, sqlite3.Error):
            raise wrap_external_exception(e, operation="transaction") from e
        raise
