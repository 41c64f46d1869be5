"""
Store handle: one sqlite3 connection to a counter database.

The connection runs in autocommit mode and transactions are started
explicitly with BEGIN IMMEDIATE, which takes the database write lock up
front. A second writer (thread, handle or process) waits on the busy
timeout until the first one commits or rolls back.
"""
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence, Union

from sqlite_counter.errors import ConfigError, StoreError
from sqlite_counter.schema import COUNTER_SCHEMA, SchemaSpec, ensure_schema

log = logging.getLogger(__name__)

MEMORY = ":memory:"
DEFAULT_DB_NAME = "counter.db"
DEFAULT_TIMEOUT = 30.0

PathLike = Union[str, Path]


def _home_dir() -> Path:
    try:
        return Path.home()
    except (RuntimeError, KeyError) as exc:
        raise ConfigError(f"cannot determine home directory for default database path: {exc}") from exc


def resolve_db_path(path: Optional[PathLike] = None, home: Optional[PathLike] = None) -> str:
    """
    Return the database path to open.

    An explicit path (including ":memory:") wins; otherwise the database is
    <home>/counter.db, where home defaults to the user's home directory.
    """
    if path:
        return str(path)
    base = Path(home) if home else _home_dir()
    return str(base / DEFAULT_DB_NAME)


class StoreHandle:
    def __init__(self, conn: sqlite3.Connection, path: str):
        self._conn = conn
        self.path = path

    @classmethod
    def open(
        cls,
        path: Optional[PathLike] = None,
        *,
        home: Optional[PathLike] = None,
        timeout: float = DEFAULT_TIMEOUT,
        schema: SchemaSpec = COUNTER_SCHEMA,
    ) -> "StoreHandle":
        """Open (creating if needed) the database and bring its schema up to date."""
        db_path = resolve_db_path(path, home)
        try:
            conn = sqlite3.connect(db_path, timeout=timeout, isolation_level=None)
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open counter database {db_path!r}: {exc}") from exc

        try:
            ensure_schema(conn, schema)
        except BaseException:
            conn.close()
            raise
        log.debug("opened counter store at %s", db_path)
        return cls(conn, db_path)

    # ======================
    # transactions
    # ======================
    @property
    def in_transaction(self) -> bool:
        return self._conn.in_transaction

    def begin(self) -> None:
        self.execute("BEGIN IMMEDIATE")

    def commit(self) -> None:
        try:
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"commit failed on {self.path!r}: {exc}") from exc

    def rollback(self) -> None:
        try:
            self._conn.rollback()
        except sqlite3.Error as exc:
            raise StoreError(f"rollback failed on {self.path!r}: {exc}") from exc

    @contextmanager
    def transaction(self) -> Iterator["StoreHandle"]:
        """Commit on success, roll back and re-raise on any exception."""
        self.begin()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        self.commit()

    # ======================
    # statements
    # ======================
    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, params)
        except (sqlite3.Error, OverflowError) as exc:
            raise StoreError(f"{exc} (database {self.path!r})") from exc

    def fetchone(self, sql: str, params: Sequence[Any] = ()) -> Optional[tuple]:
        cur = self.execute(sql, params)
        try:
            return cur.fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"{exc} (database {self.path!r})") from exc

    def fetchall(self, sql: str, params: Sequence[Any] = ()) -> List[tuple]:
        cur = self.execute(sql, params)
        try:
            return cur.fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"{exc} (database {self.path!r})") from exc

    # ======================
    # lifecycle
    # ======================
    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "StoreHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
